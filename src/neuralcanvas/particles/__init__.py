"""Decorative particle field, independent of the data pipeline."""

from .animation import ParticleFieldAnimation, draw_frame
from .field import ParticleField, connections, step
from .surface import DrawSurface, RasterSurface, RecordingSurface
from .ticker import FrameTicker

__all__ = [
    "ParticleFieldAnimation",
    "draw_frame",
    "ParticleField",
    "connections",
    "step",
    "DrawSurface",
    "RasterSurface",
    "RecordingSurface",
    "FrameTicker",
]
