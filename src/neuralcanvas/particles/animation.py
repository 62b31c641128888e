from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from .field import LINK_DISTANCE, PARTICLE_COUNT, ParticleField, connections, step
from .surface import RGB, DrawSurface, RasterSurface
from .ticker import FrameTicker

BACKGROUND: RGB = (3, 7, 18)
FADE_ALPHA = 0.1
PARTICLE_RGB: RGB = (99, 102, 241)


def draw_frame(field: ParticleField, surface: DrawSurface, threshold: float = LINK_DISTANCE) -> None:
    """Fade the previous frame, then draw particles and proximity links."""
    surface.fill(BACKGROUND, FADE_ALPHA)
    for (x, y), r, a in zip(field.positions, field.radii, field.opacities):
        surface.circle(float(x), float(y), float(r), PARTICLE_RGB, float(a))
    for i, j, alpha in connections(field, threshold):
        (x0, y0), (x1, y1) = field.positions[i], field.positions[j]
        surface.line(float(x0), float(y0), float(x1), float(y1), PARTICLE_RGB, alpha)


class ParticleFieldAnimation:
    """
    Decorative particle field bound to one surface.

    start() spawns the particles and, when threaded, hands `advance` to a
    FrameTicker. stop() tears down once; later calls and advances are no-ops.
    Usable as a context manager (mount on enter, teardown on exit).
    """

    def __init__(
        self,
        width: int,
        height: int,
        surface: Optional[DrawSurface] = None,
        *,
        count: int = PARTICLE_COUNT,
        threshold: float = LINK_DISTANCE,
        fps: float = 60.0,
        rng: Optional[np.random.Generator] = None,
    ):
        self.width = width
        self.height = height
        self.surface = surface if surface is not None else RasterSurface(width, height, BACKGROUND)
        self.count = count
        self.threshold = threshold
        self.fps = fps
        self.frames = 0
        self._rng = rng
        self._field: Optional[ParticleField] = None
        self._ticker: Optional[FrameTicker] = None
        self._stopped = False
        self._lock = threading.Lock()

    @property
    def field(self) -> Optional[ParticleField]:
        return self._field

    @property
    def started(self) -> bool:
        return self._field is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self, *, threaded: bool = True) -> "ParticleFieldAnimation":
        if self._field is not None or self._stopped:
            raise RuntimeError("animation can only be started once")
        self._field = ParticleField.spawn(self.width, self.height, self.count, rng=self._rng)
        if threaded:
            self._ticker = FrameTicker(self.advance, fps=self.fps).start()
        return self

    def advance(self) -> bool:
        """Step once and redraw. Returns False once stopped or before start."""
        with self._lock:
            if self._stopped or self._field is None:
                return False
            self._field = step(self._field)
            draw_frame(self._field, self.surface, self.threshold)
            self.frames += 1
            return True

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def __enter__(self) -> "ParticleFieldAnimation":
        return self.start()

    def __exit__(self, *exc: object) -> None:
        self.stop()
