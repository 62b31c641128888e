"""UI components for NeuralCanvas."""
from .header import render_header, render_stat_cards
from .insights import render_insight
from .plots import render_bar_chart, render_preview
from .particle_canvas import render_particle_canvas

__all__ = [
    "render_header",
    "render_stat_cards",
    "render_insight",
    "render_bar_chart",
    "render_preview",
    "render_particle_canvas",
]
