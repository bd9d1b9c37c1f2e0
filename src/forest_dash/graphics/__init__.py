"""Graphics: numpy frame buffers for the presentation layer."""

from forest_dash.graphics.renderer import Palette, SnapshotRenderer
from forest_dash.graphics.primitives import (
    draw_rect,
    draw_circle,
    draw_triangle,
    shade_outside_circle,
    fill,
    new_buffer,
)

__all__ = [
    # Renderer
    "Palette",
    "SnapshotRenderer",
    # Primitives
    "draw_rect",
    "draw_circle",
    "draw_triangle",
    "shade_outside_circle",
    "fill",
    "new_buffer",
]
