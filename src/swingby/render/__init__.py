"""Rendering helpers for the swingby simulator."""

from .camera import Camera
from .assets import get_text_surface, load_font
from .draw import (
    draw_earth,
    draw_grid,
    draw_hud,
    draw_spacecraft,
    draw_trail,
    hud_lines,
    trail_pixels,
)

__all__ = [
    "Camera",
    "draw_earth",
    "draw_grid",
    "draw_hud",
    "draw_spacecraft",
    "draw_trail",
    "get_text_surface",
    "hud_lines",
    "load_font",
    "trail_pixels",
]
