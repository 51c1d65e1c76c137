from __future__ import annotations

import math
from typing import Sequence, TYPE_CHECKING

import pygame

from swingby.core.model import Frame, TrailPoint

from .assets import get_text_surface
from .camera import Camera

if TYPE_CHECKING:  # pragma: no cover
    from swingby.core.config import RenderCfg


def draw_grid(surface: pygame.Surface, camera: Camera, *, render_cfg: RenderCfg) -> None:
    ppm = camera.ppm
    spacing = render_cfg.grid_spacing_meters
    spacing_px = spacing * ppm
    if spacing_px <= 0.0:
        return
    if spacing_px < render_cfg.grid_min_pixel_spacing:
        spacing *= max(1, math.ceil(render_cfg.grid_min_pixel_spacing / spacing_px))

    width, height = surface.get_size()
    left, bottom, right, top = camera.view_rect()
    layer = pygame.Surface((width, height), pygame.SRCALPHA)

    x_world = math.floor(left / spacing) * spacing
    while x_world <= right:
        sx, _ = camera.to_pixels(x_world, 0.0)
        pygame.draw.line(layer, render_cfg.grid_line_color, (sx, 0), (sx, height))
        x_world += spacing

    y_world = math.floor(bottom / spacing) * spacing
    while y_world <= top:
        _, sy = camera.to_pixels(0.0, y_world)
        pygame.draw.line(layer, render_cfg.grid_line_color, (0, sy), (width, sy))
        y_world += spacing
    surface.blit(layer, (0, 0))


def draw_earth(
    surface: pygame.Surface,
    camera: Camera,
    radius_m: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    center = camera.to_pixels(0.0, 0.0)
    radius = max(2, int(radius_m * camera.ppm))
    pygame.draw.circle(surface, render_cfg.earth_color, center, radius)
    pygame.draw.circle(surface, render_cfg.earth_outline_color, center, radius, 2)


def draw_spacecraft(
    surface: pygame.Surface,
    position: tuple[int, int],
    *,
    render_cfg: RenderCfg,
) -> None:
    glow_radius = render_cfg.spacecraft_glow_radius
    glow = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
    for i in range(glow_radius, 0, -1):
        alpha = int(200 * (1.0 - i / glow_radius))
        pygame.draw.circle(glow, (*render_cfg.spacecraft_glow_color, alpha), (glow_radius, glow_radius), i)
    surface.blit(glow, glow.get_rect(center=position))
    radius = render_cfg.spacecraft_pixel_radius
    pygame.draw.circle(surface, render_cfg.spacecraft_color, position, radius)
    pygame.draw.circle(surface, render_cfg.earth_outline_color, position, radius, 2)


def trail_pixels(points: Sequence[TrailPoint], camera: Camera) -> list[tuple[int, int]]:
    pixels: list[tuple[int, int]] = []
    for point in points:
        pixel = camera.to_pixels(point.x, point.y)
        if not pixels or pixels[-1] != pixel:
            pixels.append(pixel)
    return pixels


def draw_trail(
    surface: pygame.Surface,
    frame: Frame,
    camera: Camera,
    *,
    render_cfg: RenderCfg,
) -> int:
    """Draw every trail tier oldest-first on an alpha layer.

    Returns the number of line segments drawn.
    """

    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    segments = 0
    for tier, points in frame.tiers:
        pixels = trail_pixels(points, camera)
        if len(pixels) < 2:
            continue
        color = (*render_cfg.trail_color, render_cfg.tier_alpha(tier))
        pygame.draw.lines(layer, color, False, pixels, render_cfg.trail_line_width)
        segments += len(pixels) - 1
    surface.blit(layer, (0, 0))
    return segments


def hud_lines(frame: Frame) -> list[str]:
    state = frame.state
    lines = [
        f"t   {state.t:12.1f} s",
        f"x   {state.x / 1e6:12.3f} x10^6 m",
        f"y   {state.y / 1e6:12.3f} x10^6 m",
        f"vx  {state.vx:12.1f} m/s",
        f"vy  {state.vy:12.1f} m/s",
        f"r   {state.radius / 1e6:12.3f} x10^6 m",
        f"{frame.status.name.lower()}  {frame.speed}x  [{frame.policy}]",
    ]
    if frame.fault:
        lines.append(f"fault: {frame.fault}")
    elif frame.pause_reason == "horizon":
        lines.append("end of precomputed trajectory")
    return lines


def draw_hud(
    surface: pygame.Surface,
    frame: Frame,
    font: pygame.font.Font,
    *,
    render_cfg: RenderCfg,
) -> None:
    y = 10
    for line in hud_lines(frame):
        color = render_cfg.fault_text_color if line.startswith("fault") else render_cfg.hud_text_color
        text = get_text_surface(font, line, color)
        surface.blit(text, (10, y))
        y += text.get_height() + 2


__all__ = [
    "draw_earth",
    "draw_grid",
    "draw_hud",
    "draw_spacecraft",
    "draw_trail",
    "hud_lines",
    "trail_pixels",
]
