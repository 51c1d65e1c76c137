from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

HUD_FONT_NAMES = ("dejavusansmono", "consolas", "menlo", "couriernew")

_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(size: int, preferred_names: Iterable[str] = HUD_FONT_NAMES) -> pygame.font.Font:
    for name in preferred_names:
        match = pygame.font.match_font(name)
        if match:
            return pygame.font.Font(match, size)
    return pygame.font.Font(None, size)


__all__ = ["Color", "HUD_FONT_NAMES", "get_text_surface", "load_font"]
