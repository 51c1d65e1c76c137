from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from swingby.core.config import VIEW_CFG, ViewCfg


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class CameraState:
    center: np.ndarray
    target: np.ndarray
    ppm: float
    ppm_target: float


class Camera:
    """Auto-framing camera mapping world meters to screen pixels.

    Every :meth:`update` frames the given focus points and eases the current
    center and zoom toward that framing by ``smoothing``. Only :meth:`reset`
    moves the view in one jump.
    """

    def __init__(
        self,
        size: tuple[int, int],
        ppm: float,
        *,
        cfg: ViewCfg = VIEW_CFG,
    ) -> None:
        if not 0.0 < cfg.smoothing <= 1.0:
            raise ValueError(f"smoothing must lie in (0, 1], got {cfg.smoothing}")
        self._size = size
        self._cfg = cfg
        self._min_ppm = cfg.min_pixels_per_meter
        self._max_ppm = cfg.max_pixels_per_meter
        ppm = _clamp(ppm, self._min_ppm, self._max_ppm)
        self._state = CameraState(
            center=np.array([0.0, 0.0], dtype=float),
            target=np.array([0.0, 0.0], dtype=float),
            ppm=ppm,
            ppm_target=ppm,
        )

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def smoothing(self) -> float:
        return self._cfg.smoothing

    @property
    def ppm(self) -> float:
        return self._state.ppm

    @property
    def ppm_target(self) -> float:
        return self._state.ppm_target

    @property
    def center(self) -> np.ndarray:
        return self._state.center

    @property
    def target(self) -> np.ndarray:
        return self._state.target

    def reset(self, center: tuple[float, float] = (0.0, 0.0), ppm: float | None = None) -> None:
        """Jump straight to ``center`` and ``ppm`` without easing."""

        self._state.center[:] = center
        self._state.target[:] = center
        if ppm is not None:
            clamped = _clamp(ppm, self._min_ppm, self._max_ppm)
            self._state.ppm = clamped
            self._state.ppm_target = clamped

    def frame_targets(
        self,
        focus_points: Iterable[tuple[float, float]],
        viewport_size: tuple[int, int],
    ) -> tuple[np.ndarray, float]:
        """Target center and scale that fit ``focus_points`` in the viewport."""

        points = np.array(list(focus_points), dtype=float).reshape(-1, 2)
        if points.size == 0:
            points = np.zeros((1, 2), dtype=float)
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        center = (lo + hi) / 2.0
        extent = float(np.max(hi - lo)) * self._cfg.padding
        width, height = viewport_size
        if extent <= 0.0:
            ppm = self._max_ppm
        else:
            ppm = min(width, height) / extent
        return center, _clamp(ppm, self._min_ppm, self._max_ppm)

    def update(
        self,
        focus_points: Iterable[tuple[float, float]],
        viewport_size: tuple[int, int] | None = None,
    ) -> None:
        if viewport_size is not None:
            self._size = viewport_size
        target_center, target_ppm = self.frame_targets(focus_points, self._size)
        state = self._state
        state.target[:] = target_center
        state.ppm_target = target_ppm
        smoothing = self._cfg.smoothing
        state.ppm += (state.ppm_target - state.ppm) * smoothing
        state.ppm = _clamp(state.ppm, self._min_ppm, self._max_ppm)
        state.center += (state.target - state.center) * smoothing

    def world_to_screen(self, x: float, y: float) -> tuple[float, float]:
        width, height = self._size
        cx, cy = self._state.center
        sx = width / 2.0 + (x - cx) * self._state.ppm
        sy = height / 2.0 - (y - cy) * self._state.ppm
        return float(sx), float(sy)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        width, height = self._size
        cx, cy = self._state.center
        x = (sx - width / 2.0) / self._state.ppm + cx
        y = (height / 2.0 - sy) / self._state.ppm + cy
        return float(x), float(y)

    def to_pixels(self, x: float, y: float) -> tuple[int, int]:
        sx, sy = self.world_to_screen(x, y)
        return int(round(sx)), int(round(sy))

    def view_rect(self) -> tuple[float, float, float, float]:
        width, height = self._size
        ppm = self._state.ppm
        half_width_world = width / (2.0 * ppm)
        half_height_world = height / (2.0 * ppm)
        cx, cy = self._state.center
        return (
            cx - half_width_world,
            cy - half_height_world,
            cx + half_width_world,
            cy + half_height_world,
        )
