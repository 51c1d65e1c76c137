"""Frame scheduling for the cooperative tick loop."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)
    smoothed_fps: float = 0.0

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        if dt > 0.0:
            fps = 1.0 / dt
            if self.smoothed_fps <= 0.0:
                self.smoothed_fps = fps
            else:
                self.smoothed_fps += (fps - self.smoothed_fps) * 0.1
        return dt


class FrameScheduler:
    """Holds at most one callback for the next display frame.

    ``request`` replaces whatever was pending, ``cancel`` drops it and
    ``run_pending`` is called by the frame loop once per frame. A callback
    cancelled before its frame never runs.
    """

    def __init__(self) -> None:
        self._pending: Optional[Callable[[], object]] = None
        self.frames = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, callback: Callable[[], object]) -> None:
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def run_pending(self) -> bool:
        callback = self._pending
        self._pending = None
        self.frames += 1
        if callback is None:
            return False
        callback()
        return True


__all__ = ["FrameScheduler", "FrameTimer"]
