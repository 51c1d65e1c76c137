"""Data models for the swingby simulation state."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple, Optional, Sequence

import numpy as np


def _frozen_vector(values) -> np.ndarray:
    vector = np.array(values, dtype=float)
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True, eq=False)
class State:
    """Position/velocity state of the spacecraft at time ``t``."""

    t: float
    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _frozen_vector(self.position))
        object.__setattr__(self, "velocity", _frozen_vector(self.velocity))

    @classmethod
    def initial(cls, position: np.ndarray, velocity: np.ndarray) -> "State":
        return cls(t=0.0, position=position, velocity=velocity)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def vx(self) -> float:
        return float(self.velocity[0])

    @property
    def vy(self) -> float:
        return float(self.velocity[1])

    @property
    def radius(self) -> float:
        return float(np.hypot(self.position[0], self.position[1]))

    @property
    def speed(self) -> float:
        return float(np.hypot(self.velocity[0], self.velocity[1]))

    def is_finite(self) -> bool:
        return bool(
            np.isfinite(self.t)
            and np.all(np.isfinite(self.position))
            and np.all(np.isfinite(self.velocity))
        )

    def same_as(self, other: "State") -> bool:
        return (
            self.t == other.t
            and np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
        )

    def to_point(self, index: Optional[int] = None) -> "TrailPoint":
        return TrailPoint(t=self.t, x=self.x, y=self.y, index=index)


class TrailPoint(NamedTuple):
    t: float
    x: float
    y: float
    index: Optional[int] = None


class SessionStatus(Enum):
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs for one frame. Read only."""

    state: State
    tiers: tuple[tuple[str, Sequence[TrailPoint]], ...]
    status: SessionStatus
    speed: int
    policy: str
    fault: Optional[str] = None
    pause_reason: Optional[str] = None


__all__ = ["Frame", "SessionStatus", "State", "TrailPoint"]
