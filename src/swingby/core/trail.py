"""Bounded-memory trail stores for the spacecraft history.

Every store keeps points in the order they were appended, which is also
chronological order. Once a store is full it starts discarding history, and
the policies differ only in *which* points survive:

``PrecomputedTrail``
    integrates the whole horizon up front and reveals it one point per
    append. Nothing is ever discarded, the horizon is simply finite.
``TwoTierTrail``
    full-density recent tier plus a strided sparse tier for older history.
``AgeBandedTrail``
    one buffer compacted on overflow, thinning older history harder.
``RingBufferTrail``
    strict FIFO of the newest points.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Sequence

from .config import PHYSICS_CFG, TRAIL_CFG, PhysicsCfg, TrailCfg
from .errors import ConfigError
from .model import State, TrailPoint
from .physics import step

ExportRow = tuple[int, float, float, float]


def _require_positive(value: int, name: str) -> int:
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return int(value)


def _rows(points: Iterable[TrailPoint]) -> list[ExportRow]:
    rows: list[ExportRow] = []
    for position, point in enumerate(points):
        index = point.index if point.index is not None else position
        rows.append((index, point.t, point.x, point.y))
    return rows


class TrajectoryStore(ABC):
    """Common interface for trail retention policies."""

    name = "trail"

    def __init__(self) -> None:
        self.appended = 0

    def begin(self, state: State, dt: float, physics: PhysicsCfg = PHYSICS_CFG) -> None:
        """Drop all history and seed the store with the initial state."""

        self.clear()
        self.append(state.to_point(0))

    @abstractmethod
    def append(self, point: TrailPoint) -> None:
        ...

    @abstractmethod
    def snapshot(self) -> list[TrailPoint]:
        """Retained points, oldest first."""

    @abstractmethod
    def count(self) -> int:
        """Number of points currently retained."""

    @abstractmethod
    def clear(self) -> None:
        ...

    def tiers(self) -> tuple[tuple[str, Sequence[TrailPoint]], ...]:
        return (("trail", self.snapshot()),)

    def export(self) -> list[ExportRow]:
        return _rows(self.snapshot())

    @property
    def exhausted(self) -> bool:
        return False

    def __len__(self) -> int:
        return self.count()


class PrecomputedTrail(TrajectoryStore):
    """Whole trajectory integrated eagerly, revealed through a cursor.

    The series holds the initial point plus one point per step until either
    ``max_steps`` points exist or a point lies beyond ``bailout_radius``
    (that point is still kept). Memory is bounded by the step cap.
    """

    name = "precomputed"

    def __init__(self, max_steps: int = 20_000, bailout_radius: float = 50e6) -> None:
        super().__init__()
        self.max_steps = _require_positive(max_steps, "max_steps")
        if bailout_radius <= 0.0:
            raise ConfigError(f"bailout_radius must be positive, got {bailout_radius}")
        self.bailout_radius = float(bailout_radius)
        self._series: list[TrailPoint] = []
        self._cursor = 0

    def begin(self, state: State, dt: float, physics: PhysicsCfg = PHYSICS_CFG) -> None:
        self.clear()
        self._series = self.precompute(state, dt, physics)
        self._cursor = 1
        self.appended = 1

    def precompute(self, state: State, dt: float, physics: PhysicsCfg = PHYSICS_CFG) -> list[TrailPoint]:
        series: list[TrailPoint] = []
        current = state
        for i in range(self.max_steps):
            series.append(current.to_point(i))
            if current.radius > self.bailout_radius or not current.is_finite():
                break
            current = step(current, dt, physics)
        return series

    def append(self, point: TrailPoint) -> None:
        if self._cursor >= len(self._series):
            raise IndexError("precomputed trajectory is exhausted")
        self._cursor += 1
        self.appended += 1

    def snapshot(self) -> list[TrailPoint]:
        return self._series[: self._cursor]

    def count(self) -> int:
        return self._cursor

    def clear(self) -> None:
        self._series = []
        self._cursor = 0
        self.appended = 0

    @property
    def series(self) -> Sequence[TrailPoint]:
        return tuple(self._series)

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._series)

    def export(self) -> list[ExportRow]:
        return _rows(self._series)


class TwoTierTrail(TrajectoryStore):
    """Recent points at full density, older points thinned into a sparse tier.

    When the recent tier grows past ``recent_capacity`` its oldest points are
    handed to the sparse tier, which keeps one in ``stride`` of them and drops
    its own oldest entries once ``sparse_capacity`` is reached.
    """

    name = "two_tier"

    def __init__(
        self,
        recent_capacity: int = 2_000,
        stride: int = 10,
        sparse_capacity: int = 5_000,
    ) -> None:
        super().__init__()
        self.recent_capacity = _require_positive(recent_capacity, "recent_capacity")
        self.stride = _require_positive(stride, "sparse_stride")
        self.sparse_capacity = _require_positive(sparse_capacity, "sparse_capacity")
        self._recent: deque[TrailPoint] = deque()
        self._sparse: deque[TrailPoint] = deque(maxlen=self.sparse_capacity)
        self._demoted = 0

    def append(self, point: TrailPoint) -> None:
        self._recent.append(point)
        self.appended += 1
        while len(self._recent) > self.recent_capacity:
            oldest = self._recent.popleft()
            if self._demoted % self.stride == 0:
                self._sparse.append(oldest)
            self._demoted += 1

    @property
    def recent(self) -> list[TrailPoint]:
        return list(self._recent)

    @property
    def sparse(self) -> list[TrailPoint]:
        return list(self._sparse)

    def snapshot(self) -> list[TrailPoint]:
        return [*self._sparse, *self._recent]

    def tiers(self) -> tuple[tuple[str, Sequence[TrailPoint]], ...]:
        return (("sparse", self.sparse), ("recent", self.recent))

    def count(self) -> int:
        return len(self._sparse) + len(self._recent)

    def clear(self) -> None:
        self._recent.clear()
        self._sparse.clear()
        self._demoted = 0
        self.appended = 0


class AgeBandedTrail(TrajectoryStore):
    """Single buffer compacted by age band whenever it overflows.

    Compaction walks the buffer once. Points are thinned by their fractional
    age: the oldest 20% keep 1 in 8, the next 20% 1 in 4, the next 30% 1 in 2
    and the newest 30% are kept whole. The last ``protected_recent`` points
    are always copied through untouched. The result is capped at
    ``keep_fraction * capacity`` by dropping the oldest survivors.

    The cap is an upper bound. With the default bands and a small protected
    block the thinning alone already lands near half the capacity (5251 of
    10 000 with the defaults), so the cap only trims when ``keep_fraction``
    is low or ``protected_recent`` is large.
    """

    name = "age_banded"

    # (upper bound of fractional age, keep interval), oldest band first
    BANDS: tuple[tuple[float, int], ...] = ((0.2, 8), (0.4, 4), (0.7, 2), (1.0, 1))

    def __init__(
        self,
        capacity: int = 10_000,
        keep_fraction: float = 0.8,
        protected_recent: int = 1_000,
    ) -> None:
        super().__init__()
        self.capacity = _require_positive(capacity, "banded_capacity")
        if not 0.0 < keep_fraction < 1.0:
            raise ConfigError(f"banded_keep_fraction must lie in (0, 1), got {keep_fraction}")
        self.target = max(1, int(self.capacity * keep_fraction))
        if protected_recent < 0 or protected_recent > self.target:
            raise ConfigError(
                f"banded_protected_recent must lie in [0, {self.target}], got {protected_recent}"
            )
        self.protected_recent = int(protected_recent)
        self._points: list[TrailPoint] = []
        self.compactions = 0

    def append(self, point: TrailPoint) -> None:
        self._points.append(point)
        self.appended += 1
        if len(self._points) > self.capacity:
            self._points = self.compact(self._points)
            self.compactions += 1

    @classmethod
    def keep_interval(cls, age_fraction: float) -> int:
        for upper, interval in cls.BANDS:
            if age_fraction < upper:
                return interval
        return 1

    def compact(self, points: list[TrailPoint]) -> list[TrailPoint]:
        total = len(points)
        protected = min(self.protected_recent, total)
        boundary = total - protected
        survivors = [
            point
            for i, point in enumerate(points[:boundary])
            if i % self.keep_interval(i / total) == 0
        ]
        room = self.target - protected
        if len(survivors) > room:
            survivors = survivors[len(survivors) - room:] if room > 0 else []
        survivors.extend(points[boundary:])
        return survivors

    def snapshot(self) -> list[TrailPoint]:
        return list(self._points)

    def count(self) -> int:
        return len(self._points)

    def clear(self) -> None:
        self._points = []
        self.appended = 0
        self.compactions = 0


class RingBufferTrail(TrajectoryStore):
    """Fixed-size FIFO: each append past capacity evicts the oldest point."""

    name = "ring"

    def __init__(self, capacity: int = 2_000) -> None:
        super().__init__()
        self.capacity = _require_positive(capacity, "ring_capacity")
        self._points: deque[TrailPoint] = deque(maxlen=self.capacity)

    def append(self, point: TrailPoint) -> None:
        self._points.append(point)
        self.appended += 1

    def snapshot(self) -> list[TrailPoint]:
        return list(self._points)

    def count(self) -> int:
        return len(self._points)

    def clear(self) -> None:
        self._points.clear()
        self.appended = 0


def make_store(cfg: TrailCfg = TRAIL_CFG) -> TrajectoryStore:
    """Build the store selected by ``cfg.policy``."""

    if cfg.policy == "precomputed":
        return PrecomputedTrail(cfg.max_steps, cfg.bailout_radius)
    if cfg.policy == "two_tier":
        return TwoTierTrail(cfg.recent_capacity, cfg.sparse_stride, cfg.sparse_capacity)
    if cfg.policy == "age_banded":
        return AgeBandedTrail(
            cfg.banded_capacity, cfg.banded_keep_fraction, cfg.banded_protected_recent
        )
    if cfg.policy == "ring":
        return RingBufferTrail(cfg.ring_capacity)
    raise ConfigError(f"unknown trail policy {cfg.policy!r}")


__all__ = [
    "AgeBandedTrail",
    "ExportRow",
    "PrecomputedTrail",
    "RingBufferTrail",
    "TrajectoryStore",
    "TwoTierTrail",
    "make_store",
]
