"""Configuration dataclasses for the swingby simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Mapping

import numpy as np

from .errors import ConfigError

POSITION_UNIT = 1e6  # form positions are given in 10^6 m
VELOCITY_UNIT = 1e3  # form velocities are given in 10^3 m/s
MIN_SPEED = 1
MAX_SPEED = 100

FORM_FIELDS = ("x0", "y0", "vx0", "vy0", "dt", "speed")


@dataclass(frozen=True)
class PhysicsCfg:
    gravitational_constant: float = 6.67430e-11
    earth_mass: float = 5.972e24
    earth_radius: float = 6_371_000.0

    @property
    def mu(self) -> float:
        return self.gravitational_constant * self.earth_mass


def _as_vector(value, name: str) -> np.ndarray:
    try:
        vector = np.array(value, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a pair of numbers") from exc
    if vector.shape != (2,):
        raise ConfigError(f"{name} must have exactly two components")
    if not np.all(np.isfinite(vector)):
        raise ConfigError(f"{name} must be finite")
    return vector


@dataclass(frozen=True, eq=False)
class SimulationConfig:
    """Initial conditions and stepping settings in SI units.

    Read once when a session is initialized. Instances are immutable; use
    :meth:`with_speed` to derive a copy with another step multiplier.
    """

    position: np.ndarray = field(
        default_factory=lambda: np.array([7_000_000.0, 0.0], dtype=float)
    )
    velocity: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 7_700.0], dtype=float)
    )
    dt: float = 0.1
    speed: int = 10

    def __post_init__(self) -> None:
        position = _as_vector(self.position, "position")
        velocity = _as_vector(self.velocity, "velocity")
        position.setflags(write=False)
        velocity.setflags(write=False)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "velocity", velocity)

        try:
            dt = float(self.dt)
        except (TypeError, ValueError) as exc:
            raise ConfigError("dt must be a number") from exc
        if not math.isfinite(dt) or dt <= 0.0:
            raise ConfigError(f"dt must be a positive finite number, got {self.dt!r}")
        object.__setattr__(self, "dt", dt)

        if isinstance(self.speed, bool) or not isinstance(self.speed, (int, np.integer)):
            raise ConfigError(f"speed must be an integer, got {self.speed!r}")
        speed = int(self.speed)
        if not MIN_SPEED <= speed <= MAX_SPEED:
            raise ConfigError(f"speed must lie in [{MIN_SPEED}, {MAX_SPEED}], got {speed}")
        object.__setattr__(self, "speed", speed)

        if float(np.hypot(position[0], position[1])) <= 0.0:
            raise ConfigError("initial position must not coincide with the attractor")

    def with_speed(self, speed: int) -> "SimulationConfig":
        return replace(self, speed=speed)

    def as_meta(self) -> dict:
        return {
            "R0": self.position.tolist(),
            "V0": self.velocity.tolist(),
            "dt": self.dt,
            "speed": self.speed,
        }


def _parse_float(fields: Mapping[str, object], name: str) -> float:
    raw = fields.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ConfigError(f"missing field {name!r}")
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"field {name!r} is not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"field {name!r} must be finite")
    return value


def parse_form_config(fields: Mapping[str, object]) -> SimulationConfig:
    """Build a :class:`SimulationConfig` from form values in display units.

    Positions are in 10^6 m, velocities in 10^3 m/s, ``dt`` in seconds and
    ``speed`` a whole step multiplier.
    """

    values = {name: _parse_float(fields, name) for name in FORM_FIELDS}
    if not values["speed"].is_integer():
        raise ConfigError(f"field 'speed' must be a whole number, got {values['speed']!r}")
    return SimulationConfig(
        position=np.array([values["x0"], values["y0"]], dtype=float) * POSITION_UNIT,
        velocity=np.array([values["vx0"], values["vy0"]], dtype=float) * VELOCITY_UNIT,
        dt=values["dt"],
        speed=int(values["speed"]),
    )


POLICIES = ("precomputed", "two_tier", "age_banded", "ring")


@dataclass(frozen=True)
class TrailCfg:
    policy: str = "two_tier"
    # precomputed fixed horizon
    max_steps: int = 20_000
    bailout_radius: float = 50e6
    # two-tier recent + sparse
    recent_capacity: int = 2_000
    sparse_stride: int = 10
    sparse_capacity: int = 5_000
    # multi-tier age banded
    banded_capacity: int = 10_000
    banded_keep_fraction: float = 0.8
    banded_protected_recent: int = 1_000
    # ring buffer
    ring_capacity: int = 2_000

    def with_policy(self, policy: str) -> "TrailCfg":
        return replace(self, policy=policy)


@dataclass(frozen=True)
class ViewCfg:
    padding: float = 1.3
    smoothing: float = 0.08
    min_pixels_per_meter: float = 1e-7
    max_pixels_per_meter: float = 1e-2


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1000
    height: int = 800
    fps: int = 60
    background_color: tuple[int, int, int] = (0, 0, 0)
    earth_color: tuple[int, int, int] = (25, 113, 194)
    earth_outline_color: tuple[int, int, int] = (255, 255, 255)
    spacecraft_color: tuple[int, int, int] = (255, 215, 0)
    spacecraft_glow_color: tuple[int, int, int] = (255, 200, 0)
    spacecraft_pixel_radius: int = 5
    spacecraft_glow_radius: int = 15
    trail_color: tuple[int, int, int] = (100, 200, 255)
    # (tier name, alpha) pairs; tiers not listed use default_trail_alpha
    trail_alpha: tuple[tuple[str, int], ...] = (("trail", 128), ("sparse", 70), ("recent", 160))
    default_trail_alpha: int = 128
    trail_line_width: int = 2
    grid_spacing_meters: float = 5_000_000.0
    grid_min_pixel_spacing: float = 24.0
    grid_line_color: tuple[int, int, int, int] = (255, 255, 255, 26)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    fault_text_color: tuple[int, int, int] = (255, 120, 80)
    export_filename: str = "swingby.csv"

    def tier_alpha(self, tier: str) -> int:
        return dict(self.trail_alpha).get(tier, self.default_trail_alpha)


@dataclass(frozen=True)
class LogCfg:
    root_dir: str = "data/runs"
    log_every_ticks: int = 1
    timeseries_flush_threshold: int = 200
    events_flush_threshold: int = 50


PHYSICS_CFG = PhysicsCfg()
TRAIL_CFG = TrailCfg()
VIEW_CFG = ViewCfg()
RENDER_CFG = RenderCfg()
LOG_CFG = LogCfg()


__all__ = [
    "FORM_FIELDS",
    "LOG_CFG",
    "LogCfg",
    "PHYSICS_CFG",
    "POLICIES",
    "PhysicsCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SimulationConfig",
    "TRAIL_CFG",
    "TrailCfg",
    "VIEW_CFG",
    "ViewCfg",
    "parse_form_config",
]
