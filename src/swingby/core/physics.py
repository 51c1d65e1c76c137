"""Physics helpers for the two-body simulation."""
from __future__ import annotations

import math

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .model import State


def accel(r: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> np.ndarray:
    """Inverse-square gravitational acceleration at position ``r``.

    Undefined at ``r = 0``: numpy yields inf/nan there and the caller is
    expected to notice.
    """

    rmag = math.sqrt(float(r[0]) * float(r[0]) + float(r[1]) * float(r[1]))
    with np.errstate(divide="ignore", invalid="ignore"):
        return -cfg.mu * r / np.float64(rmag) ** 3


def rk4_step(
    r: np.ndarray,
    v: np.ndarray,
    dt: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> tuple[np.ndarray, np.ndarray]:
    """Advance the position/velocity state with a classical RK4 step."""

    k1_r = v
    k1_v = accel(r, cfg)

    k2_r = v + 0.5 * dt * k1_v
    k2_v = accel(r + 0.5 * dt * k1_r, cfg)

    k3_r = v + 0.5 * dt * k2_v
    k3_v = accel(r + 0.5 * dt * k2_r, cfg)

    k4_r = v + dt * k3_v
    k4_v = accel(r + dt * k3_r, cfg)

    r_next = r + (dt / 6.0) * (k1_r + 2 * k2_r + 2 * k3_r + k4_r)
    v_next = v + (dt / 6.0) * (k1_v + 2 * k2_v + 2 * k3_v + k4_v)
    return r_next, v_next


def step(state: State, dt: float, cfg: PhysicsCfg = PHYSICS_CFG) -> State:
    """Return the state one RK4 step of size ``dt`` after ``state``."""

    r_next, v_next = rk4_step(state.position, state.velocity, dt, cfg)
    return State(t=state.t + dt, position=r_next, velocity=v_next)


def energy_specific(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Specific orbital energy for position ``r`` and velocity ``v``."""

    rmag = float(np.linalg.norm(r))
    vmag2 = float(v[0] * v[0] + v[1] * v[1])
    return 0.5 * vmag2 - cfg.mu / rmag


def angular_momentum(r: np.ndarray, v: np.ndarray) -> float:
    """Specific angular momentum ``x*vy - y*vx``."""

    return float(r[0] * v[1] - r[1] * v[0])


def eccentricity(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Return the orbital eccentricity for state ``(r, v)``."""

    r3 = np.array([r[0], r[1], 0.0])
    v3 = np.array([v[0], v[1], 0.0])
    h = np.cross(r3, v3)
    e_vec = np.cross(v3, h) / cfg.mu - r3 / np.linalg.norm(r3)
    return float(np.linalg.norm(e_vec[:2]))


def orbital_period(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float | None:
    """Keplerian period of the orbit through ``(r, v)``; ``None`` if unbound."""

    eps = energy_specific(r, v, cfg)
    if eps >= 0.0:
        return None
    a = -cfg.mu / (2.0 * eps)
    return 2.0 * math.pi * math.sqrt(a**3 / cfg.mu)


def circular_speed(radius: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return math.sqrt(cfg.mu / radius)


__all__ = [
    "PHYSICS_CFG",
    "PhysicsCfg",
    "accel",
    "angular_momentum",
    "circular_speed",
    "eccentricity",
    "energy_specific",
    "orbital_period",
    "rk4_step",
    "step",
]
