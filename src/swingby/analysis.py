"""Headless runs and diagnostic figures for comparing trail policies."""
from __future__ import annotations

import math
from pathlib import Path
from typing import Dict, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from swingby.core.config import PHYSICS_CFG, POLICIES, TRAIL_CFG, SimulationConfig, TrailCfg
from swingby.core.export import read_trail_csv
from swingby.core.physics import angular_momentum, energy_specific
from swingby.core.session import SimulationSession
from swingby.core.trail import ExportRow

POLICY_COLORS = {
    "precomputed": "#4dabf7",
    "two_tier": "#ffa94d",
    "age_banded": "#94d82d",
    "ring": "#9775fa",
}


def run_headless(
    config: SimulationConfig,
    steps: int,
    trail_cfg: TrailCfg = TRAIL_CFG,
) -> SimulationSession:
    """Run a session for ``steps`` integrator steps without a scheduler."""

    session = SimulationSession.create(config, trail_cfg)
    session.start()
    remaining = steps
    while remaining > 0 and session.running:
        batch = min(config.speed, remaining)
        remaining -= session.advance(batch)
        if session.store.exhausted:
            session.pause("horizon")
    return session


def retained_by_policy(
    config: SimulationConfig,
    steps: int,
    policies: Sequence[str] = POLICIES,
    trail_cfg: TrailCfg = TRAIL_CFG,
) -> Dict[str, list[ExportRow]]:
    retained: Dict[str, list[ExportRow]] = {}
    for policy in policies:
        session = run_headless(config, steps, trail_cfg.with_policy(policy))
        retained[policy] = [(p.index, p.t, p.x, p.y) for p in session.store.snapshot()]
        session.destroy()
    return retained


def _earth_outline(ax) -> None:
    theta = np.linspace(0, 2 * np.pi, 256)
    radius = PHYSICS_CFG.earth_radius
    ax.plot(radius * np.cos(theta), radius * np.sin(theta), color="#1971c2", alpha=0.5)


def plot_policy_comparison(
    config: SimulationConfig,
    steps: int,
    path: str | Path,
    trail_cfg: TrailCfg = TRAIL_CFG,
) -> Path:
    """Draw what each policy still holds after ``steps`` steps, side by side."""

    retained = retained_by_policy(config, steps, POLICIES, trail_cfg)
    fig, axes = plt.subplots(1, len(retained), figsize=(4 * len(retained), 4.4))
    for ax, (policy, rows) in zip(np.atleast_1d(axes), retained.items()):
        data = np.array([[row[2], row[3]] for row in rows], dtype=float).reshape(-1, 2)
        _earth_outline(ax)
        ax.plot(data[:, 0], data[:, 1], ".", ms=1.2, color=POLICY_COLORS.get(policy, "#cccccc"))
        ax.set_aspect("equal", "box")
        ax.set_title(f"{policy}\n{len(rows)} points")
        ax.set_xlabel("x [m]")
        ax.set_ylabel("y [m]")
    fig.suptitle(f"Retained trail after {steps} steps (dt = {config.dt:g} s)")
    fig.tight_layout()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path


def plot_trail_csv(csv_path: str | Path, path: str | Path) -> Path:
    """Plot an exported trail file (columns i, t, x, y)."""

    data = read_trail_csv(csv_path)
    fig, ax = plt.subplots(figsize=(6, 6))
    _earth_outline(ax)
    ax.plot(data["x"], data["y"], color="#6bc5c0", lw=1.2, label="Trail")
    if data["x"].size:
        ax.scatter([data["x"][-1]], [data["y"][-1]], color="#ffd700", s=30, label="Last point")
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    ax.set_title(f"{Path(csv_path).name} ({data['i'].size} points)")
    ax.legend()
    fig.tight_layout()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def invariant_series(config: SimulationConfig, steps: int) -> Dict[str, np.ndarray]:
    """Relative energy and angular-momentum drift at every step."""

    session = SimulationSession.create(config, TRAIL_CFG.with_policy("ring"))
    session.start()
    t = np.empty(steps + 1)
    energy = np.empty(steps + 1)
    h = np.empty(steps + 1)
    for i in range(steps + 1):
        if i:
            session.advance(1)
        state = session.state
        t[i] = state.t
        energy[i] = energy_specific(state.position, state.velocity, session.physics)
        h[i] = angular_momentum(state.position, state.velocity)
    session.destroy()
    e0 = energy[0] if abs(energy[0]) > 1e-12 else 1.0
    h0 = h[0] if abs(h[0]) > 1e-12 else 1.0
    return {
        "t": t,
        "energy": energy,
        "h": h,
        "energy_drift": (energy - energy[0]) / abs(e0),
        "h_drift": (h - h[0]) / abs(h0),
    }


def plot_invariants(config: SimulationConfig, steps: int, path: str | Path) -> Path:
    series = invariant_series(config, steps)
    fig, (ax_e, ax_h) = plt.subplots(2, 1, figsize=(7, 6), sharex=True)
    ax_e.plot(series["t"], series["energy_drift"], color="#ffa94d")
    ax_e.set_ylabel("ΔE/|E0| [-]")
    ax_e.set_title("Specific energy drift")
    ax_e.grid(True, alpha=0.3)
    ax_h.plot(series["t"], series["h_drift"], color="#94d82d")
    ax_h.set_xlabel("t [s]")
    ax_h.set_ylabel("Δh/|h0| [-]")
    ax_h.set_title("Angular momentum drift")
    ax_h.grid(True, alpha=0.3)
    max_drift = float(np.max(np.abs(series["energy_drift"])))
    if math.isfinite(max_drift):
        fig.suptitle(f"max |ΔE/E0| = {max_drift:.2e}")
    fig.tight_layout()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path


__all__ = [
    "invariant_series",
    "plot_invariants",
    "plot_policy_comparison",
    "plot_trail_csv",
    "retained_by_policy",
    "run_headless",
]
