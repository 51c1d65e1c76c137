import numpy as np
import pytest

from swingby.analysis import (
    invariant_series,
    plot_invariants,
    plot_policy_comparison,
    plot_trail_csv,
    retained_by_policy,
    run_headless,
)
from swingby.core.config import POLICIES, SimulationConfig, TrailCfg
from swingby.core.export import write_trail_csv

SMALL = TrailCfg(
    max_steps=120,
    recent_capacity=40,
    sparse_stride=5,
    sparse_capacity=30,
    banded_capacity=60,
    banded_protected_recent=10,
    ring_capacity=40,
)


@pytest.fixture
def config():
    return SimulationConfig(position=[7.0e6, 0.0], velocity=[0.0, 7.7e3], dt=5.0, speed=10)


def test_run_headless_stops_at_precomputed_horizon(config):
    session = run_headless(config, 500, SMALL.with_policy("precomputed"))
    assert session.steps == 119
    assert session.pause_reason == "horizon"


def test_retained_counts_per_policy(config):
    retained = retained_by_policy(config, 300, POLICIES, SMALL)
    assert len(retained["precomputed"]) == 120
    assert len(retained["ring"]) == 40
    assert len(retained["two_tier"]) <= 40 + 30
    assert len(retained["age_banded"]) <= 60
    for rows in retained.values():
        idx = [row[0] for row in rows]
        assert idx == sorted(idx)


def test_invariant_series_drift_is_small(config):
    series = invariant_series(config, 200)
    assert series["t"][-1] == pytest.approx(1000.0)
    assert np.max(np.abs(series["energy_drift"])) < 1e-6
    assert np.max(np.abs(series["h_drift"])) < 1e-6


def test_figures_are_written(config, tmp_path):
    comparison = plot_policy_comparison(config, 200, tmp_path / "figs" / "policies.png", SMALL)
    invariants = plot_invariants(config, 100, tmp_path / "figs" / "invariants.png")
    rows = retained_by_policy(config, 50, ["ring"], SMALL)["ring"]
    csv_path = write_trail_csv(rows, tmp_path / "trail.csv")
    trail = plot_trail_csv(csv_path, tmp_path / "figs" / "trail.png")
    for path in (comparison, invariants, trail):
        assert path.exists()
        assert path.stat().st_size > 0
