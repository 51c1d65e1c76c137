"""Integrator checks against two-body invariants and a scalar RK4 reference."""

import math

import numpy as np
import pytest

from swingby.core.config import PHYSICS_CFG
from swingby.core.model import State
from swingby.core.physics import (
    accel,
    angular_momentum,
    circular_speed,
    eccentricity,
    energy_specific,
    orbital_period,
    rk4_step,
    step,
)

GM = PHYSICS_CFG.mu


def reference_rk4(x, y, vx, vy, dt):
    """Scalar classical RK4, written out stage by stage."""
    r = math.sqrt(x * x + y * y)
    k1_x, k1_y = vx, vy
    k1_vx, k1_vy = -GM * x / r**3, -GM * y / r**3

    x_2, y_2 = x + 0.5 * k1_x * dt, y + 0.5 * k1_y * dt
    r_2 = math.sqrt(x_2 * x_2 + y_2 * y_2)
    k2_x, k2_y = vx + 0.5 * k1_vx * dt, vy + 0.5 * k1_vy * dt
    k2_vx, k2_vy = -GM * x_2 / r_2**3, -GM * y_2 / r_2**3

    x_3, y_3 = x + 0.5 * k2_x * dt, y + 0.5 * k2_y * dt
    r_3 = math.sqrt(x_3 * x_3 + y_3 * y_3)
    k3_x, k3_y = vx + 0.5 * k2_vx * dt, vy + 0.5 * k2_vy * dt
    k3_vx, k3_vy = -GM * x_3 / r_3**3, -GM * y_3 / r_3**3

    x_4, y_4 = x + k3_x * dt, y + k3_y * dt
    r_4 = math.sqrt(x_4 * x_4 + y_4 * y_4)
    k4_x, k4_y = vx + k3_vx * dt, vy + k3_vy * dt
    k4_vx, k4_vy = -GM * x_4 / r_4**3, -GM * y_4 / r_4**3

    return (
        x + (k1_x + 2 * k2_x + 2 * k3_x + k4_x) * dt / 6.0,
        y + (k1_y + 2 * k2_y + 2 * k3_y + k4_y) * dt / 6.0,
        vx + (k1_vx + 2 * k2_vx + 2 * k3_vx + k4_vx) * dt / 6.0,
        vy + (k1_vy + 2 * k2_vy + 2 * k3_vy + k4_vy) * dt / 6.0,
    )


def test_gm_matches_constants():
    assert GM == pytest.approx(6.67430e-11 * 5.972e24)


def test_accel_points_at_attractor_with_inverse_square_magnitude():
    a1 = accel(np.array([7.0e6, 0.0]))
    a2 = accel(np.array([14.0e6, 0.0]))
    assert a1[0] < 0.0
    assert a1[1] == 0.0
    assert a1[0] / a2[0] == pytest.approx(4.0)


def test_accel_at_origin_is_not_finite():
    a = accel(np.array([0.0, 0.0]))
    assert not np.all(np.isfinite(a))


def test_rk4_step_matches_scalar_reference():
    r = np.array([7.0e6, 1.2e6])
    v = np.array([-900.0, 7600.0])
    r_next, v_next = rk4_step(r, v, 5.0)
    expected = reference_rk4(7.0e6, 1.2e6, -900.0, 7600.0, 5.0)
    np.testing.assert_allclose(
        [r_next[0], r_next[1], v_next[0], v_next[1]], expected, rtol=1e-13
    )


def test_step_is_pure_and_advances_time():
    state = State(t=3.0, position=[7.0e6, 0.0], velocity=[0.0, 7.5e3])
    before = (state.t, state.position.copy(), state.velocity.copy())
    nxt = step(state, 2.0)
    assert nxt.t == 5.0
    assert state.t == before[0]
    np.testing.assert_array_equal(state.position, before[1])
    np.testing.assert_array_equal(state.velocity, before[2])
    again = step(state, 2.0)
    assert again.same_as(nxt)


def test_single_step_energy_change_is_tiny():
    r = np.array([7.0e6, 0.0])
    v = np.array([0.0, 8.2e3])
    e0 = energy_specific(r, v)
    r1, v1 = rk4_step(r, v, 1.0)
    assert abs((energy_specific(r1, v1) - e0) / e0) < 1e-10


def test_invariants_stay_bounded_over_one_elliptical_period():
    r = np.array([7.0e6, 0.0])
    v = np.array([0.0, 9.0e3])
    e0 = energy_specific(r, v)
    h0 = angular_momentum(r, v)
    period = orbital_period(r, v)
    assert period is not None
    steps = int(period) + 1
    worst_e = 0.0
    worst_h = 0.0
    for _ in range(steps):
        r, v = rk4_step(r, v, 1.0)
        worst_e = max(worst_e, abs((energy_specific(r, v) - e0) / e0))
        worst_h = max(worst_h, abs((angular_momentum(r, v) - h0) / h0))
    assert worst_e < 1e-8
    assert worst_h < 1e-8


def test_circular_orbit_returns_to_start_after_one_period():
    radius = 7.0e6
    speed = circular_speed(radius)
    period = 2.0 * math.pi * math.sqrt(radius**3 / GM)
    n = 6000
    dt = period / n
    state = State.initial([radius, 0.0], [0.0, speed])
    for _ in range(n):
        state = step(state, dt)
    assert state.t == pytest.approx(period)
    assert state.x == pytest.approx(radius, abs=1.0)
    assert state.y == pytest.approx(0.0, abs=1.0)
    assert state.radius == pytest.approx(radius, rel=1e-9)


def test_eccentricity_and_period_helpers():
    radius = 7.0e6
    r = np.array([radius, 0.0])
    v = np.array([0.0, circular_speed(radius)])
    assert eccentricity(r, v) == pytest.approx(0.0, abs=1e-12)
    assert orbital_period(r, v) == pytest.approx(2.0 * math.pi * math.sqrt(radius**3 / GM))
    assert orbital_period(r, v * 1.5) is None
