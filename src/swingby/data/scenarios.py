"""Scenario definitions for preset starting conditions.

Values are written in the form units (10^6 m and 10^3 m/s) and converted
through :func:`swingby.core.config.parse_form_config`, so presets go through
the same validation as typed-in values.
"""
from __future__ import annotations

from dataclasses import dataclass

from swingby.core.config import FORM_FIELDS, SimulationConfig, parse_form_config
from swingby.core.errors import ConfigError


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    position: tuple[float, float]
    velocity: tuple[float, float]
    dt: float
    speed: int
    description: str

    def form_fields(self) -> dict[str, str]:
        values = (*self.position, *self.velocity, self.dt, self.speed)
        return {name: str(value) for name, value in zip(FORM_FIELDS, values)}

    def config(self) -> SimulationConfig:
        return parse_form_config(self.form_fields())


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="swingby",
        name="Swingby",
        position=(7.0, 0.0),
        velocity=(0.0, 7.7),
        dt=0.1,
        speed=10,
        description="Default form values: slightly elliptical orbit from 7000 km.",
    ),
    Scenario(
        key="leo",
        name="LEO",
        position=(7.0, 0.0),
        velocity=(0.0, 7.546),
        dt=1.0,
        speed=10,
        description="Near-circular low Earth orbit at 7000 km (~7.55 km/s).",
    ),
    Scenario(
        key="elliptical",
        name="Elliptical",
        position=(7.0, 0.0),
        velocity=(0.0, 9.0),
        dt=1.0,
        speed=20,
        description="Eccentric orbit reaching out to roughly 20 000 km.",
    ),
    Scenario(
        key="escape",
        name="Escape",
        position=(7.0, 0.0),
        velocity=(0.0, 11.5),
        dt=1.0,
        speed=50,
        description="Above escape speed (~10.7 km/s at 7000 km); leaves for good.",
    ),
    Scenario(
        key="regression",
        name="Regression",
        position=(7.0, 0.0),
        velocity=(0.0, 7.5),
        dt=1.0,
        speed=10,
        description="Reference case: 100 ticks of 10 steps end at t = 1000 s.",
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


def get_scenario(key: str) -> Scenario:
    try:
        return SCENARIOS[key]
    except KeyError:
        known = ", ".join(SCENARIO_DISPLAY_ORDER)
        raise ConfigError(f"unknown scenario {key!r} (expected one of: {known})") from None


def next_scenario_key(key: str) -> str:
    """Key of the preset after ``key`` in display order, wrapping around."""

    index = SCENARIO_DISPLAY_ORDER.index(get_scenario(key).key)
    return SCENARIO_DISPLAY_ORDER[(index + 1) % len(SCENARIO_DISPLAY_ORDER)]


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
    "get_scenario",
    "next_scenario_key",
]
