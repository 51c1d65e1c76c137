"""Exception types raised by the simulation core."""
from __future__ import annotations


class SimulationFault(Exception):
    """Base class for every error the simulation core raises."""


class ConfigError(SimulationFault, ValueError):
    """Initial conditions or store settings that cannot start a run."""


class SingularStateError(SimulationFault, ArithmeticError):
    """The integrated state left the finite numbers (r reached zero)."""


class SessionStateError(SimulationFault, RuntimeError):
    """An operation was called in a session state that does not allow it."""


__all__ = [
    "ConfigError",
    "SessionStateError",
    "SimulationFault",
    "SingularStateError",
]
