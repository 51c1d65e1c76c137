"""Numerical core: integrator, trail stores and the simulation session."""

from .config import (
    LOG_CFG,
    PHYSICS_CFG,
    POLICIES,
    RENDER_CFG,
    TRAIL_CFG,
    VIEW_CFG,
    LogCfg,
    PhysicsCfg,
    RenderCfg,
    SimulationConfig,
    TrailCfg,
    ViewCfg,
    parse_form_config,
)
from .errors import ConfigError, SessionStateError, SimulationFault, SingularStateError
from .export import export_rows, read_trail_csv, write_trail_csv
from .logging_utils import RunLogger
from .model import Frame, SessionStatus, State, TrailPoint
from .physics import rk4_step, step
from .scheduling import FrameScheduler, FrameTimer
from .session import SimulationSession
from .trail import (
    AgeBandedTrail,
    PrecomputedTrail,
    RingBufferTrail,
    TrajectoryStore,
    TwoTierTrail,
    make_store,
)

__all__ = [
    "AgeBandedTrail",
    "ConfigError",
    "Frame",
    "FrameScheduler",
    "FrameTimer",
    "LOG_CFG",
    "LogCfg",
    "PHYSICS_CFG",
    "POLICIES",
    "PhysicsCfg",
    "PrecomputedTrail",
    "RENDER_CFG",
    "RenderCfg",
    "RingBufferTrail",
    "RunLogger",
    "SessionStateError",
    "SessionStatus",
    "SimulationConfig",
    "SimulationFault",
    "SimulationSession",
    "SingularStateError",
    "State",
    "TRAIL_CFG",
    "TrailCfg",
    "TrailPoint",
    "TrajectoryStore",
    "TwoTierTrail",
    "VIEW_CFG",
    "ViewCfg",
    "export_rows",
    "make_store",
    "parse_form_config",
    "read_trail_csv",
    "rk4_step",
    "step",
    "write_trail_csv",
]
