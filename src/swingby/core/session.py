"""Simulation session: owns the state, the trail store and the run lifecycle."""
from __future__ import annotations

from typing import Optional

from .config import LOG_CFG, PHYSICS_CFG, TRAIL_CFG, PhysicsCfg, SimulationConfig, TrailCfg
from .errors import SessionStateError, SimulationFault, SingularStateError
from .logging_utils import RunLogger
from .model import Frame, SessionStatus, State
from .physics import step
from .scheduling import FrameScheduler
from .trail import ExportRow, TrajectoryStore, make_store


class SimulationSession:
    """One spacecraft orbiting one attractor, advanced in discrete ticks.

    The session moves between IDLE, RUNNING and PAUSED. An external scheduler
    decides when :meth:`tick` runs; each tick performs ``config.speed`` RK4
    steps of size ``config.dt`` and appends every resulting point to the
    trail store before returning. When a :class:`FrameScheduler` is attached,
    a running session re-requests its own next tick and :meth:`pause`
    cancels it.

    Faults raised inside a tick (a state that stopped being finite, a store
    error) stop the run: the session becomes PAUSED with ``fault`` set instead
    of letting the exception escape into the frame loop. A run logger that
    fails to write (``OSError``) faults the run the same way and is detached.
    """

    def __init__(
        self,
        config: SimulationConfig,
        trail_cfg: TrailCfg = TRAIL_CFG,
        *,
        physics: PhysicsCfg = PHYSICS_CFG,
        scheduler: Optional[FrameScheduler] = None,
        logger: Optional[RunLogger] = None,
        log_every_ticks: int = LOG_CFG.log_every_ticks,
    ) -> None:
        self.trail_cfg = trail_cfg
        self.physics = physics
        self.scheduler = scheduler
        self.logger = logger
        self.log_every_ticks = max(1, int(log_every_ticks))
        self._store: Optional[TrajectoryStore] = make_store(trail_cfg)
        self.config = config
        self.state = State.initial(config.position, config.velocity)
        self.status = SessionStatus.IDLE
        self.fault: Optional[str] = None
        self.pause_reason: Optional[str] = None
        self.steps = 0
        self.ticks = 0
        self._bailout_logged = False
        self.initialize(config)

    @classmethod
    def create(
        cls,
        config: SimulationConfig,
        trail_cfg: TrailCfg = TRAIL_CFG,
        **kwargs,
    ) -> "SimulationSession":
        session = cls(config, trail_cfg, **kwargs)
        if session.logger is not None:
            session.logger.write_meta(session.describe())
            session._log_state()
        return session

    @property
    def store(self) -> TrajectoryStore:
        if self._store is None:
            raise SessionStateError("session has been destroyed")
        return self._store

    @property
    def destroyed(self) -> bool:
        return self._store is None

    @property
    def running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    def describe(self) -> dict:
        meta = self.config.as_meta()
        meta.update(
            {
                "G": self.physics.gravitational_constant,
                "M": self.physics.earth_mass,
                "mu": self.physics.mu,
                "integrator": "RK4",
                "policy": self.trail_cfg.policy,
                "log_every_ticks": self.log_every_ticks,
            }
        )
        return meta

    # -- lifecycle -----------------------------------------------------

    def initialize(self, config: SimulationConfig) -> None:
        store = self.store
        self._cancel_scheduled()
        self.config = config
        self.state = State.initial(config.position, config.velocity)
        self.status = SessionStatus.IDLE
        self.fault = None
        self.pause_reason = None
        self.steps = 0
        self.ticks = 0
        self._bailout_logged = False
        store.begin(self.state, config.dt, self.physics)

    def start(self) -> None:
        store = self.store
        if self.status is SessionStatus.RUNNING:
            return
        if self.fault is not None or store.exhausted:
            # a finished run starts over from the initial conditions
            self.reset()
        self.status = SessionStatus.RUNNING
        self.pause_reason = None
        self._log_event("start")
        self._schedule()

    def pause(self, reason: Optional[str] = None) -> None:
        if self._store is None:
            raise SessionStateError("session has been destroyed")
        self._cancel_scheduled()
        if self.status is not SessionStatus.RUNNING:
            return
        self.status = SessionStatus.PAUSED
        self.pause_reason = reason or "user"
        self._log_event("pause", {"reason": self.pause_reason})

    def reset(self) -> None:
        self.initialize(self.config)
        self._log_event("reset")
        self._log_state()

    def destroy(self) -> None:
        if self._store is None:
            return
        self._cancel_scheduled()
        self.status = SessionStatus.IDLE
        if self.logger is not None:
            self.logger.close()
            self.logger = None
        self._store.clear()
        self._store = None

    def set_speed(self, speed: int) -> None:
        self.config = self.config.with_speed(speed)

    # -- stepping ------------------------------------------------------

    def advance(self, n: int) -> int:
        """Run ``n`` integrator steps; returns how many were performed.

        Fewer than ``n`` steps run only when a precomputed horizon runs out.
        """

        store = self.store
        if self.status is not SessionStatus.RUNNING:
            raise SessionStateError(f"advance() needs a running session, not {self.status.name}")
        if n < 0:
            raise ValueError(f"step count must be non-negative, got {n}")
        dt = self.config.dt
        for done in range(n):
            if store.exhausted:
                return done
            next_state = step(self.state, dt, self.physics)
            if not next_state.is_finite():
                raise SingularStateError(
                    f"state became non-finite at t={next_state.t:.6g} s "
                    f"(r={self.state.radius:.6g} m before the step)"
                )
            store.append(next_state.to_point(self.steps + 1))
            self.state = next_state
            self.steps += 1
            self._check_bailout()
        return n

    def tick(self) -> bool:
        """Run one batch of ``config.speed`` steps if the session is running."""

        if self._store is None or self.status is not SessionStatus.RUNNING:
            return False
        try:
            self.advance(self.config.speed)
            self.ticks += 1
            if self.ticks % self.log_every_ticks == 0:
                self._log_state()
            if self.store.exhausted:
                self._log_event("horizon")
                self.pause("horizon")
                return True
        except (SimulationFault, ArithmeticError, IndexError, OSError) as exc:
            self._fail(exc)
            return False
        self._schedule()
        return True

    # -- views ---------------------------------------------------------

    def frame(self) -> Frame:
        return Frame(
            state=self.state,
            tiers=self.store.tiers(),
            status=self.status,
            speed=self.config.speed,
            policy=self.store.name,
            fault=self.fault,
            pause_reason=self.pause_reason,
        )

    def export(self) -> list[ExportRow]:
        return self.store.export()

    # -- internals -----------------------------------------------------

    def _fail(self, exc: Exception) -> None:
        self.fault = f"{type(exc).__name__}: {exc}"
        if isinstance(exc, OSError):
            self.logger = None
        self._log_event("fault", {"error": self.fault})
        self.pause("fault")

    def _schedule(self) -> None:
        if self.scheduler is not None and self.status is SessionStatus.RUNNING:
            self.scheduler.request(self.tick)

    def _cancel_scheduled(self) -> None:
        if self.scheduler is not None:
            self.scheduler.cancel()

    def _check_bailout(self) -> None:
        if self._bailout_logged or self.store.name == "precomputed":
            return
        if self.state.radius > self.trail_cfg.bailout_radius:
            self._bailout_logged = True
            self._log_event("bailout", {"radius": self.trail_cfg.bailout_radius})

    def _log_state(self) -> None:
        if self.logger is not None:
            self.logger.log_state(self.state, self.physics, self.store.count())

    def _log_event(self, kind: str, details: Optional[dict] = None) -> None:
        if self.logger is not None:
            self.logger.log_event(kind, self.state, details)


__all__ = ["SimulationSession"]
