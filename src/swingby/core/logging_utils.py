"""Per-run telemetry files for a swingby session.

Each run gets its own directory under ``LogCfg.root_dir`` holding
``meta.json``, ``timeseries.csv`` (one row per logged state) and
``events.csv`` (lifecycle events). Rows are buffered in memory and handed to
the :mod:`csv` writers once a buffer reaches its flush threshold.
"""
from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np

from .config import LOG_CFG, LogCfg, PhysicsCfg
from .model import State
from .physics import angular_momentum, eccentricity, energy_specific


def _num(value: float) -> str:
    return f"{value:.10g}"


def claim_run_dir(root: Path, run_id: str) -> Path:
    """Create ``root/run_id``, appending ``_1``, ``_2``... if it is taken."""

    root.mkdir(parents=True, exist_ok=True)
    candidate = root / run_id
    suffix = 0
    while True:
        try:
            candidate.mkdir()
            return candidate
        except FileExistsError:
            suffix += 1
            candidate = root / f"{run_id}_{suffix}"


class RunLogger:
    """Buffered CSV telemetry for one simulation run."""

    TIMESERIES_HEADER = ("t", "x", "y", "vx", "vy", "r", "v", "energy", "h", "e", "trail_count")
    EVENTS_HEADER = ("t", "type", "r", "v", "details")

    def __init__(
        self,
        root_dir: str | Path | None = None,
        run_id: Optional[str] = None,
        *,
        cfg: LogCfg = LOG_CFG,
    ) -> None:
        self.cfg = cfg
        root = Path(cfg.root_dir if root_dir is None else root_dir)
        self.run_dir = claim_run_dir(root, run_id or datetime.now().strftime("%Y%m%d_%H%M%S"))
        self.run_id = self.run_dir.name
        self.meta_path = self.run_dir / "meta.json"
        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"

        self._ts_file = self.timeseries_path.open("w", newline="", encoding="utf-8")
        self._ts_writer = csv.writer(self._ts_file)
        self._ts_writer.writerow(self.TIMESERIES_HEADER)
        self._ev_file = self.events_path.open("w", newline="", encoding="utf-8")
        self._ev_writer = csv.writer(self._ev_file)
        self._ev_writer.writerow(self.EVENTS_HEADER)

        self._ts_rows: list[list[str]] = []
        self._ev_rows: list[list[str]] = []
        self.closed = False

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_state(self, state: State, physics: PhysicsCfg, trail_count: int) -> None:
        """Queue one timeseries row with the orbital invariants of ``state``."""

        r, v = state.position, state.velocity
        with np.errstate(divide="ignore", invalid="ignore"):
            energy = energy_specific(r, v, physics)
            ecc = eccentricity(r, v, physics)
        self._ts_rows.append(
            [
                _num(state.t),
                _num(state.x),
                _num(state.y),
                _num(state.vx),
                _num(state.vy),
                _num(state.radius),
                _num(state.speed),
                _num(energy),
                _num(angular_momentum(r, v)),
                _num(ecc),
                str(trail_count),
            ]
        )
        if len(self._ts_rows) >= max(1, self.cfg.timeseries_flush_threshold):
            self.flush()

    def log_event(self, kind: str, state: State, details: Optional[dict] = None) -> None:
        self._ev_rows.append(
            [
                _num(state.t),
                kind,
                _num(state.radius),
                _num(state.speed),
                json.dumps(details, sort_keys=True) if details else "",
            ]
        )
        if len(self._ev_rows) >= max(1, self.cfg.events_flush_threshold):
            self.flush()

    def flush(self) -> None:
        if self._ts_rows:
            self._ts_writer.writerows(self._ts_rows)
            self._ts_file.flush()
            self._ts_rows.clear()
        if self._ev_rows:
            self._ev_writer.writerows(self._ev_rows)
            self._ev_file.flush()
            self._ev_rows.clear()

    def close(self) -> None:
        if self.closed:
            return
        self.flush()
        self._ts_file.close()
        self._ev_file.close()
        self.closed = True


__all__ = ["RunLogger", "claim_run_dir"]
