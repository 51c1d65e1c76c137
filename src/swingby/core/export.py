"""CSV export of retained trail points."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np

from .trail import ExportRow, TrajectoryStore

EXPORT_HEADER = ["i", "t", "x", "y"]


def export_rows(store: TrajectoryStore) -> list[ExportRow]:
    """Rows for exactly what ``store`` currently holds."""

    return store.export()


def write_trail_csv(rows: Iterable[ExportRow], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(EXPORT_HEADER)
        for index, t, x, y in rows:
            writer.writerow([index, repr(float(t)), repr(float(x)), repr(float(y))])
    return path


def read_trail_csv(path: str | Path) -> Dict[str, np.ndarray]:
    with Path(path).open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in EXPORT_HEADER}
        for row in reader:
            for key in EXPORT_HEADER:
                columns[key].append(float(row[key]))
    data = {key: np.asarray(values) for key, values in columns.items()}
    data["i"] = data["i"].astype(int)
    return data


__all__ = ["EXPORT_HEADER", "export_rows", "read_trail_csv", "write_trail_csv"]
