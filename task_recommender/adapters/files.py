"""Suffix-based dispatch to the CSV/JSON adapters."""

from __future__ import annotations

from pathlib import Path

from task_recommender.adapters import csv_adapter, json_adapter
from task_recommender.schema import ActivityLogEntry, WorkItem


def _adapter(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter
    if suffix == ".json":
        return json_adapter
    raise ValueError("Unsupported input format, expected .csv or .json")


def load_items(path: str | Path) -> list[WorkItem]:
    path = Path(path)
    return _adapter(path).parse_items(str(path))


def load_activity(path: str | Path) -> list[ActivityLogEntry]:
    path = Path(path)
    return _adapter(path).parse_activity(str(path))
