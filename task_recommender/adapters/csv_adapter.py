"""CSV adapter for work items and activity-log entries."""

from __future__ import annotations

import csv

from task_recommender.adapters.records import parse_activity_entry, parse_work_item
from task_recommender.schema import ActivityLogEntry, WorkItem


def _read_rows(file_path: str) -> list[tuple[int, dict]]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return list(enumerate(reader, start=2))


def parse_items(file_path: str) -> list[WorkItem]:
    """Parse a CSV file of work items. Tags are comma or semicolon separated."""

    return [parse_work_item(row, f"Row {row_number}") for row_number, row in _read_rows(file_path)]


def parse_activity(file_path: str) -> list[ActivityLogEntry]:
    """Parse a CSV file of activity-log entries."""

    return [parse_activity_entry(row, f"Row {row_number}") for row_number, row in _read_rows(file_path)]
