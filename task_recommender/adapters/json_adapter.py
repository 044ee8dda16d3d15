"""JSON adapter for work items and activity-log entries."""

from __future__ import annotations

import json

from task_recommender.adapters.records import parse_activity_entry, parse_work_item
from task_recommender.schema import ActivityLogEntry, WorkItem


def _load_list(file_path: str) -> list:
    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Item {index}: expected an object")
    return payload


def parse_items(file_path: str) -> list[WorkItem]:
    """Parse a JSON list of work-item objects."""

    return [parse_work_item(item, f"Item {i}") for i, item in enumerate(_load_list(file_path), start=1)]


def parse_activity(file_path: str) -> list[ActivityLogEntry]:
    """Parse a JSON list of activity-log objects."""

    return [parse_activity_entry(item, f"Item {i}") for i, item in enumerate(_load_list(file_path), start=1)]
