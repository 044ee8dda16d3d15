"""Record validation shared by the file adapters and the engine."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from task_recommender.deadlines import as_naive_local
from task_recommender.errors import InvalidItem
from task_recommender.schema import PRIORITIES, STATUSES, ActivityLogEntry, WorkItem

_REQUIRED_ITEM_FIELDS = ("id", "status", "priority", "created_at")
_REQUIRED_ENTRY_FIELDS = ("id", "created_at", "type")
_TRUE_VALUES = {"1", "true", "yes", "y"}


def _missing(record: Mapping[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [name for name in fields if record.get(name) in (None, "")]


def _parse_datetime(value: Any, name: str, where: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return as_naive_local(value)
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidItem(f"{where}: malformed {name}") from exc
    return as_naive_local(parsed)


def _parse_minutes(value: Any, name: str, where: str) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        minutes = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidItem(f"{where}: invalid {name}") from exc
    if minutes < 0:
        raise InvalidItem(f"{where}: negative {name}")
    return minutes


def _parse_tags(value: Any) -> frozenset[str]:
    if value in (None, ""):
        return frozenset()
    if isinstance(value, str):
        parts = value.replace(";", ",").split(",")
    else:
        parts = [str(part) for part in value]
    return frozenset(part.strip() for part in parts if part.strip())


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in (None, ""):
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def parse_work_item(record: Mapping[str, Any], where: str = "Item") -> WorkItem:
    """Validate a mapping and build a WorkItem, raising InvalidItem on errors."""

    missing = _missing(record, _REQUIRED_ITEM_FIELDS)
    if missing:
        raise InvalidItem(f"{where}: missing required fields {missing}")

    status = str(record["status"]).strip()
    if status not in STATUSES:
        raise InvalidItem(f"{where}: invalid status '{status}'")

    priority = str(record["priority"]).strip()
    if priority not in PRIORITIES:
        raise InvalidItem(f"{where}: invalid priority '{priority}'")

    return WorkItem(
        id=str(record["id"]).strip(),
        status=status,
        priority=priority,
        created_at=_parse_datetime(record["created_at"], "created_at", where),
        due_at=_parse_datetime(record.get("due_at"), "due_at", where),
        estimated_duration_min=_parse_minutes(record.get("estimated_duration_min"), "estimated_duration_min", where),
        actual_duration_min=_parse_minutes(record.get("actual_duration_min"), "actual_duration_min", where),
        tags=_parse_tags(record.get("tags")),
        completed_at=_parse_datetime(record.get("completed_at"), "completed_at", where),
        archived=_parse_bool(record.get("archived")),
        title=str(record.get("title") or ""),
    )


def parse_activity_entry(record: Mapping[str, Any], where: str = "Entry") -> ActivityLogEntry:
    missing = _missing(record, _REQUIRED_ENTRY_FIELDS)
    if missing:
        raise InvalidItem(f"{where}: missing required fields {missing}")

    work_item_id = record.get("work_item_id")
    return ActivityLogEntry(
        id=str(record["id"]).strip(),
        created_at=_parse_datetime(record["created_at"], "created_at", where),
        type=str(record["type"]).strip(),
        work_item_id=str(work_item_id).strip() if work_item_id not in (None, "") else None,
    )


def _checked_datetime(value: Any, name: str, where: str, required: bool = False) -> Optional[datetime]:
    if value is None and not required:
        return None
    if not isinstance(value, datetime):
        raise InvalidItem(f"{where}: malformed {name}")
    return as_naive_local(value)


def normalize_work_item(item: WorkItem, where: str = "Item") -> WorkItem:
    """Check the datetime fields of a built WorkItem and return it with naive local times."""

    created_at = _checked_datetime(item.created_at, "created_at", where, required=True)
    due_at = _checked_datetime(item.due_at, "due_at", where)
    completed_at = _checked_datetime(item.completed_at, "completed_at", where)
    if all(value is None or value.tzinfo is None for value in (item.created_at, item.due_at, item.completed_at)):
        return item
    return replace(item, created_at=created_at, due_at=due_at, completed_at=completed_at)


def normalize_activity_entry(entry: ActivityLogEntry, where: str = "Entry") -> ActivityLogEntry:
    created_at = _checked_datetime(entry.created_at, "created_at", where, required=True)
    if entry.created_at.tzinfo is None:
        return entry
    return replace(entry, created_at=created_at)


def coerce_work_item(candidate: Union[WorkItem, Mapping[str, Any]], where: str = "Candidate") -> WorkItem:
    """Accept a WorkItem or a mapping; reject malformed candidates."""

    if isinstance(candidate, WorkItem):
        if not candidate.id:
            raise InvalidItem(f"{where}: missing id")
        if candidate.status not in STATUSES:
            raise InvalidItem(f"{where}: invalid status '{candidate.status}'")
        if candidate.priority not in PRIORITIES:
            raise InvalidItem(f"{where}: invalid priority '{candidate.priority}'")
        return normalize_work_item(candidate, where)
    if isinstance(candidate, Mapping):
        return parse_work_item(candidate, where)
    raise InvalidItem(f"{where}: unsupported candidate type {type(candidate).__name__}")
