"""Deadline bucketing rules shared by factors and urgency scoring."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def as_naive_local(value: datetime) -> datetime:
    """Convert an offset-aware timestamp to naive local time.

    All comparisons in the engine use naive local datetimes, matching the
    default ``datetime.now`` clock. Naive values pass through unchanged.
    """

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def hours_until(now: datetime, due_at: datetime) -> float:
    return (due_at - now).total_seconds() / 3600.0


def days_until(now: datetime, due_at: datetime) -> int:
    """Calendar-day distance between today and the due date."""
    return (due_at.date() - now.date()).days


def due_bonus_by_hours(now: datetime, due_at: Optional[datetime]) -> int:
    """Urgency bonus bucketed on hours remaining until the due time."""

    if due_at is None:
        return 0
    hours = hours_until(now, due_at)
    if hours < 0:
        return 50
    if hours < 24:
        return 40
    if hours < 48:
        return 30
    if hours < 168:
        return 20
    return 0


def due_bonus_by_days(now: datetime, due_at: Optional[datetime]) -> int:
    """Urgency bonus bucketed on calendar days until the due date."""

    if due_at is None:
        return 0
    if due_at < now:
        return 50
    days = days_until(now, due_at)
    if days == 0:
        return 40
    if days == 1:
        return 30
    if days < 7:
        return 20
    return 0


def due_label(now: datetime, due_at: Optional[datetime]) -> Optional[str]:
    """Return 'overdue', 'today', 'tomorrow' or None for factor generation."""

    if due_at is None:
        return None
    if due_at < now:
        return "overdue"
    days = days_until(now, due_at)
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return None
