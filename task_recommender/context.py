"""Context snapshot derived from the wall clock and today's completions."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from task_recommender.schema import WEEKDAYS, ContextSnapshot, EnergyLevel, TimeOfDay, WorkItem, WorkPattern


def time_of_day(hour: int) -> TimeOfDay:
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 22:
        return "evening"
    return "night"


def energy_level(hour: int) -> EnergyLevel:
    # afternoon and evening share the medium tier
    if 6 <= hour < 12:
        return "high"
    if 12 <= hour < 22:
        return "medium"
    return "low"


def work_pattern(completed_today: int, hour: int) -> WorkPattern:
    """Compare today's completions with a rough hour-based expectation."""

    expected = max(1, hour // 4)
    if completed_today > expected + 2:
        return "productive"
    if completed_today < expected - 1:
        return "low"
    return "normal"


def count_completed_today(items: Iterable[WorkItem], now: datetime) -> int:
    """Count items completed on the current calendar day."""

    today = now.date()
    return sum(
        1
        for item in items
        if item.status == "completed" and item.completed_at is not None and item.completed_at.date() == today
    )


def build_context(now: datetime, completed_today: int) -> ContextSnapshot:
    """Build a context snapshot; pure function of its arguments."""

    hour = now.hour
    return ContextSnapshot(
        time_of_day=time_of_day(hour),
        day_of_week=WEEKDAYS[now.weekday()],
        energy_level=energy_level(hour),
        completed_today=max(0, int(completed_today)),
        work_pattern=work_pattern(completed_today, hour),
        hour=hour,
    )
