"""Confidence-tagged behavior pattern detection."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from task_recommender.profiler import (
    HIGH_ESTIMATE_TRIGGER,
    NO_DEADLINE_TRIGGER,
    completed_items,
    completion_hours,
    histogram,
    procrastination_triggers,
    top_indices,
)
from task_recommender.schema import PRIORITIES, ActivityLogEntry, BehaviorPattern, WorkItem

MIN_COMPLETED = 5
MIN_LOG_ENTRIES = 10
MIN_PENDING = 5

PATTERN_CONFIDENCE = {
    "completion_time": 0.8,
    "productivity_hours": 0.75,
    "task_preferences": 0.7,
    "procrastination": 0.6,
}


def completion_time_pattern(items: Sequence[WorkItem]) -> Optional[dict]:
    completed = completed_items(items)
    hours = completion_hours(completed)
    if len(completed) < MIN_COMPLETED or not hours:
        return None

    counts = histogram(hours, 24)
    peak_hour = top_indices(counts, 1)[0]
    return {
        "peak_hour": peak_hour,
        "frequency": int(counts[peak_hour]),
        "total_completions": len(completed),
    }


def productivity_hours_pattern(logs: Sequence[ActivityLogEntry]) -> Optional[dict]:
    if len(logs) < MIN_LOG_ENTRIES:
        return None

    counts = histogram((entry.created_at.hour for entry in logs), 24)
    return {
        "productive_hours": top_indices(counts, 3),
        "activity_distribution": {hour: int(counts[hour]) for hour in range(24) if counts[hour]},
    }


def task_preferences_pattern(items: Sequence[WorkItem]) -> Optional[dict]:
    """Success rate per priority, computed over every item of that priority."""

    if len(completed_items(items)) < MIN_COMPLETED:
        return None

    totals = Counter(item.priority for item in items)
    done = Counter(item.priority for item in items if item.status == "completed")
    preferences = [
        {
            "priority": priority,
            "success_rate": done[priority] / totals[priority],
            "sample_size": totals[priority],
        }
        for priority in PRIORITIES
        if totals[priority]
    ]
    # sorted() is stable, so equal rates keep low -> urgent order
    preferences = sorted(preferences, key=lambda entry: entry["success_rate"], reverse=True)
    return {"preferences": preferences}


def procrastination_pattern(items: Sequence[WorkItem], now: datetime) -> Optional[dict]:
    pending = [item for item in items if item.status == "pending"]
    if len(pending) < MIN_PENDING:
        return None

    triggers = procrastination_triggers(items, now)
    if not triggers:
        return None

    return {
        "triggers": triggers,
        "stale_pending": NO_DEADLINE_TRIGGER in triggers,
        "high_estimate_pending": HIGH_ESTIMATE_TRIGGER in triggers,
        "pending_total": len(pending),
    }


def detect_patterns(
    items: Sequence[WorkItem],
    logs: Sequence[ActivityLogEntry],
    now: datetime,
) -> list[BehaviorPattern]:
    """Return patterns whose minimum sample size is met."""

    detected = {
        "completion_time": completion_time_pattern(items),
        "productivity_hours": productivity_hours_pattern(logs),
        "task_preferences": task_preferences_pattern(items),
        "procrastination": procrastination_pattern(items, now),
    }
    return [
        BehaviorPattern(pattern_type=pattern_type, pattern_data=data, confidence=PATTERN_CONFIDENCE[pattern_type])
        for pattern_type, data in detected.items()
        if data is not None
    ]
