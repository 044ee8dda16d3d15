"""Behavioral profile extraction from work-item history and activity logs."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Hashable, Iterable, Sequence

import numpy as np

from task_recommender.schema import WEEKDAYS, ActivityLogEntry, ProductivityProfile, WorkItem, default_profile

NO_DEADLINE_TRIGGER = "no-deadline"
HIGH_ESTIMATE_TRIGGER = "high-estimate"
MORNING_PATTERN = "morning-productivity"
INTENSIVE_PATTERN = "intensive-work-days"


def histogram(values: Iterable[int], size: int) -> np.ndarray:
    """Count occurrences of integer keys in range(size)."""

    array = np.fromiter(values, dtype=int)
    return np.bincount(array, minlength=size)


def top_indices(counts: np.ndarray, limit: int) -> list[int]:
    """Indices with non-zero counts, most frequent first, ties ascending."""

    # lexsort uses the last key as primary
    order = np.lexsort((np.arange(len(counts)), -counts))
    return [int(index) for index in order if counts[index] > 0][:limit]


def top_keys(counter: Counter, limit: int) -> list[Hashable]:
    ranked = sorted(counter.items(), key=lambda pair: (-pair[1], pair[0]))
    return [key for key, _ in ranked[:limit]]


def completed_items(items: Iterable[WorkItem]) -> list[WorkItem]:
    return [item for item in items if item.status == "completed"]


def completion_hours(completed: Iterable[WorkItem]) -> list[int]:
    return [item.completed_at.hour for item in completed if item.completed_at is not None]


def optimal_hours(completed: Sequence[WorkItem]) -> list[int]:
    counts = histogram(completion_hours(completed), 24)
    return sorted(top_indices(counts, 4))


def optimal_days(completed: Sequence[WorkItem]) -> list[str]:
    weekdays = [item.completed_at.weekday() for item in completed if item.completed_at is not None]
    counts = histogram(weekdays, 7)
    return [WEEKDAYS[index] for index in top_indices(counts, 3)]


def average_duration(completed: Sequence[WorkItem]) -> float:
    durations = [item.actual_duration_min for item in completed if item.actual_duration_min is not None]
    if not durations:
        return 60.0
    return float(np.mean(durations))


def completion_rate(items: Sequence[WorkItem]) -> float:
    done = len(completed_items(items))
    return done / max(len(items), 1) * 100.0


def preferred_tags(completed: Sequence[WorkItem]) -> list[str]:
    counter = Counter(tag for item in completed for tag in item.tags)
    return top_keys(counter, 5)


def procrastination_triggers(items: Sequence[WorkItem], now: datetime) -> list[str]:
    """Detect history shapes that tend to precede procrastination."""

    pending = [item for item in items if item.status == "pending"]
    triggers: list[str] = []

    stale_cutoff = now - timedelta(days=7)
    stale_undated = [item for item in pending if item.due_at is None and item.created_at < stale_cutoff]
    if len(stale_undated) > 3:
        triggers.append(NO_DEADLINE_TRIGGER)

    high_estimate = [item for item in pending if (item.estimated_duration_min or 0) > 120]
    if pending and len(high_estimate) > len(pending) * 0.3:
        triggers.append(HIGH_ESTIMATE_TRIGGER)

    return triggers


def energy_peak_hours(logs: Sequence[ActivityLogEntry]) -> list[int]:
    counts = histogram((entry.created_at.hour for entry in logs), 24)
    return top_indices(counts, 3)


def intensive_days(logs: Sequence[ActivityLogEntry]) -> int:
    per_day = Counter(entry.created_at.date() for entry in logs)
    return sum(1 for count in per_day.values() if count > 10)


def productive_patterns(completed: Sequence[WorkItem], logs: Sequence[ActivityLogEntry]) -> list[str]:
    patterns: list[str] = []

    morning = [hour for hour in completion_hours(completed) if 6 <= hour < 12]
    if completed and len(morning) > len(completed) * 0.4:
        patterns.append(MORNING_PATTERN)

    if intensive_days(logs) > 0:
        patterns.append(INTENSIVE_PATTERN)

    return patterns


def build_profile(
    items: Sequence[WorkItem],
    logs: Sequence[ActivityLogEntry],
    now: datetime,
) -> ProductivityProfile:
    """Build a productivity profile; falls back to defaults on empty history."""

    if not items and not logs:
        return default_profile()

    completed = completed_items(items)
    return ProductivityProfile(
        optimal_hours=optimal_hours(completed),
        optimal_days=optimal_days(completed),
        avg_task_duration_min=average_duration(completed),
        completion_rate=completion_rate(items),
        preferred_tags=preferred_tags(completed),
        procrastination_triggers=procrastination_triggers(items, now),
        energy_peak_hours=energy_peak_hours(logs),
        productive_patterns=productive_patterns(completed, logs),
    )
