"""Weighted, polarity-tagged decision factors for a single work item."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from task_recommender.deadlines import due_label
from task_recommender.schema import ContextSnapshot, EnergyLevel, Factor, ProductivityProfile, WorkItem

_DEFAULT_DURATIONS = {"urgent": 30.0, "high": 45.0, "medium": 60.0, "low": 90.0}


def required_energy(item: WorkItem) -> EnergyLevel:
    if item.priority in ("urgent", "high"):
        return "high"
    if item.estimated_duration_min is not None and item.estimated_duration_min > 60:
        return "medium"
    return "low"


def estimate_duration(item: WorkItem) -> float:
    if item.estimated_duration_min:
        return float(item.estimated_duration_min)
    return _DEFAULT_DURATIONS.get(item.priority, 60.0)


def urgency_factors(item: WorkItem, now: datetime) -> list[Factor]:
    factors: list[Factor] = []

    label = due_label(now, item.due_at)
    if label == "overdue":
        days_late = (now.date() - item.due_at.date()).days
        factors.append(Factor("overdue", "Overdue", f"Overdue by {days_late} days", 100, "negative"))
    elif label == "today":
        factors.append(Factor("due_today", "Due today", "The deadline is today", 95, "positive"))
    elif label == "tomorrow":
        factors.append(Factor("due_tomorrow", "Due tomorrow", "The deadline is tomorrow", 80, "positive"))

    if item.priority in ("urgent", "high"):
        factors.append(Factor("high_priority", "High priority", f"Marked as {item.priority} priority", 70, "positive"))

    return factors


def time_context_factors(context: ContextSnapshot) -> list[Factor]:
    factors: list[Factor] = []

    if context.time_of_day == "morning" and context.energy_level == "high":
        factors.append(
            Factor("morning_energy", "Morning energy", "A productive morning with high energy", 75, "positive")
        )
    if context.work_pattern == "productive":
        factors.append(
            Factor("productive_day", "Productive day", "You have already completed several items today", 60, "positive")
        )
    if context.energy_level == "high":
        factors.append(Factor("high_energy", "High energy", "Your energy level is at its peak", 65, "positive"))

    return factors


def energy_factors(item: WorkItem, context: ContextSnapshot) -> list[Factor]:
    if required_energy(item) != "high":
        return []
    if context.energy_level == "high":
        return [Factor("energy_match", "Energy match", "Your high energy matches what this item needs", 55, "positive")]
    if context.energy_level == "low":
        return [
            Factor("energy_mismatch", "Low energy", "This item needs more energy than you have right now", 40, "negative")
        ]
    return []


def momentum_factors(item: WorkItem, context: ContextSnapshot) -> list[Factor]:
    factors: list[Factor] = []

    if item.status == "in_progress":
        factors.append(Factor("in_progress", "In progress", "You have already started this item", 90, "positive"))
    if context.completed_today > 2:
        factors.append(Factor("momentum", "Good momentum", "You are keeping a good pace today", 55, "positive"))

    return factors


def pattern_factors(item: WorkItem, profile: ProductivityProfile) -> list[Factor]:
    matching = sorted(set(item.tags) & set(profile.preferred_tags))
    if not matching:
        return []
    return [
        Factor(
            "preferred_tags",
            "Area of strength",
            f"You have a good track record with {', '.join(matching)}",
            35,
            "positive",
        )
    ]


def generate_factors(
    item: WorkItem,
    context: ContextSnapshot,
    now: datetime,
    profile: Optional[ProductivityProfile] = None,
) -> list[Factor]:
    """Generate all factors for an item, heaviest first."""

    factors = urgency_factors(item, now)
    factors += time_context_factors(context)
    factors += energy_factors(item, context)
    factors += momentum_factors(item, context)
    if profile is not None:
        factors += pattern_factors(item, profile)
    return sorted(factors, key=lambda factor: factor.weight, reverse=True)


def confidence_score(factors: Iterable[Factor]) -> float:
    factors = list(factors)
    positive = sum(f.weight for f in factors if f.polarity == "positive")
    negative = sum(f.weight for f in factors if f.polarity == "negative")
    return float(max(0.0, min(100.0, positive - 0.5 * negative)))


def success_probability(item: WorkItem, context: ContextSnapshot, factors: Iterable[Factor]) -> float:
    probability = 50.0
    if context.energy_level == "high":
        probability += 15
    if context.work_pattern == "productive":
        probability += 10
    if item.status == "in_progress":
        probability += 20
    if item.priority in ("high", "urgent"):
        probability += 10

    probability -= 5 * sum(1 for f in factors if f.polarity == "negative")
    return float(max(10.0, min(95.0, probability)))
