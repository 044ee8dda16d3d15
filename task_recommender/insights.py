"""Human-readable behavior insights derived from a profile."""

from __future__ import annotations

from typing import Optional, Sequence

from task_recommender.completion_model import CompletionModel, top_driver
from task_recommender.schema import BehaviorInsight, BehaviorPattern, ProductivityProfile, WorkItem


def _hours_insight(profile: ProductivityProfile) -> Optional[BehaviorInsight]:
    if not profile.optimal_hours:
        return None
    first, last = profile.optimal_hours[0], profile.optimal_hours[-1]
    return BehaviorInsight(
        type="strength",
        title="High-productivity hours identified",
        description=f"You are most productive between {first}:00 and {last}:00",
        confidence=85,
        suggestion="Schedule your most important work during these hours",
        data_points=len(profile.optimal_hours),
    )


def _completion_insight(profile: ProductivityProfile, items: Sequence[WorkItem]) -> Optional[BehaviorInsight]:
    rate = round(profile.completion_rate)
    if profile.completion_rate < 70:
        return BehaviorInsight(
            type="weakness",
            title="Low completion rate",
            description=f"You complete only {rate}% of your items",
            confidence=90,
            suggestion="Try breaking work into smaller, more specific items",
            data_points=len(items),
        )
    if profile.completion_rate > 85:
        return BehaviorInsight(
            type="strength",
            title="Excellent completion rate",
            description=f"You complete {rate}% of your items",
            confidence=95,
            suggestion="You could take on more ambitious items",
            data_points=len(items),
        )
    return None


def _duration_insight(profile: ProductivityProfile, items: Sequence[WorkItem]) -> Optional[BehaviorInsight]:
    if profile.avg_task_duration_min <= 120:
        return None
    return BehaviorInsight(
        type="opportunity",
        title="Items tend to run long",
        description=f"Your average item takes {round(profile.avg_task_duration_min)} minutes",
        confidence=80,
        suggestion="Split large items into more manageable subtasks",
        data_points=sum(1 for item in items if item.actual_duration_min is not None),
    )


def _tags_insight(profile: ProductivityProfile) -> Optional[BehaviorInsight]:
    if not profile.preferred_tags:
        return None
    return BehaviorInsight(
        type="trend",
        title="Preferred areas identified",
        description=f"You perform best on items tagged: {', '.join(profile.preferred_tags[:3])}",
        confidence=75,
        suggestion="Use these strengths for important work",
        data_points=len(profile.preferred_tags),
    )


def _procrastination_insight(patterns: Sequence[BehaviorPattern]) -> Optional[BehaviorInsight]:
    pattern = next((p for p in patterns if p.pattern_type == "procrastination"), None)
    if pattern is None:
        return None
    triggers = pattern.pattern_data["triggers"]
    return BehaviorInsight(
        type="weakness",
        title="Procrastination triggers detected",
        description=f"Pending work piles up around: {', '.join(triggers)}",
        confidence=70,
        suggestion="Give undated items a due date and split long estimates",
        data_points=pattern.pattern_data["pending_total"],
    )


def _model_insight(completion_model: Optional[CompletionModel]) -> Optional[BehaviorInsight]:
    if completion_model is None:
        return None
    driver = top_driver(completion_model)
    if driver is None:
        return None
    verb = "helps" if driver["direction"] == "positive" else "hurts"
    return BehaviorInsight(
        type="trend",
        title="Strongest completion driver",
        description=f"In your history, {driver['label']} {verb} completion the most",
        confidence=60,
        suggestion="Shape new items around what tends to get finished",
        data_points=completion_model.n_items,
    )


def generate_insights(
    profile: ProductivityProfile,
    patterns: Sequence[BehaviorPattern],
    items: Sequence[WorkItem],
    completion_model: Optional[CompletionModel] = None,
) -> list[BehaviorInsight]:
    candidates = [
        _hours_insight(profile),
        _completion_insight(profile, items),
        _duration_insight(profile, items),
        _tags_insight(profile),
        _procrastination_insight(patterns),
        _model_insight(completion_model),
    ]
    return [insight for insight in candidates if insight is not None]
