"""Core data schema for work items, profiles and recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional

STATUSES = ("pending", "in_progress", "completed", "cancelled")
PRIORITIES = ("low", "medium", "high", "urgent")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

Status = Literal["pending", "in_progress", "completed", "cancelled"]
Priority = Literal["low", "medium", "high", "urgent"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
EnergyLevel = Literal["high", "medium", "low"]
WorkPattern = Literal["productive", "normal", "low"]
Polarity = Literal["positive", "negative", "neutral"]
PatternType = Literal["completion_time", "productivity_hours", "task_preferences", "procrastination"]
InsightType = Literal["strength", "weakness", "opportunity", "trend"]
EnergyMatch = Literal["excellent", "good", "poor"]


@dataclass
class WorkItem:
    """Work item as read from the external store."""

    id: str
    status: Status
    priority: Priority
    created_at: datetime
    due_at: Optional[datetime] = None
    estimated_duration_min: Optional[float] = None
    actual_duration_min: Optional[float] = None
    tags: frozenset[str] = field(default_factory=frozenset)
    completed_at: Optional[datetime] = None
    archived: bool = False
    title: str = ""


@dataclass
class ActivityLogEntry:
    id: str
    created_at: datetime
    type: str
    work_item_id: Optional[str] = None


@dataclass
class ProductivityProfile:
    """Statistical summary of a user's historical behavior."""

    optimal_hours: list[int]
    optimal_days: list[str]
    avg_task_duration_min: float
    completion_rate: float
    preferred_tags: list[str]
    procrastination_triggers: list[str]
    energy_peak_hours: list[int]
    productive_patterns: list[str]


def default_profile() -> ProductivityProfile:
    """Profile used when no history is available."""

    return ProductivityProfile(
        optimal_hours=[9, 10, 11],
        optimal_days=["monday", "tuesday", "wednesday"],
        avg_task_duration_min=60.0,
        completion_rate=75.0,
        preferred_tags=[],
        procrastination_triggers=[],
        energy_peak_hours=[9, 14],
        productive_patterns=[],
    )


@dataclass
class BehaviorPattern:
    pattern_type: PatternType
    pattern_data: dict[str, Any]
    confidence: float


@dataclass
class BehaviorInsight:
    type: InsightType
    title: str
    description: str
    confidence: float
    suggestion: str
    data_points: int


@dataclass
class ContextSnapshot:
    """Point-in-time situational summary derived from the clock."""

    time_of_day: TimeOfDay
    day_of_week: str
    energy_level: EnergyLevel
    completed_today: int
    work_pattern: WorkPattern
    hour: int


@dataclass(frozen=True)
class Factor:
    id: str
    label: str
    description: str
    weight: float
    polarity: Polarity


@dataclass
class ScoredItem:
    item: WorkItem
    score: float
    confidence: float
    factors: list[Factor]
    success_probability: float
    estimated_duration: float
    energy_match: EnergyMatch

    @property
    def composite(self) -> float:
        return 0.7 * self.score + 0.3 * self.confidence


@dataclass
class TimingAdvice:
    is_optimal_now: bool
    reasoning: str
    optimal_hour: Optional[int] = None


@dataclass
class EnergyAdvice:
    required: EnergyLevel
    available: EnergyLevel
    match: EnergyMatch
    suggestion: str


@dataclass
class Recommendation:
    best: ScoredItem
    alternatives: list[ScoredItem]
    profile: ProductivityProfile
    insights: list[BehaviorInsight]
    context: ContextSnapshot
    reasoning: str
    timing: TimingAdvice
    energy: EnergyAdvice
    strategy: str
