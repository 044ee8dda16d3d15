"""Multi-factor scoring, selection and recommendation assembly."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from task_recommender.cache import TTLCache
from task_recommender.deadlines import due_bonus_by_days, due_bonus_by_hours, due_label
from task_recommender.errors import CacheCorruption
from task_recommender.explain import energy_advice, energy_match, reasoning_text, timing_advice
from task_recommender.factors import confidence_score, estimate_duration, generate_factors, success_probability
from task_recommender.observability import get_logger
from task_recommender.profiler import HIGH_ESTIMATE_TRIGGER, NO_DEADLINE_TRIGGER
from task_recommender.schema import (
    BehaviorInsight,
    ContextSnapshot,
    Factor,
    ProductivityProfile,
    Recommendation,
    ScoredItem,
    WorkItem,
)

logger = get_logger(__name__)

WEIGHTS = {"urgency": 0.30, "context": 0.25, "pattern": 0.20, "momentum": 0.15, "learning": 0.10}

PRIORITY_BASE = {"low": 10, "medium": 30, "high": 60, "urgent": 90}
ENERGY_BONUS = {"high": 35, "medium": 20, "low": 5}
WORK_PATTERN_BONUS = {"productive": 25, "normal": 15, "low": 5}

MAX_ALTERNATIVES = 3


@dataclass(frozen=True)
class ScoringStrategy:
    """Named scoring variant.

    ``due_bonus`` maps (now, due_at) to the urgency bonus; ``learning_baseline``
    is the learning subscore for completion rates within [60, 80].
    """

    name: str
    learning_baseline: float
    due_bonus: Callable[[datetime, Optional[datetime]], int]


OPTIMIZED = ScoringStrategy(name="optimized", learning_baseline=15.0, due_bonus=due_bonus_by_hours)
BASELINE = ScoringStrategy(name="baseline", learning_baseline=0.0, due_bonus=due_bonus_by_days)
STRATEGIES = {strategy.name: strategy for strategy in (OPTIMIZED, BASELINE)}


def get_strategy(name: str) -> ScoringStrategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown scoring strategy '{name}', expected one of {sorted(STRATEGIES)}") from None


def is_eligible(item: WorkItem) -> bool:
    return item.status != "completed" and not item.archived


def urgency_score(item: WorkItem, now: datetime, strategy: ScoringStrategy = OPTIMIZED) -> float:
    return float(PRIORITY_BASE.get(item.priority, 30) + strategy.due_bonus(now, item.due_at))


def context_score(context: ContextSnapshot, profile: ProductivityProfile) -> float:
    score = 40 if context.hour in profile.optimal_hours else 0
    score += ENERGY_BONUS[context.energy_level]
    score += WORK_PATTERN_BONUS[context.work_pattern]
    return float(score)


def procrastination_trigger_fires(item: WorkItem, profile: ProductivityProfile) -> bool:
    triggers = profile.procrastination_triggers
    if NO_DEADLINE_TRIGGER in triggers and item.due_at is None:
        return True
    if HIGH_ESTIMATE_TRIGGER in triggers and (item.estimated_duration_min or 0) > 120:
        return True
    return False


def pattern_score(item: WorkItem, profile: ProductivityProfile) -> float:
    score = 15 * len(set(item.tags) & set(profile.preferred_tags))

    duration = item.estimated_duration_min or 60
    if abs(duration - profile.avg_task_duration_min) < 30:
        score += 20

    if procrastination_trigger_fires(item, profile):
        score -= 30
    return float(score)


def momentum_score(item: WorkItem, context: ContextSnapshot) -> float:
    score = 60 if item.status == "in_progress" else 0
    if context.completed_today > 2:
        score += 30
    elif context.completed_today > 0:
        score += 15
    return float(score)


def learning_score(profile: ProductivityProfile, strategy: ScoringStrategy = OPTIMIZED) -> float:
    if profile.completion_rate > 80:
        return 20.0
    if profile.completion_rate < 60:
        return 10.0
    return strategy.learning_baseline


def subscores(
    item: WorkItem,
    context: ContextSnapshot,
    profile: ProductivityProfile,
    now: datetime,
    strategy: ScoringStrategy = OPTIMIZED,
) -> dict[str, float]:
    return {
        "urgency": urgency_score(item, now, strategy),
        "context": context_score(context, profile),
        "pattern": pattern_score(item, profile),
        "momentum": momentum_score(item, context),
        "learning": learning_score(profile, strategy),
    }


def composite_score(parts: dict[str, float]) -> float:
    total = sum(WEIGHTS[name] * value for name, value in parts.items())
    return float(max(0.0, min(100.0, total)))


def _profile_key(profile: ProductivityProfile) -> tuple:
    return (
        tuple(profile.optimal_hours),
        tuple(profile.optimal_days),
        profile.avg_task_duration_min,
        profile.completion_rate,
        tuple(profile.preferred_tags),
        tuple(profile.procrastination_triggers),
    )


def fingerprint(
    item: WorkItem,
    context: ContextSnapshot,
    profile: ProductivityProfile,
    now: datetime,
    strategy: ScoringStrategy,
) -> tuple:
    """Everything a cached score depends on; a mismatch invalidates the entry."""

    return (
        strategy.name,
        item.id,
        item.status,
        item.priority,
        item.due_at,
        item.estimated_duration_min,
        tuple(sorted(item.tags)),
        item.archived,
        now.date(),
        due_label(now, item.due_at),
        strategy.due_bonus(now, item.due_at),
        context.hour,
        context.time_of_day,
        context.energy_level,
        context.work_pattern,
        context.completed_today,
        _profile_key(profile),
    )


_ENTRY_KEYS = {"score", "confidence", "factors", "computed_at", "fingerprint"}


def _validate_entry(value: object, item_id: str) -> dict:
    if not isinstance(value, dict) or not _ENTRY_KEYS <= value.keys():
        raise CacheCorruption(f"malformed score entry for item '{item_id}'")
    factors = value["factors"]
    if not isinstance(factors, (list, tuple)) or not all(isinstance(factor, Factor) for factor in factors):
        raise CacheCorruption(f"malformed factors for item '{item_id}'")
    return value


class ScoringEngine:
    """Scores candidates and selects the recommendation.

    With a ``score_cache`` the per-item score, confidence and factors are
    reused for ``score_ttl`` seconds, only while the item's inputs are
    unchanged.
    """

    def __init__(
        self,
        strategy: ScoringStrategy = OPTIMIZED,
        score_cache: Optional[TTLCache] = None,
        score_ttl: float = 300.0,
    ):
        self.strategy = strategy
        self.score_cache = score_cache
        self.score_ttl = score_ttl
        self.hits = 0
        self.misses = 0

    def _cached(self, item: WorkItem, key: tuple) -> Optional[dict]:
        entry = self.score_cache.get(item.id)
        if entry is None:
            return None
        try:
            value = _validate_entry(entry.value, item.id)
        except CacheCorruption as exc:
            logger.warning("Discarding corrupt cache entry", item_id=item.id, error=str(exc))
            self.score_cache.invalidate(item.id)
            return None
        if value["fingerprint"] != key:
            return None
        return value

    def _compute(
        self,
        item: WorkItem,
        context: ContextSnapshot,
        profile: ProductivityProfile,
        now: datetime,
    ) -> tuple[float, float, list[Factor]]:
        factors = generate_factors(item, context, now, profile)
        score = composite_score(subscores(item, context, profile, now, self.strategy))
        return score, confidence_score(factors), factors

    def score_item(
        self,
        item: WorkItem,
        context: ContextSnapshot,
        profile: ProductivityProfile,
        now: datetime,
    ) -> ScoredItem:
        cached = None
        key = None
        if self.score_cache is not None:
            key = fingerprint(item, context, profile, now, self.strategy)
            cached = self._cached(item, key)

        if cached is not None:
            self.hits += 1
            score, confidence, factors = cached["score"], cached["confidence"], list(cached["factors"])
        else:
            if self.score_cache is not None:
                self.misses += 1
            score, confidence, factors = self._compute(item, context, profile, now)
            if self.score_cache is not None:
                self.score_cache.put(
                    item.id,
                    {
                        "score": score,
                        "confidence": confidence,
                        "factors": tuple(factors),
                        "computed_at": now,
                        "fingerprint": key,
                    },
                    self.score_ttl,
                )
        logger.debug("Item scored", item_id=item.id, score=round(score, 2), cache_hit=cached is not None)

        return ScoredItem(
            item=item,
            score=score,
            confidence=confidence,
            factors=factors,
            success_probability=success_probability(item, context, factors),
            estimated_duration=estimate_duration(item),
            energy_match=energy_match(item, context),
        )

    def rank(
        self,
        candidates: Iterable[WorkItem],
        context: ContextSnapshot,
        profile: ProductivityProfile,
        now: datetime,
    ) -> list[ScoredItem]:
        """Score eligible candidates; highest composite first, ties in input order."""

        scored = [self.score_item(item, context, profile, now) for item in candidates if is_eligible(item)]
        return sorted(scored, key=lambda entry: entry.composite, reverse=True)

    def recommend(
        self,
        candidates: Sequence[WorkItem],
        context: ContextSnapshot,
        profile: ProductivityProfile,
        now: datetime,
        insights: Sequence[BehaviorInsight] = (),
    ) -> Optional[Recommendation]:
        ranked = self.rank(candidates, context, profile, now)
        if not ranked:
            return None

        best = ranked[0]
        return Recommendation(
            best=best,
            alternatives=ranked[1 : 1 + MAX_ALTERNATIVES],
            profile=profile,
            insights=list(insights),
            context=context,
            reasoning=reasoning_text(best.factors),
            timing=timing_advice(profile, context.hour),
            energy=energy_advice(best.item, context),
            strategy=self.strategy.name,
        )
