"""Recommendation engine entry point: history fetch, caches and fallbacks."""

from __future__ import annotations

import copy
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from task_recommender.adapters.records import coerce_work_item
from task_recommender.cache import CacheSweeper, InMemoryTTLCache, TTLCache
from task_recommender.completion_model import fit_completion_model
from task_recommender.config import Settings, get_settings
from task_recommender.context import build_context, count_completed_today
from task_recommender.deadlines import as_naive_local
from task_recommender.errors import DataUnavailable, InvalidItem
from task_recommender.history import ActivityLogStore, History, WorkItemStore, fetch_history, fetch_recent_items
from task_recommender.insights import generate_insights
from task_recommender.observability import get_logger
from task_recommender.patterns import detect_patterns
from task_recommender.profiler import build_profile
from task_recommender.schema import (
    BehaviorInsight,
    BehaviorPattern,
    ProductivityProfile,
    Recommendation,
    WorkItem,
    default_profile,
)
from task_recommender.scoring import ScoringEngine, ScoringStrategy, get_strategy, is_eligible

logger = get_logger(__name__)

Candidate = Union[WorkItem, Mapping[str, Any]]


@dataclass
class BehaviorAnalysis:
    """Profile, patterns and insights computed from one history fetch."""

    profile: ProductivityProfile
    patterns: list[BehaviorPattern] = field(default_factory=list)
    insights: list[BehaviorInsight] = field(default_factory=list)
    from_history: bool = True


def analyze_history(history: History, now: datetime) -> BehaviorAnalysis:
    profile = build_profile(history.items, history.logs, now)
    patterns = detect_patterns(history.items, history.logs, now)
    completion_model = fit_completion_model(history.items)
    insights = generate_insights(profile, patterns, history.items, completion_model)
    return BehaviorAnalysis(profile=profile, patterns=patterns, insights=insights)


def default_analysis() -> BehaviorAnalysis:
    return BehaviorAnalysis(profile=default_profile(), from_history=False)


class RecommendationEngine:
    """Picks the best work item to do right now for a user.

    History is read through the two store protocols with a deadline. When the
    fetch fails the engine proceeds with the default profile unless
    ``strict`` is enabled. With ``use_cache`` the behavior analysis is cached
    per user and item scores per item id.
    """

    def __init__(
        self,
        item_store: WorkItemStore,
        log_store: ActivityLogStore,
        settings: Optional[Settings] = None,
        strategy: Optional[ScoringStrategy] = None,
        profile_cache: Optional[TTLCache] = None,
        score_cache: Optional[TTLCache] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or get_settings()
        self.item_store = item_store
        self.log_store = log_store
        self._clock = clock

        self.profile_cache: Optional[TTLCache] = None
        if self.settings.use_cache:
            self.profile_cache = profile_cache if profile_cache is not None else InMemoryTTLCache()
            score_cache = score_cache if score_cache is not None else InMemoryTTLCache()
        else:
            score_cache = None

        self.scoring = ScoringEngine(
            strategy=strategy or get_strategy(self.settings.scoring_strategy),
            score_cache=score_cache,
            score_ttl=self.settings.score_ttl_seconds,
        )
        self._profile_hits = 0
        self._profile_misses = 0
        self._sweeper: Optional[CacheSweeper] = None
        # a hung store ties up workers of this engine only
        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.fetch_workers, thread_name_prefix="history-fetch"
        )

    @property
    def strict(self) -> bool:
        return self.settings.strict

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_naive_local(now or self._clock())

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.settings.fetch_timeout_seconds if timeout is None else timeout

    def _valid_candidates(self, candidates: Iterable[Candidate]) -> list[WorkItem]:
        valid: list[WorkItem] = []
        for position, candidate in enumerate(candidates):
            try:
                valid.append(coerce_work_item(candidate, f"Candidate {position}"))
            except InvalidItem as exc:
                logger.info("Skipping invalid candidate", position=position, error=str(exc))
        return valid

    def _cached_analysis(self, user_id: str) -> Optional[BehaviorAnalysis]:
        if self.profile_cache is None:
            return None
        entry = self.profile_cache.get(user_id)
        if entry is None:
            self._profile_misses += 1
            return None
        if not isinstance(entry.value, BehaviorAnalysis):
            logger.warning(
                "Discarding corrupt profile entry", user_id=user_id, entry_type=type(entry.value).__name__
            )
            self.profile_cache.invalidate(user_id)
            self._profile_misses += 1
            return None
        self._profile_hits += 1
        return copy.deepcopy(entry.value)

    def _fetch(self, user_id: str, timeout: Optional[float]) -> History:
        return fetch_history(
            user_id,
            self.item_store,
            self.log_store,
            timeout=self._timeout(timeout),
            history_bound=self.settings.history_bound,
            activity_bound=self.settings.activity_bound,
            executor=self._executor,
        )

    def _analysis(
        self,
        user_id: str,
        now: datetime,
        timeout: Optional[float],
    ) -> tuple[BehaviorAnalysis, Optional[History], bool]:
        """Return the analysis, the history when fetched now, and whether a fetch ran."""

        cached = self._cached_analysis(user_id)
        if cached is not None:
            return cached, None, False

        try:
            history = self._fetch(user_id, timeout)
        except DataUnavailable as exc:
            if self.strict:
                raise
            logger.warning("Using default profile", user_id=user_id, reason=exc.reason)
            return default_analysis(), None, True

        try:
            analysis = analyze_history(history, now)
        except Exception as exc:  # noqa: BLE001
            if self.strict:
                raise
            logger.exception("Profiling failed, using default profile", user_id=user_id, error=str(exc))
            return default_analysis(), history, True

        if self.profile_cache is not None:
            self.profile_cache.put(user_id, copy.deepcopy(analysis), self.settings.profile_ttl_seconds)
        return analysis, history, True

    def _completed_today(
        self,
        user_id: str,
        now: datetime,
        timeout: Optional[float],
        history: Optional[History],
        fetched: bool,
    ) -> int:
        if history is not None:
            return count_completed_today(history.items, now)
        reason = "history fetch failed"
        if not fetched:
            try:
                items = fetch_recent_items(
                    user_id,
                    self.item_store,
                    self._timeout(timeout),
                    bound=self.settings.history_bound,
                    executor=self._executor,
                )
                return count_completed_today(items, now)
            except DataUnavailable as exc:
                if self.strict:
                    raise
                reason = exc.reason
        logger.warning(
            "Completed-today count unavailable",
            user_id=user_id,
            completed_today_source="unavailable",
            reason=reason,
        )
        return 0

    def get_recommendation(
        self,
        user_id: str,
        candidate_items: Iterable[Candidate],
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> Optional[Recommendation]:
        """Recommend the best eligible candidate, or None when there is none."""

        now = self._now(now)
        candidates = [item for item in self._valid_candidates(candidate_items) if is_eligible(item)]
        if not candidates:
            logger.info("No eligible candidates", user_id=user_id)
            return None

        analysis, history, fetched = self._analysis(user_id, now, timeout)
        completed_today = self._completed_today(user_id, now, timeout, history, fetched)
        context = build_context(now, completed_today)
        recommendation = self.scoring.recommend(candidates, context, analysis.profile, now, analysis.insights)

        if recommendation is not None:
            logger.info(
                "Recommendation selected",
                user_id=user_id,
                item_id=recommendation.best.item.id,
                score=round(recommendation.best.score, 2),
                confidence=round(recommendation.best.confidence, 2),
                candidates=len(candidates),
                strategy=recommendation.strategy,
                default_profile=not analysis.from_history,
            )
        return recommendation

    def get_profile(
        self, user_id: str, now: Optional[datetime] = None, timeout: Optional[float] = None
    ) -> ProductivityProfile:
        analysis, _, _ = self._analysis(user_id, self._now(now), timeout)
        return analysis.profile

    def get_patterns(
        self, user_id: str, now: Optional[datetime] = None, timeout: Optional[float] = None
    ) -> list[BehaviorPattern]:
        analysis, _, _ = self._analysis(user_id, self._now(now), timeout)
        return list(analysis.patterns)

    def get_insights(
        self, user_id: str, now: Optional[datetime] = None, timeout: Optional[float] = None
    ) -> list[BehaviorInsight]:
        analysis, _, _ = self._analysis(user_id, self._now(now), timeout)
        return list(analysis.insights)

    def get_cache_stats(self) -> dict:
        hits = self._profile_hits + self.scoring.hits
        lookups = hits + self._profile_misses + self.scoring.misses
        return {
            "profile_cache_size": len(self.profile_cache) if self.profile_cache is not None else 0,
            "item_score_cache_size": len(self.scoring.score_cache) if self.scoring.score_cache is not None else 0,
            "approx_hit_ratio": hits / lookups if lookups else 0.0,
        }

    def _caches(self) -> list[TTLCache]:
        return [cache for cache in (self.profile_cache, self.scoring.score_cache) if cache is not None]

    def sweep_expired(self) -> int:
        return sum(cache.sweep_expired() for cache in self._caches())

    def invalidate_user(self, user_id: str) -> None:
        """Drop the cached analysis, e.g. after the user's history changed."""
        if self.profile_cache is not None:
            self.profile_cache.invalidate(user_id)

    def start_sweeper(self) -> None:
        if not self._caches():
            return
        if self._sweeper is None:
            self._sweeper = CacheSweeper(self._caches(), self.settings.sweep_interval_seconds)
        self._sweeper.start()

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "RecommendationEngine":
        self.start_sweeper()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
