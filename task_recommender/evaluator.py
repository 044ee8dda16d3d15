"""Baseline vs optimized scoring strategy comparison."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from task_recommender.schema import ContextSnapshot, ProductivityProfile, WorkItem
from task_recommender.scoring import BASELINE, OPTIMIZED, ScoringEngine


def compare_strategies(
    candidates: Sequence[WorkItem],
    context: ContextSnapshot,
    profile: ProductivityProfile,
    now: datetime,
) -> dict:
    """Score the same candidates with both strategies and report the deltas."""

    baseline = ScoringEngine(strategy=BASELINE).rank(candidates, context, profile, now)
    optimized = ScoringEngine(strategy=OPTIMIZED).rank(candidates, context, profile, now)

    baseline_scores = {entry.item.id: entry.score for entry in baseline}
    optimized_scores = {entry.item.id: entry.score for entry in optimized}

    baseline_winner = baseline[0].item.id if baseline else None
    optimized_winner = optimized[0].item.id if optimized else None

    return {
        "baseline_winner": baseline_winner,
        "optimized_winner": optimized_winner,
        "same_winner": baseline_winner == optimized_winner,
        "deltas": [
            {
                "item_id": item_id,
                "baseline": baseline_scores[item_id],
                "optimized": optimized_scores[item_id],
                "delta": optimized_scores[item_id] - baseline_scores[item_id],
            }
            for item_id in baseline_scores
        ],
    }
