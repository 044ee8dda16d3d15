"""Demo script for task-recommender."""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_recommender.adapters.files import load_activity, load_items
from task_recommender.engine import RecommendationEngine
from task_recommender.history import InMemoryActivityLogStore, InMemoryWorkItemStore
from task_recommender.observability import setup_logging

EXAMPLES = Path(__file__).resolve().parent


def main() -> None:
    setup_logging("WARNING")
    items = load_items(EXAMPLES / "sample_items.json")
    activity = load_activity(EXAMPLES / "sample_activity.csv")

    engine = RecommendationEngine(
        InMemoryWorkItemStore({"demo": items}),
        InMemoryActivityLogStore({"demo": activity}),
    )
    now = datetime.fromisoformat("2025-03-11T10:00:00")
    recommendation = engine.get_recommendation("demo", items, now=now)
    if recommendation is None:
        print("Nothing to recommend.")
        return

    best = recommendation.best
    print(f"Best: {best.item.id} {best.item.title!r} score={best.score:.1f} confidence={best.confidence:.0f}")
    print("Why:", recommendation.reasoning)
    print("Timing:", recommendation.timing.reasoning)
    print("Energy:", recommendation.energy.suggestion)
    print("Alternatives:", [alt.item.id for alt in recommendation.alternatives])
    for insight in recommendation.insights:
        print(f"[{insight.type}] {insight.title}: {insight.description}")
    print("Cache:", engine.get_cache_stats())


if __name__ == "__main__":
    main()
