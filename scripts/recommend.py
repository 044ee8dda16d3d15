"""Print a recommendation for work items and activity logs stored in files."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_recommender.adapters.files import load_activity, load_items
from task_recommender.config import get_settings
from task_recommender.engine import RecommendationEngine
from task_recommender.evaluator import compare_strategies
from task_recommender.history import InMemoryActivityLogStore, InMemoryWorkItemStore
from task_recommender.observability import setup_logging

USER_ID = "cli"


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def main() -> None:
    parser = argparse.ArgumentParser(description="Recommend the next work item from CSV/JSON history files")
    parser.add_argument("--items", required=True, help="Path to CSV/JSON work items file")
    parser.add_argument("--activity", help="Path to CSV/JSON activity log file")
    parser.add_argument("--now", help="ISO timestamp to evaluate at (defaults to the current time)")
    parser.add_argument("--compare", action="store_true", help="Also compare baseline and optimized strategies")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)

    items = load_items(args.items)
    activity = load_activity(args.activity) if args.activity else []
    now = datetime.fromisoformat(args.now) if args.now else datetime.now()

    engine = RecommendationEngine(
        InMemoryWorkItemStore({USER_ID: items}),
        InMemoryActivityLogStore({USER_ID: activity}),
        settings=settings,
    )
    recommendation = engine.get_recommendation(USER_ID, items, now=now)
    report = {"recommendation": asdict(recommendation) if recommendation else None}

    if args.compare and recommendation is not None:
        report["comparison"] = compare_strategies(items, recommendation.context, recommendation.profile, now)

    print(json.dumps(report, indent=2, default=_json_default))


if __name__ == "__main__":
    main()
