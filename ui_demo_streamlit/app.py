"""Streamlit demo UI for task-recommender."""

from __future__ import annotations

import tempfile
from collections import Counter
from datetime import datetime, time
from pathlib import Path
from typing import Any

from task_recommender.adapters.files import load_activity, load_items
from task_recommender.config import Settings
from task_recommender.engine import RecommendationEngine
from task_recommender.evaluator import compare_strategies
from task_recommender.history import InMemoryActivityLogStore, InMemoryWorkItemStore
from task_recommender.schema import STATUSES

USER_ID = "ui_demo_user"
EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _save_uploaded(uploaded_file) -> str:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        return handle.name


def _build_summary(items: list, activity: list) -> dict[str, Any]:
    status_counts = Counter(item.status for item in items)
    return {
        "total_items": len(items),
        "activity_entries": len(activity),
        "status_counts": {status: status_counts.get(status, 0) for status in STATUSES},
    }


def _factor_rows(factors: list) -> list[dict]:
    return [
        {"factor": f.label, "weight": f.weight, "polarity": f.polarity, "description": f.description}
        for f in factors
    ]


def run_engine(items: list, activity: list, now: datetime, strategy: str) -> dict[str, Any]:
    """Run the engine and return a UI-friendly result payload."""

    engine = RecommendationEngine(
        InMemoryWorkItemStore({USER_ID: items}),
        InMemoryActivityLogStore({USER_ID: activity}),
        settings=Settings(scoring_strategy=strategy, use_cache=False),
    )
    recommendation = engine.get_recommendation(USER_ID, items, now=now)
    comparison = None
    if recommendation is not None:
        comparison = compare_strategies(items, recommendation.context, recommendation.profile, now)

    return {
        "summary": _build_summary(items, activity),
        "recommendation": recommendation,
        "patterns": engine.get_patterns(USER_ID, now=now),
        "comparison": comparison,
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Task Recommender Demo", layout="wide")
    st.title("Task Recommender — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded_items = st.file_uploader("Upload work items", type=["csv", "json"])
        uploaded_activity = st.file_uploader("Upload activity log", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        day = st.date_input("Date", value=datetime(2025, 3, 11).date())
        hour = st.slider("Now hour", min_value=0, max_value=23, value=10)
        strategy = st.selectbox("Scoring strategy", options=["optimized", "baseline"], index=0)
        run = st.button("Recommend", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Recommend**.")
        return

    try:
        if use_demo:
            items = load_items(EXAMPLES / "sample_items.json")
            activity = load_activity(EXAMPLES / "sample_activity.csv")
            data_source = "demo dataset (examples/)"
        elif uploaded_items is not None:
            items = load_items(_save_uploaded(uploaded_items))
            activity = load_activity(_save_uploaded(uploaded_activity)) if uploaded_activity else []
            data_source = f"uploaded file ({uploaded_items.name})"
        else:
            st.error("Please upload a CSV/JSON file or enable 'Load demo dataset'.")
            return

        now = datetime.combine(day, time(hour=hour))
        result = run_engine(items, activity, now, strategy)

        st.success(f"Loaded {len(items)} work items from {data_source}.")

        st.subheader("A) Data Summary")
        summary = result["summary"]
        c1, c2 = st.columns(2)
        c1.metric("Work items", summary["total_items"])
        c2.metric("Activity entries", summary["activity_entries"])
        st.table([summary["status_counts"]])

        recommendation = result["recommendation"]
        if recommendation is None:
            st.warning("No eligible work items to recommend.")
            return

        st.subheader("B) Recommendation")
        best = recommendation.best
        r1, r2, r3 = st.columns(3)
        r1.metric("Item", best.item.title or best.item.id)
        r2.metric("Score", f"{best.score:.1f}")
        r3.metric("Success probability", f"{best.success_probability:.0f}%")
        st.write(recommendation.reasoning)
        st.table(_factor_rows(best.factors))

        st.subheader("C) Timing and Energy")
        st.write(recommendation.timing.reasoning)
        st.write(f"{recommendation.energy.suggestion} ({recommendation.energy.match} match)")

        st.subheader("D) Alternatives")
        st.table([{"item": alt.item.title or alt.item.id, "score": round(alt.score, 1)} for alt in recommendation.alternatives])

        st.subheader("E) Profile and Insights")
        st.json(
            {
                "optimal_hours": recommendation.profile.optimal_hours,
                "optimal_days": recommendation.profile.optimal_days,
                "completion_rate": round(recommendation.profile.completion_rate, 1),
                "preferred_tags": recommendation.profile.preferred_tags,
                "procrastination_triggers": recommendation.profile.procrastination_triggers,
            }
        )
        for insight in recommendation.insights:
            st.write(f"**{insight.title}**: {insight.description}. {insight.suggestion}.")

        st.subheader("F) Strategy Comparison")
        st.table(result["comparison"]["deltas"])

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while running the demo. Please verify the input format.")


if __name__ == "__main__":
    main()
