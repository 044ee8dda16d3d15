from datetime import timedelta

import pytest

from helpers import NOW, make_item

from task_recommender.context import build_context
from task_recommender.evaluator import compare_strategies
from task_recommender.schema import default_profile


def test_compare_deltas():
    profile = default_profile()
    profile.completion_rate = 70
    candidates = [make_item(id="a"), make_item(id="b", due_at=NOW + timedelta(hours=23))]

    result = compare_strategies(candidates, build_context(NOW, 0), profile, NOW)
    deltas = {row["item_id"]: row["delta"] for row in result["deltas"]}

    # learning subscore 15 vs 0 at weight 0.1
    assert deltas["a"] == pytest.approx(1.5)
    # plus 40 vs 30 due bonus at weight 0.3
    assert deltas["b"] == pytest.approx(4.5)
    assert result["same_winner"] is True
    assert result["optimized_winner"] == "b"


def test_strategies_can_pick_different_winners():
    tomorrow_morning = make_item(id="x", due_at=NOW + timedelta(hours=23))
    tonight = make_item(id="y", due_at=NOW.replace(hour=23))

    result = compare_strategies([tomorrow_morning, tonight], build_context(NOW, 0), default_profile(), NOW)
    assert result["optimized_winner"] == "x"
    assert result["baseline_winner"] == "y"
    assert result["same_winner"] is False


def test_compare_without_candidates():
    result = compare_strategies([], build_context(NOW, 0), default_profile(), NOW)
    assert result == {"baseline_winner": None, "optimized_winner": None, "same_winner": True, "deltas": []}
