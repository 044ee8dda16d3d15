from helpers import NOW, make_item

from task_recommender.context import build_context
from task_recommender.explain import FALLBACK_REASONING, energy_advice, energy_match, reasoning_text, timing_advice
from task_recommender.schema import Factor, default_profile


def test_reasoning_uses_two_heaviest_factors():
    factors = [
        Factor("a", "A", "Due very soon", 95, "positive"),
        Factor("b", "B", "High energy right now", 65, "positive"),
        Factor("c", "C", "Ignored", 10, "positive"),
    ]
    assert reasoning_text(factors) == "Due very soon and high energy right now"
    assert reasoning_text(factors[:1]) == "Due very soon"
    assert reasoning_text([]) == FALLBACK_REASONING


def test_timing_advice_points_to_next_window():
    profile = default_profile()
    assert timing_advice(profile, 10).is_optimal_now is True

    advice = timing_advice(profile, 8)
    assert advice.is_optimal_now is False
    assert advice.optimal_hour == 9

    # wraps around to the first window of the next day
    assert timing_advice(profile, 15).optimal_hour == 9

    profile.optimal_hours = []
    assert timing_advice(profile, 10).optimal_hour is None


def test_energy_match_grades():
    morning = build_context(NOW, 0)
    night = build_context(NOW.replace(hour=23), 0)

    assert energy_match(make_item(priority="urgent"), morning) == "good"
    assert energy_match(make_item(priority="low"), morning) == "excellent"
    assert energy_match(make_item(priority="urgent"), night) == "poor"
    assert energy_match(make_item(priority="low"), night) == "good"


def test_energy_advice_suggestion():
    night = build_context(NOW.replace(hour=23), 0)
    advice = energy_advice(make_item(priority="high"), night)
    assert advice.required == "high"
    assert advice.available == "low"
    assert "less demanding" in advice.suggestion
