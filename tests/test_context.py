from datetime import datetime, timedelta

from helpers import NOW, completed_at, make_item

from task_recommender.context import build_context, count_completed_today, energy_level, time_of_day, work_pattern


def test_time_of_day_boundaries():
    assert time_of_day(5) == "night"
    assert time_of_day(6) == "morning"
    assert time_of_day(11) == "morning"
    assert time_of_day(12) == "afternoon"
    assert time_of_day(17) == "afternoon"
    assert time_of_day(18) == "evening"
    assert time_of_day(21) == "evening"
    assert time_of_day(22) == "night"
    assert time_of_day(0) == "night"


def test_energy_level_collapses_afternoon_and_evening():
    assert energy_level(5) == "low"
    assert energy_level(6) == "high"
    assert energy_level(11) == "high"
    assert energy_level(12) == "medium"
    assert energy_level(21) == "medium"
    assert energy_level(22) == "low"


def test_work_pattern_against_expected_completions():
    # hour 10 -> expected 2
    assert work_pattern(5, 10) == "productive"
    assert work_pattern(4, 10) == "normal"
    assert work_pattern(2, 10) == "normal"
    assert work_pattern(0, 10) == "low"
    # expected never drops below 1
    assert work_pattern(0, 2) == "normal"
    assert work_pattern(4, 2) == "productive"


def test_count_completed_today_uses_calendar_day():
    items = [
        completed_at(NOW - timedelta(hours=1), id="a"),
        completed_at(NOW.replace(hour=0, minute=5), id="b"),
        completed_at(NOW - timedelta(days=1), id="c"),
        make_item(id="d", status="pending", completed_at=NOW),
    ]
    assert count_completed_today(items, NOW) == 2


def test_build_context_snapshot():
    context = build_context(NOW, 3)
    assert context.time_of_day == "morning"
    assert context.energy_level == "high"
    assert context.day_of_week == "tuesday"
    assert context.completed_today == 3
    assert context.work_pattern == "normal"
    assert context.hour == 10


def test_build_context_is_pure():
    when = datetime.fromisoformat("2025-03-15T19:30:00")
    assert build_context(when, 1) == build_context(when, 1)
    assert build_context(when, 1).day_of_week == "saturday"
