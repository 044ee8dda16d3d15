from datetime import timedelta

from helpers import NOW, completed_at, make_entry, make_item

from task_recommender.patterns import (
    PATTERN_CONFIDENCE,
    completion_time_pattern,
    detect_patterns,
    procrastination_pattern,
    productivity_hours_pattern,
    task_preferences_pattern,
)


def _completed_at_hours(hours, **kwargs):
    day = NOW - timedelta(days=2)
    return [completed_at(day.replace(hour=h), id=f"c{i}", **kwargs) for i, h in enumerate(hours)]


def test_small_history_yields_no_patterns():
    items = _completed_at_hours([9, 10, 11, 14])
    logs = [make_entry(f"l{i}", NOW - timedelta(hours=i)) for i in range(9)]
    assert detect_patterns(items, logs, NOW) == []


def test_completion_time_peak_prefers_earliest_hour_on_tie():
    data = completion_time_pattern(_completed_at_hours([9, 9, 10, 14, 14]))
    assert data == {"peak_hour": 9, "frequency": 2, "total_completions": 5}


def test_productivity_hours_needs_ten_entries():
    day = NOW - timedelta(days=1)
    logs = [make_entry(f"a{i}", day.replace(hour=15)) for i in range(6)]
    logs += [make_entry(f"b{i}", day.replace(hour=8)) for i in range(4)]

    data = productivity_hours_pattern(logs)
    assert data["productive_hours"] == [15, 8]
    assert data["activity_distribution"] == {8: 4, 15: 6}
    assert productivity_hours_pattern(logs[:9]) is None


def test_task_preferences_sorted_by_success_rate():
    items = _completed_at_hours([9, 10, 11], priority="high")
    items += [completed_at(NOW - timedelta(days=1), id=f"l{i}", priority="low") for i in range(2)]
    items += [make_item(id=f"p{i}", priority="low") for i in range(2)]
    items += [make_item(id="m0", priority="medium")]

    preferences = task_preferences_pattern(items)["preferences"]
    assert [entry["priority"] for entry in preferences] == ["high", "low", "medium"]
    assert [entry["success_rate"] for entry in preferences] == [1.0, 0.5, 0.0]
    assert [entry["sample_size"] for entry in preferences] == [3, 4, 1]


def test_task_preferences_keeps_priority_order_on_ties():
    items = [completed_at(NOW, id=f"c{i}", priority=priority) for i, priority in enumerate(["urgent", "low", "medium", "low", "urgent"])]
    preferences = task_preferences_pattern(items)["preferences"]
    assert [entry["priority"] for entry in preferences] == ["low", "medium", "urgent"]


def test_procrastination_pattern_reports_triggers():
    stale = NOW - timedelta(days=10)
    items = [make_item(id=f"p{i}", created_at=stale) for i in range(5)]

    data = procrastination_pattern(items, NOW)
    assert data["triggers"] == ["no-deadline"]
    assert data["stale_pending"] is True
    assert data["high_estimate_pending"] is False
    assert data["pending_total"] == 5


def test_procrastination_pattern_absent_without_triggers():
    items = [make_item(id=f"p{i}", due_at=NOW + timedelta(days=3)) for i in range(6)]
    assert procrastination_pattern(items, NOW) is None


def test_detect_patterns_confidence_values():
    items = _completed_at_hours([9, 9, 10, 14, 14])
    logs = [make_entry(f"l{i}", NOW - timedelta(hours=i)) for i in range(12)]
    patterns = detect_patterns(items, logs, NOW)

    by_type = {pattern.pattern_type: pattern for pattern in patterns}
    assert set(by_type) == {"completion_time", "productivity_hours", "task_preferences"}
    for pattern_type, pattern in by_type.items():
        assert pattern.confidence == PATTERN_CONFIDENCE[pattern_type]
    assert by_type["completion_time"].confidence == 0.8
    assert by_type["productivity_hours"].confidence == 0.75
    assert by_type["task_preferences"].confidence == 0.7
