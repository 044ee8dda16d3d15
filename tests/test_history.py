import time
from datetime import timedelta, timezone

import pytest

from helpers import NOW, make_entry, make_item

from task_recommender.errors import DataUnavailable
from task_recommender.history import (
    InMemoryActivityLogStore,
    InMemoryWorkItemStore,
    fetch_history,
    fetch_recent_items,
)


class SlowStore:
    def query(self, user_id, bound=100):
        time.sleep(0.5)
        return []


class BrokenStore:
    def query(self, user_id, bound=100):
        raise ConnectionError("connection refused")


class FixedStore:
    def __init__(self, records):
        self.records = records

    def query(self, user_id, bound=100):
        return list(self.records)


def _stores():
    items = [make_item(id=f"i{n}", created_at=NOW - timedelta(hours=n)) for n in range(6)]
    logs = [make_entry(f"l{n}", NOW - timedelta(minutes=n)) for n in range(6)]
    return InMemoryWorkItemStore({"u": items}), InMemoryActivityLogStore({"u": logs})


def test_stores_return_most_recent_first_within_bound():
    items, logs = _stores()
    assert [item.id for item in items.query("u", bound=3)] == ["i0", "i1", "i2"]
    assert [entry.id for entry in logs.query("u", bound=2)] == ["l0", "l1"]
    assert items.query("other") == []


def test_fetch_history_applies_bounds():
    items, logs = _stores()
    history = fetch_history("u", items, logs, timeout=1.0, history_bound=4, activity_bound=5)
    assert len(history.items) == 4
    assert len(history.logs) == 5
    assert not history.empty


def test_fetch_history_times_out():
    _, logs = _stores()
    started = time.monotonic()
    with pytest.raises(DataUnavailable, match="exceeded"):
        fetch_history("u", SlowStore(), logs, timeout=0.05)
    assert time.monotonic() - started < 0.4


def test_fetch_history_wraps_store_errors():
    items, _ = _stores()
    with pytest.raises(DataUnavailable) as excinfo:
        fetch_history("u", items, BrokenStore(), timeout=1.0)
    assert excinfo.value.reason == "ConnectionError: connection refused"
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_fetch_recent_items():
    items, _ = _stores()
    assert len(fetch_recent_items("u", items, timeout=1.0, bound=2)) == 2
    with pytest.raises(DataUnavailable):
        fetch_recent_items("u", BrokenStore(), timeout=1.0)


def test_fetch_history_normalizes_timestamps():
    aware = make_item(id="aware", created_at=(NOW - timedelta(days=1)).replace(tzinfo=timezone.utc))
    broken = make_item(id="broken", created_at="yesterday")
    items = FixedStore([aware, broken])
    logs = InMemoryActivityLogStore({"u": [make_entry("l1", NOW.replace(tzinfo=timezone.utc))]})

    history = fetch_history("u", items, logs, timeout=1.0)
    assert [item.id for item in history.items] == ["aware"]
    assert history.items[0].created_at.tzinfo is None
    assert history.logs[0].created_at.tzinfo is None
