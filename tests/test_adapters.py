import json
from datetime import datetime, timezone

import pytest

from task_recommender.adapters.csv_adapter import parse_activity as parse_activity_csv
from task_recommender.adapters.csv_adapter import parse_items as parse_items_csv
from task_recommender.adapters.files import load_items
from task_recommender.adapters.json_adapter import parse_items as parse_items_json
from task_recommender.adapters.records import coerce_work_item
from task_recommender.errors import InvalidItem
from task_recommender.schema import WorkItem


def test_csv_parse_success(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text(
        "id,status,priority,created_at,due_at,estimated_duration_min,tags,completed_at\n"
        "a,pending,high,2025-01-01T09:00:00,2025-01-02T17:00:00,45,writing;docs,\n"
        "b,completed,low,2025-01-01T10:00:00,,,,2025-01-01T12:30:00\n",
        encoding="utf-8",
    )
    items = parse_items_csv(str(path))
    assert len(items) == 2
    assert items[0].tags == frozenset({"writing", "docs"})
    assert items[0].estimated_duration_min == 45.0
    assert items[1].due_at is None
    assert items[1].completed_at.hour == 12


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text("id,status,priority,created_at\na,pending,high,bad\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        parse_items_csv(str(path))


def test_csv_parse_activity(tmp_path):
    path = tmp_path / "activity.csv"
    path.write_text(
        "id,work_item_id,created_at,type\n"
        "l1,a,2025-01-01T09:00:00,started\n"
        "l2,,2025-01-01T09:30:00,comment\n",
        encoding="utf-8",
    )
    entries = parse_activity_csv(str(path))
    assert [entry.work_item_id for entry in entries] == ["a", None]


def test_json_parse_success(tmp_path):
    path = tmp_path / "items.json"
    payload = [
        {"id": "a", "status": "pending", "priority": "medium", "created_at": "2025-01-01T09:00:00"},
        {
            "id": "b",
            "status": "in_progress",
            "priority": "urgent",
            "created_at": "2025-01-01T10:00:00",
            "tags": ["ops"],
            "archived": True,
        },
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    items = parse_items_json(str(path))
    assert len(items) == 2
    assert items[1].tags == frozenset({"ops"})
    assert items[1].archived is True


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps([{"id": "a", "status": "waiting", "priority": "low", "created_at": "2025-01-01T09:00:00"}]),
        encoding="utf-8",
    )
    with pytest.raises(InvalidItem, match="Item 1"):
        parse_items_json(str(path))


def test_json_payload_must_be_a_list(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_items_json(str(path))


def test_negative_duration_rejected():
    record = {"id": "a", "status": "pending", "priority": "low", "created_at": "2025-01-01", "estimated_duration_min": -5}
    with pytest.raises(InvalidItem):
        coerce_work_item(record)


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "items.xml"
    path.write_text("<items/>", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        load_items(path)


def test_offset_timestamps_become_naive_local(tmp_path):
    path = tmp_path / "items.json"
    payload = [
        {
            "id": "a",
            "status": "pending",
            "priority": "high",
            "created_at": "2025-03-10T09:00:00+00:00",
            "due_at": "2025-03-12T10:00:00+02:00",
        }
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    item = parse_items_json(str(path))[0]

    assert item.created_at.tzinfo is None
    assert item.due_at.tzinfo is None
    expected = datetime.fromisoformat("2025-03-12T10:00:00+02:00").astimezone().replace(tzinfo=None)
    assert item.due_at == expected


def test_work_item_candidate_dates_are_checked():
    with pytest.raises(InvalidItem, match="due_at"):
        coerce_work_item(
            WorkItem(id="a", status="pending", priority="low", created_at=datetime(2025, 1, 1), due_at="soon")
        )
    with pytest.raises(InvalidItem, match="created_at"):
        coerce_work_item(WorkItem(id="a", status="pending", priority="low", created_at=None))

    aware = WorkItem(id="a", status="pending", priority="low", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert coerce_work_item(aware).created_at.tzinfo is None
    # the caller's object is left untouched
    assert aware.created_at.tzinfo is timezone.utc
