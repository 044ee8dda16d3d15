from datetime import datetime, timedelta

from task_recommender.schema import ActivityLogEntry, WorkItem

# Tuesday
NOW = datetime.fromisoformat("2025-03-11T10:00:00")


def make_item(id="t1", status="pending", priority="medium", created_at=None, tags=(), **kwargs):
    return WorkItem(
        id=id,
        status=status,
        priority=priority,
        created_at=created_at or NOW - timedelta(days=1),
        tags=frozenset(tags),
        **kwargs,
    )


def completed_at(when, id="c", **kwargs):
    return make_item(id=id, status="completed", created_at=when - timedelta(hours=2), completed_at=when, **kwargs)


def make_entry(id, created_at, type="updated", work_item_id=None):
    return ActivityLogEntry(id=id, created_at=created_at, type=type, work_item_id=work_item_id)
