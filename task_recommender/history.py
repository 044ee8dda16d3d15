"""Upstream store contracts and the bounded, time-limited history fetch."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol

from task_recommender.adapters.records import normalize_activity_entry, normalize_work_item
from task_recommender.errors import DataUnavailable, InvalidItem
from task_recommender.observability import get_logger
from task_recommender.schema import ActivityLogEntry, WorkItem

logger = get_logger(__name__)


class WorkItemStore(Protocol):
    def query(self, user_id: str, bound: int = 100) -> list[WorkItem]:
        """Return at most ``bound`` items, most recently created first."""
        ...


class ActivityLogStore(Protocol):
    def query(self, user_id: str, bound: int = 200) -> list[ActivityLogEntry]:
        """Return at most ``bound`` entries, most recent first."""
        ...


class InMemoryWorkItemStore:
    """Work items held in memory per user, e.g. loaded by a file adapter."""

    def __init__(self, items_by_user: dict[str, Iterable[WorkItem]] | None = None):
        self._items = {user: list(items) for user, items in (items_by_user or {}).items()}

    def add(self, user_id: str, items: Iterable[WorkItem]) -> None:
        self._items.setdefault(user_id, []).extend(items)

    def query(self, user_id: str, bound: int = 100) -> list[WorkItem]:
        items = sorted(self._items.get(user_id, []), key=lambda item: item.created_at, reverse=True)
        return items[:bound]


class InMemoryActivityLogStore:
    def __init__(self, entries_by_user: dict[str, Iterable[ActivityLogEntry]] | None = None):
        self._entries = {user: list(entries) for user, entries in (entries_by_user or {}).items()}

    def add(self, user_id: str, entries: Iterable[ActivityLogEntry]) -> None:
        self._entries.setdefault(user_id, []).extend(entries)

    def query(self, user_id: str, bound: int = 200) -> list[ActivityLogEntry]:
        entries = sorted(self._entries.get(user_id, []), key=lambda entry: entry.created_at, reverse=True)
        return entries[:bound]


@dataclass
class History:
    items: list[WorkItem] = field(default_factory=list)
    logs: list[ActivityLogEntry] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.items and not self.logs


_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="history-fetch")


def _normalized(records: Iterable, normalize: Callable, user_id: str) -> list:
    """Drop records with unusable timestamps; convert offset-aware ones to naive local time."""

    cleaned = []
    for position, record in enumerate(records):
        try:
            cleaned.append(normalize(record, f"History record {position}"))
        except InvalidItem as exc:
            logger.warning("Dropping malformed history record", user_id=user_id, error=str(exc))
    return cleaned


def fetch_history(
    user_id: str,
    item_store: WorkItemStore,
    log_store: ActivityLogStore,
    timeout: float,
    history_bound: int = 100,
    activity_bound: int = 200,
    executor: Optional[Executor] = None,
) -> History:
    """Query both stores concurrently.

    Raises DataUnavailable when either store fails or the deadline passes.
    A store call that overruns keeps running on its worker; its result is
    discarded. Without ``executor`` the module-level pool is used.
    """

    executor = executor or _executor
    items_future = executor.submit(item_store.query, user_id, history_bound)
    logs_future = executor.submit(log_store.query, user_id, activity_bound)
    _, pending = wait([items_future, logs_future], timeout=timeout)
    if pending:
        for future in pending:
            future.cancel()
        raise DataUnavailable(user_id, f"fetch exceeded {timeout:.2f}s")

    try:
        items = items_future.result()
        logs = logs_future.result()
    except Exception as exc:  # noqa: BLE001
        raise DataUnavailable(user_id, f"{type(exc).__name__}: {exc}") from exc

    history = History(
        items=_normalized(list(items or [])[:history_bound], normalize_work_item, user_id),
        logs=_normalized(list(logs or [])[:activity_bound], normalize_activity_entry, user_id),
    )
    logger.debug("History fetched", user_id=user_id, items=len(history.items), logs=len(history.logs))
    return history


def fetch_recent_items(
    user_id: str,
    item_store: WorkItemStore,
    timeout: float,
    bound: int = 100,
    executor: Optional[Executor] = None,
) -> list[WorkItem]:
    """Query only the work-item store, under the same deadline rules."""

    future = (executor or _executor).submit(item_store.query, user_id, bound)
    done, _ = wait([future], timeout=timeout)
    if not done:
        future.cancel()
        raise DataUnavailable(user_id, f"fetch exceeded {timeout:.2f}s")
    try:
        items = future.result()
    except Exception as exc:  # noqa: BLE001
        raise DataUnavailable(user_id, f"{type(exc).__name__}: {exc}") from exc
    return _normalized(list(items or [])[:bound], normalize_work_item, user_id)
