"""TTL cache abstraction with a swappable backend and a periodic sweeper."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, Protocol, TypeVar

from task_recommender.observability import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    stored_at: float
    expires_at: float


class TTLCache(Protocol[V]):
    """Minimal cache contract used by the engine."""

    def get(self, key: Hashable) -> Optional[CacheEntry[V]]: ...

    def put(self, key: Hashable, value: V, ttl: float) -> None: ...

    def invalidate(self, key: Hashable) -> None: ...

    def sweep_expired(self) -> int: ...

    def __len__(self) -> int: ...


class InMemoryTTLCache(Generic[V]):
    """Dict-backed TTL cache.

    Expired entries are never returned by ``get``; they are physically removed
    by ``sweep_expired``. ``clock`` defaults to ``time.monotonic`` and can be
    replaced in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[CacheEntry[V]]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.expires_at:
                return None
            return entry

    def put(self, key: Hashable, value: V, ttl: float) -> None:
        now = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=now, expires_at=now + ttl)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def sweep_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheSweeper:
    """Daemon thread that periodically evicts expired entries."""

    def __init__(self, caches: list[TTLCache], interval: float):
        self._caches = caches
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def sweep_once(self) -> int:
        evicted = sum(cache.sweep_expired() for cache in self._caches)
        logger.debug("Cache sweep finished", evicted=evicted)
        return evicted

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.sweep_once()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="cache-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
