import time

from task_recommender.cache import CacheSweeper, InMemoryTTLCache


def _cache():
    clock = [100.0]
    return InMemoryTTLCache(clock=lambda: clock[0]), clock


def test_entries_expire_after_ttl():
    cache, clock = _cache()
    cache.put("a", 1, ttl=10)

    entry = cache.get("a")
    assert entry.value == 1
    assert entry.stored_at == 100.0
    assert entry.expires_at == 110.0

    clock[0] = 109.9
    assert cache.get("a") is not None
    clock[0] = 110.0
    assert cache.get("a") is None
    # still held until swept
    assert len(cache) == 1


def test_sweep_removes_only_expired_entries():
    cache, clock = _cache()
    cache.put("short", 1, ttl=5)
    cache.put("long", 2, ttl=50)

    clock[0] = 120.0
    assert cache.sweep_expired() == 1
    assert len(cache) == 1
    assert cache.get("long").value == 2


def test_invalidate_and_clear():
    cache, _ = _cache()
    cache.put("a", 1, ttl=10)
    cache.put("b", 2, ttl=10)
    cache.invalidate("a")
    cache.invalidate("missing")
    assert cache.get("a") is None
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_put_replaces_existing_entry():
    cache, clock = _cache()
    cache.put("a", 1, ttl=5)
    clock[0] = 103.0
    cache.put("a", 2, ttl=5)
    clock[0] = 107.0
    assert cache.get("a").value == 2


def test_sweeper_sweeps_all_caches():
    first, clock_a = _cache()
    second, clock_b = _cache()
    first.put("a", 1, ttl=1)
    second.put("b", 1, ttl=1)
    clock_a[0] = clock_b[0] = 200.0

    assert CacheSweeper([first, second], interval=60).sweep_once() == 2


def test_sweeper_thread_start_stop():
    cache = InMemoryTTLCache()
    cache.put("a", 1, ttl=0.01)
    sweeper = CacheSweeper([cache], interval=0.02)

    sweeper.start()
    assert sweeper.running
    deadline = time.monotonic() + 2.0
    while len(cache) and time.monotonic() < deadline:
        time.sleep(0.01)
    sweeper.stop(timeout=1.0)

    assert not sweeper.running
    assert len(cache) == 0
