"""Tests for the TTL cache."""

from __future__ import annotations

from redlist_dashboard.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    def test_get_missing(self) -> None:
        cache: TTLCache[str, int] = TTLCache(10)
        assert cache.get("x") is None

    def test_set_then_get(self) -> None:
        cache: TTLCache[str, int] = TTLCache(10)
        cache.set("x", 1)
        assert cache.get("x") == 1
        assert "x" in cache
        assert len(cache) == 1

    def test_expires_after_ttl(self) -> None:
        clock = FakeClock()
        cache: TTLCache[str, int] = TTLCache(10, clock=clock)
        cache.set("x", 1)
        clock.now = 9.9
        assert cache.get("x") == 1
        clock.now = 10.0
        assert cache.get("x") is None
        assert len(cache) == 0

    def test_clear(self) -> None:
        cache: TTLCache[str, int] = TTLCache(10)
        cache.set("x", 1)
        cache.clear()
        assert "x" not in cache


class TestGetOrLoad:
    def test_loads_once(self) -> None:
        calls = []
        cache: TTLCache[str, int] = TTLCache(10)

        def loader() -> int:
            calls.append(1)
            return 42

        assert cache.get_or_load("k", loader) == 42
        assert cache.get_or_load("k", loader) == 42
        assert len(calls) == 1

    def test_none_not_cached(self) -> None:
        calls = []
        cache: TTLCache[str, int] = TTLCache(10)

        def loader() -> int | None:
            calls.append(1)
            return None

        assert cache.get_or_load("k", loader) is None
        assert cache.get_or_load("k", loader) is None
        assert len(calls) == 2

    def test_reloads_after_expiry(self) -> None:
        clock = FakeClock()
        cache: TTLCache[str, int] = TTLCache(5, clock=clock)
        values = iter([1, 2])
        assert cache.get_or_load("k", lambda: next(values)) == 1
        clock.now = 6
        assert cache.get_or_load("k", lambda: next(values)) == 2
