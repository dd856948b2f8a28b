"""Unit tests for the in-memory response cache and its performance counters."""

from unittest.mock import patch

import pytest

from commerflow.core.cache import PerformanceMetrics, ResponseCache, build_cache_key, get_cache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResponseCache:
    return ResponseCache(ttl_seconds=60, clock=clock)


class TestResponseCache:
    def test_get_returns_stored_value(self, cache):
        cache.set("products", {"page": 1})
        assert cache.get("products") == {"page": 1}
        assert cache.metrics.cache_hits == 1

    def test_missing_key_counts_as_miss(self, cache):
        assert cache.get("nothing") is None
        assert cache.metrics.cache_misses == 1

    def test_entry_expires_after_ttl(self, cache, clock):
        cache.set("products", [1, 2])

        clock.now += 59.9
        assert cache.get("products") == [1, 2]

        clock.now += 0.2
        assert cache.get("products") is None
        assert cache.size() == 0

    def test_zero_ttl_disables_caching(self, clock):
        cache = ResponseCache(ttl_seconds=0, clock=clock)
        cache.set("products", [1])
        assert cache.size() == 0

    def test_cleanup_removes_only_expired(self, cache, clock):
        cache.set("old", 1)
        clock.now += 30
        cache.set("new", 2)
        clock.now += 45

        assert cache.cleanup() == 1
        assert cache.get("new") == 2

    def test_delete_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.delete("a")
        cache.delete("a")
        assert cache.size() == 1

        cache.clear()
        assert cache.size() == 0


class TestPerformanceMetrics:
    def test_snapshot_hit_rate(self):
        metrics = PerformanceMetrics(cache_hits=3, cache_misses=1)
        assert metrics.snapshot()["cacheHitRate"] == 0.75

    def test_snapshot_without_lookups(self):
        assert PerformanceMetrics().snapshot()["cacheHitRate"] == 0.0

    def test_slow_queries_are_recorded(self):
        metrics = PerformanceMetrics()

        with patch("commerflow.core.cache.logger") as mock_logger:
            metrics.record_query("products.list", 12.0)
            metrics.record_query("products.list", 1500.0)

        snapshot = metrics.snapshot()
        assert snapshot["queryCount"] == 2
        assert [entry["durationMs"] for entry in snapshot["slowQueries"]] == [1500.0]
        mock_logger.warning.assert_called_once()

    def test_slow_query_log_is_bounded(self):
        metrics = PerformanceMetrics()
        for i in range(150):
            metrics.record_query(f"q{i}", 2000.0)

        slow = metrics.snapshot()["slowQueries"]
        assert len(slow) == 100
        assert slow[0]["query"] == "q50"

    def test_reset(self):
        metrics = PerformanceMetrics(query_count=4, cache_hits=2, cache_misses=2)
        metrics.record_query("x", 5000.0)

        metrics.reset()

        assert metrics.snapshot() == {
            "queryCount": 0,
            "cacheHits": 0,
            "cacheMisses": 0,
            "cacheHitRate": 0.0,
            "slowQueries": [],
        }


def test_build_cache_key_is_order_independent():
    assert build_cache_key("products", page=1, limit=10) == build_cache_key("products", limit=10, page=1)
    assert build_cache_key("products", page=1, limit=10) == "products:limit=10:page=1"


def test_get_cache_is_a_singleton_using_configured_ttl():
    assert get_cache() is get_cache()
    assert get_cache().ttl_seconds == 300
