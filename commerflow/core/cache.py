"""In-memory response cache for catalogue reads.

A single process-local map with a time-to-live check on read and an explicit
sweep. There is no size bound and no eviction policy; product and category
writes clear the whole cache.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Optional, Tuple

from commerflow.core.logging_config import get_logger

logger = get_logger(__name__)

SLOW_QUERY_THRESHOLD_MS = 1000.0
SLOW_QUERY_LOG_SIZE = 100


@dataclass
class PerformanceMetrics:
    """Counters for cache usage and query timings."""

    query_count: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    slow_queries: Deque[Dict[str, Any]] = field(default_factory=lambda: deque(maxlen=SLOW_QUERY_LOG_SIZE))

    def record_query(self, name: str, duration_ms: float) -> None:
        self.query_count += 1
        if duration_ms > SLOW_QUERY_THRESHOLD_MS:
            logger.warning(f"Slow query {name} took {duration_ms:.2f}ms")
            self.slow_queries.append({"query": name, "durationMs": round(duration_ms, 2), "at": time.time()})

    def snapshot(self) -> Dict[str, Any]:
        lookups = self.cache_hits + self.cache_misses
        return {
            "queryCount": self.query_count,
            "cacheHits": self.cache_hits,
            "cacheMisses": self.cache_misses,
            "cacheHitRate": round(self.cache_hits / lookups, 4) if lookups else 0.0,
            "slowQueries": list(self.slow_queries),
        }

    def reset(self) -> None:
        self.query_count = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.slow_queries.clear()


class ResponseCache:
    """Key/value cache whose entries expire ``ttl_seconds`` after being set.

    Attributes:
        ttl_seconds: Entry lifetime; 0 disables caching entirely
        metrics: Hit/miss counters shared with the performance endpoint
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional[PerformanceMetrics] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics or PerformanceMetrics()
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is not None:
            stored_at, value = entry
            if not self._expired(stored_at, self._clock()):
                self.metrics.cache_hits += 1
                return value
            del self._entries[key]
        self.metrics.cache_misses += 1
        return None

    def set(self, key: str, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock(), value)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        if self._entries:
            logger.debug(f"Clearing {len(self._entries)} cached responses")
        self._entries.clear()

    def cleanup(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def size(self) -> int:
        return len(self._entries)


def build_cache_key(prefix: str, **params: Any) -> str:
    """Build a stable key from a prefix and query parameters (sorted by name)."""
    parts = [f"{name}={params[name]}" for name in sorted(params)]
    return ":".join([prefix, *parts])


_cache: Optional[ResponseCache] = None


def get_cache() -> ResponseCache:
    """Return the process-wide catalogue cache, creating it from settings on first use."""
    global _cache
    if _cache is None:
        from commerflow.server.core.config import settings

        _cache = ResponseCache(ttl_seconds=settings.cache_ttl_seconds)
    return _cache
