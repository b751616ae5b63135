"""Cache metrics tracking for observability.

Lightweight in-memory counters for the cache-aside strategies, tracked per
namespace (the key prefix a query used, e.g. "cache:shop:").

Usage:
    from src.infrastructure.cache.cache_metrics import CacheMetrics

    metrics = CacheMetrics()
    metrics.record_hit("cache:shop:")
    metrics.record_stale_hit("cache:shop:")

    stats = metrics.get_stats("cache:shop:")
    print(f"Hit rate: {stats['hit_rate']:.2%}")
"""

from collections import defaultdict
from dataclasses import dataclass, fields
from threading import Lock
from typing import Any


@dataclass
class CacheStats:
    """Cache statistics for one namespace.

    Attributes:
        hits: Fresh values served from cache.
        null_hits: Null markers served (confirmed absent, loader skipped).
        stale_hits: Logically expired values served while rebuilding.
        misses: Reads that found nothing usable in cache.
        loads: Calls made to the system-of-record loader.
        rebuilds_scheduled: Background rebuilds accepted by the scheduler.
        rebuilds_rejected: Background rebuilds refused by a saturated pool.
        lock_contention: Lock attempts that found the lock held.
        errors: Backend, serialization or loader failures.
    """

    hits: int = 0
    null_hits: int = 0
    stale_hits: int = 0
    misses: int = 0
    loads: int = 0
    rebuilds_scheduled: int = 0
    rebuilds_rejected: int = 0
    lock_contention: int = 0
    errors: int = 0

    @property
    def total_requests(self) -> int:
        """Total reads answered (every hit kind plus misses)."""
        return self.hits + self.null_hits + self.stale_hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Share of reads answered from cache (0.0 to 1.0)."""
        if self.total_requests == 0:
            return 0.0
        return (self.hits + self.null_hits + self.stale_hits) / self.total_requests

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary for JSON serialization."""
        data: dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        data["total_requests"] = self.total_requests
        data["hit_rate"] = round(self.hit_rate, 4)
        return data


class CacheMetrics:
    """In-memory cache metrics tracker.

    Thread-safe; every counter update takes a lock so metrics can be shared
    between the request path and the rebuild workers.
    """

    def __init__(self) -> None:
        """Initialize metrics tracker with empty counters."""
        self._stats: dict[str, CacheStats] = defaultdict(CacheStats)
        self._lock = Lock()

    def _increment(self, namespace: str, counter: str) -> None:
        with self._lock:
            stats = self._stats[namespace]
            setattr(stats, counter, getattr(stats, counter) + 1)

    def record_hit(self, namespace: str) -> None:
        """Record a fresh cache hit."""
        self._increment(namespace, "hits")

    def record_null_hit(self, namespace: str) -> None:
        """Record a null-marker hit."""
        self._increment(namespace, "null_hits")

    def record_stale_hit(self, namespace: str) -> None:
        """Record a stale value served during revalidation."""
        self._increment(namespace, "stale_hits")

    def record_miss(self, namespace: str) -> None:
        """Record a cache miss."""
        self._increment(namespace, "misses")

    def record_load(self, namespace: str) -> None:
        """Record a call to the system-of-record loader."""
        self._increment(namespace, "loads")

    def record_rebuild_scheduled(self, namespace: str) -> None:
        """Record a background rebuild accepted by the scheduler."""
        self._increment(namespace, "rebuilds_scheduled")

    def record_rebuild_rejected(self, namespace: str) -> None:
        """Record a background rebuild rejected by the scheduler."""
        self._increment(namespace, "rebuilds_rejected")

    def record_lock_contention(self, namespace: str) -> None:
        """Record a lock attempt that found the lock already held."""
        self._increment(namespace, "lock_contention")

    def record_error(self, namespace: str) -> None:
        """Record a backend, serialization or loader failure."""
        self._increment(namespace, "errors")

    def get_stats(self, namespace: str) -> dict[str, Any]:
        """Get statistics for a specific namespace.

        Args:
            namespace: Cache namespace to query.

        Returns:
            Dictionary with every counter, total_requests and hit_rate.
        """
        with self._lock:
            stats = self._stats.get(namespace, CacheStats())
            return stats.to_dict()

    def get_all_stats(self) -> dict[str, dict[str, Any]]:
        """Get statistics for all namespaces."""
        with self._lock:
            return {
                namespace: stats.to_dict() for namespace, stats in self._stats.items()
            }

    def reset(self, namespace: str | None = None) -> None:
        """Reset metrics.

        Args:
            namespace: Optional namespace to reset. If None, reset all.
        """
        with self._lock:
            if namespace is None:
                self._stats.clear()
            else:
                self._stats.pop(namespace, None)
