"""Cache-aside dependency factories.

Application-scoped singletons wiring the cache client from settings:

    store ──┬── lock
            └── client ── scheduler, metrics, logger

Usage:
    from src.core.container import get_cache_client

    client = get_cache_client()
    result = await client.query_with_pass_through(
        "cache:shop:", 1, Shop, load_shop, ttl=1800
    )

On shutdown, stop the scheduler so queued rebuilds finish:

    await get_rebuild_scheduler().stop()
"""

from functools import lru_cache

from src.core.config import settings
from src.core.container.infrastructure import get_logger, get_redis_client
from src.infrastructure.cache.cache_client import CacheClient
from src.infrastructure.cache.cache_metrics import CacheMetrics
from src.infrastructure.cache.distributed_lock import RedisDistributedLock
from src.infrastructure.cache.redis_store import RedisCacheStore
from src.infrastructure.jobs.rebuild_scheduler import RebuildScheduler


@lru_cache()
def get_cache_store() -> RedisCacheStore:
    """Get cache store singleton backed by the shared Redis pool."""
    return RedisCacheStore(redis_client=get_redis_client())


@lru_cache()
def get_distributed_lock() -> RedisDistributedLock:
    """Get distributed lock singleton.

    Lock keys live under ``settings.cache_lock_prefix``; leases default to
    ``settings.cache_lock_ttl_seconds``.
    """
    return RedisDistributedLock(
        store=get_cache_store(),
        logger=get_logger(),
        prefix=settings.cache_lock_prefix,
        lease_ttl=settings.cache_lock_ttl_seconds,
    )


@lru_cache()
def get_rebuild_scheduler() -> RebuildScheduler:
    """Get rebuild scheduler singleton.

    Workers start lazily on the first submitted rebuild.
    """
    return RebuildScheduler(
        logger=get_logger(),
        workers=settings.cache_rebuild_workers,
        queue_size=settings.cache_rebuild_queue_size,
    )


@lru_cache()
def get_cache_metrics() -> CacheMetrics:
    """Get cache metrics singleton."""
    return CacheMetrics()


@lru_cache()
def get_cache_client() -> CacheClient:
    """Get cache client singleton with every collaborator from settings."""
    return CacheClient(
        store=get_cache_store(),
        lock=get_distributed_lock(),
        scheduler=get_rebuild_scheduler(),
        logger=get_logger(),
        metrics=get_cache_metrics(),
        null_ttl=settings.cache_null_ttl_seconds,
        lock_ttl=settings.cache_lock_ttl_seconds,
        retry_interval=settings.mutex_retry_interval_seconds,
        max_attempts=settings.cache_mutex_max_attempts,
    )
