"""Shared fixtures for integration tests.

Provides real components wired to fakeredis (in-memory Redis emulation with
Lua support) instead of a live server.
"""

import pytest_asyncio

from src.infrastructure.cache.cache_client import CacheClient
from src.infrastructure.cache.cache_metrics import CacheMetrics
from src.infrastructure.cache.distributed_lock import RedisDistributedLock
from src.infrastructure.cache.redis_store import RedisCacheStore
from src.infrastructure.jobs.rebuild_scheduler import RebuildScheduler


@pytest_asyncio.fixture
async def fakeredis_client():
    """Create fakeredis client for cache storage testing.

    Returns:
        fakeredis.aioredis.FakeRedis instance (in-memory Redis emulation)

    Note:
        Requires: pip install fakeredis[lua]
    """
    import fakeredis.aioredis

    client = fakeredis.aioredis.FakeRedis(decode_responses=False)
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def store(fakeredis_client):
    """Provide a RedisCacheStore on fakeredis."""
    return RedisCacheStore(redis_client=fakeredis_client)


@pytest_asyncio.fixture
async def lock(store, mock_logger):
    """Provide a distributed lock on the fakeredis store."""
    return RedisDistributedLock(store=store, logger=mock_logger, prefix="lock:")


@pytest_asyncio.fixture
async def scheduler(mock_logger):
    """Provide a small rebuild scheduler, stopped after the test."""
    scheduler = RebuildScheduler(logger=mock_logger, workers=2, queue_size=10)
    yield scheduler
    await scheduler.stop()


@pytest_asyncio.fixture
async def metrics():
    """Provide fresh cache metrics."""
    return CacheMetrics()


@pytest_asyncio.fixture
async def client(store, lock, scheduler, metrics, mock_logger, clock):
    """Provide a fully wired CacheClient with fast mutex retries."""
    return CacheClient(
        store=store,
        lock=lock,
        scheduler=scheduler,
        logger=mock_logger,
        metrics=metrics,
        clock=clock,
        null_ttl=120,
        lock_ttl=10.0,
        retry_interval=0.01,
        max_attempts=200,
    )
