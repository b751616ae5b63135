"""Integration tests for RedisDistributedLock against fakeredis.

Tests cover:
- Mutual exclusion per resource key
- Lock keys kept apart from data keys
- Lease expiry (crashed holder self-heals)
- Token-checked release (expired holder cannot free a successor's lock)
"""

import asyncio

import pytest

from src.core.result import Success
from src.domain.value_objects import LockLease


@pytest.mark.integration
class TestRedisDistributedLock:
    """Test lock acquisition and release."""

    async def test_acquire_returns_lease(self, lock, store):
        result = await lock.try_acquire("cache:shop:1", lease_ttl=5)

        assert isinstance(result, Success)
        lease = result.value
        assert isinstance(lease, LockLease)
        assert lease.lock_key == "lock:cache:shop:1"
        assert lease.resource_key == "cache:shop:1"
        assert (await store.get("lock:cache:shop:1")).value == lease.token

    async def test_second_acquire_is_refused(self, lock):
        await lock.try_acquire("cache:shop:1")

        result = await lock.try_acquire("cache:shop:1")

        assert result == Success(value=None)

    async def test_locks_are_per_resource(self, lock):
        first = await lock.try_acquire("cache:shop:1")
        second = await lock.try_acquire("cache:shop:2")

        assert first.value is not None
        assert second.value is not None

    async def test_lock_does_not_touch_data_key(self, lock, store):
        await store.set("cache:shop:1", '{"id":1}')

        await lock.try_acquire("cache:shop:1")

        assert (await store.get("cache:shop:1")).value == '{"id":1}'

    async def test_release_allows_reacquire(self, lock):
        lease = (await lock.try_acquire("cache:shop:1")).value

        released = await lock.release(lease)
        again = await lock.try_acquire("cache:shop:1")

        assert released == Success(value=True)
        assert again.value is not None

    async def test_concurrent_acquire_single_winner(self, lock):
        results = await asyncio.gather(
            *(lock.try_acquire("cache:shop:1") for _ in range(25))
        )

        winners = [r.value for r in results if r.value is not None]
        assert len(winners) == 1

    async def test_lease_expiry_frees_lock(self, lock):
        await lock.try_acquire("cache:shop:1", lease_ttl=0.05)

        await asyncio.sleep(0.1)
        result = await lock.try_acquire("cache:shop:1")

        assert result.value is not None

    async def test_expired_holder_cannot_release_successor(
        self, lock, store, mock_logger
    ):
        stale = (await lock.try_acquire("cache:shop:1", lease_ttl=0.05)).value
        await asyncio.sleep(0.1)
        current = (await lock.try_acquire("cache:shop:1", lease_ttl=5)).value

        released = await lock.release(stale)

        assert released == Success(value=False)
        assert (await store.get("lock:cache:shop:1")).value == current.token
        mock_logger.warning.assert_called_once()
        assert (await lock.try_acquire("cache:shop:1")).value is None
