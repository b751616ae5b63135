"""Redis adapter implementing CacheStoreProtocol.

This adapter provides the Redis implementation of the cache store defined in
the domain layer. It wraps an async Redis client and maps every Redis failure
to a CacheError.

Architecture:
- Implements CacheStoreProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with proper InfrastructureErrorCode
- Returns Result types for all operations
- No retries: a backend outage surfaces to the caller
- compare_and_delete runs an atomic Lua script via EVALSHA
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError


@dataclass(slots=True)
class _LuaRefs:
    """Holds loaded Lua script SHA references."""

    compare_and_delete_sha: str | None = None


def _to_millis(ttl: float) -> int:
    """Convert a TTL in seconds to whole milliseconds (at least 1)."""
    return max(1, int(round(ttl * 1000)))


def _decode(value: bytes | str) -> str:
    # Invalid UTF-8 becomes U+FFFD; callers then see an undecodable payload.
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _cache_error(
    *,
    infrastructure_code: InfrastructureErrorCode,
    code: ErrorCode,
    message: str,
    key: str | None,
    error: Exception,
) -> Failure[CacheError]:
    details: dict[str, str] = {"error": str(error), "type": type(error).__name__}
    if key is not None:
        details["key"] = key
    return Failure(
        error=CacheError(
            code=code,
            infrastructure_code=infrastructure_code,
            message=message,
            details=details,
        )
    )


class RedisCacheStore:
    """Redis implementation of CacheStoreProtocol.

    TTLs are sent as milliseconds (PX) so fractional leases are honoured.

    Note: Does NOT inherit from CacheStoreProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
        _lua: Cached Lua script SHAs.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis store.

        Args:
            redis_client: Async Redis client instance (bytes or decoded
                responses are both accepted).
        """
        self._redis = redis_client
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get a payload from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with the payload, None if not found, or CacheError.
        """
        try:
            value = await self._redis.get(key)
            if value is None:
                return Success(value=None)
            return Success(value=_decode(value))
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                code=ErrorCode.CACHE_READ_FAILED,
                message=f"Failed to get key '{key}' from cache",
                key=key,
                error=e,
            )

    async def set(
        self,
        key: str,
        value: str,
        ttl: float | None = None,
    ) -> Result[None, CacheError]:
        """Set a payload in Redis.

        Args:
            key: Cache key.
            value: Payload.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            if ttl is not None:
                await self._redis.set(key, value, px=_to_millis(ttl))
            else:
                await self._redis.set(key, value)
            return Success(value=None)
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                code=ErrorCode.CACHE_WRITE_FAILED,
                message=f"Failed to set key '{key}' in cache",
                key=key,
                error=e,
            )

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl: float,
    ) -> Result[bool, CacheError]:
        """Atomically set a payload only if the key does not exist (SET NX PX).

        Args:
            key: Cache key.
            value: Payload.
            ttl: Time to live in seconds.

        Returns:
            Result with True if this call wrote the key, False if it existed,
            or CacheError.
        """
        try:
            was_set = await self._redis.set(key, value, nx=True, px=_to_millis(ttl))
            return Success(value=bool(was_set))
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                code=ErrorCode.CACHE_WRITE_FAILED,
                message=f"Failed to set-if-absent key '{key}'",
                key=key,
                error=e,
            )

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key from Redis.

        Args:
            key: Cache key to delete.

        Returns:
            Result with True if deleted, False if key didn't exist, or CacheError.
        """
        try:
            deleted_count = await self._redis.delete(key)
            return Success(value=deleted_count > 0)
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
                code=ErrorCode.CACHE_WRITE_FAILED,
                message=f"Failed to delete key '{key}' from cache",
                key=key,
                error=e,
            )

    async def compare_and_delete(
        self, key: str, expected: str
    ) -> Result[bool, CacheError]:
        """Delete key only if it still holds ``expected`` (atomic Lua script).

        Args:
            key: Cache key.
            expected: Value the key must hold to be deleted.

        Returns:
            Result with True if deleted, False otherwise, or CacheError.
        """
        try:
            sha = await self._ensure_compare_and_delete_script()
            try:
                deleted = await self._redis.evalsha(sha, 1, key, expected)
            except NoScriptError:
                # Script cache flushed on the server; load it again once.
                self._lua.compare_and_delete_sha = None
                sha = await self._ensure_compare_and_delete_script()
                deleted = await self._redis.evalsha(sha, 1, key, expected)
            return Success(value=int(deleted) > 0)
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_SCRIPT_ERROR,
                code=ErrorCode.CACHE_WRITE_FAILED,
                message=f"Failed to compare-and-delete key '{key}'",
                key=key,
                error=e,
            )

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity (health check).

        Returns:
            Result with True if Redis is reachable, or CacheError.
        """
        try:
            await self._redis.ping()  # type: ignore[misc]
            return Success(value=True)
        except RedisError as e:
            return _cache_error(
                infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                code=ErrorCode.CACHE_UNAVAILABLE,
                message="Redis health check failed",
                key=None,
                error=e,
            )

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _ensure_compare_and_delete_script(self) -> str:
        """Load the compare-and-delete Lua script into Redis and cache the SHA.

        Returns:
            str: Script SHA.
        """
        if self._lua.compare_and_delete_sha:
            return self._lua.compare_and_delete_sha
        async with self._script_lock:
            if self._lua.compare_and_delete_sha:
                return self._lua.compare_and_delete_sha
            script = await _read_lua_script("lua_scripts/compare_and_delete.lua")
            sha = _decode(await self._redis.script_load(script))
            self._lua.compare_and_delete_sha = sha
            return sha


def _read_lua_script_sync(path: Path) -> str:
    """Synchronous helper to read Lua script (called via run_in_executor)."""
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read Lua script file relative to this module.

    Uses run_in_executor to avoid blocking the event loop on file IO.

    Args:
        rel_path: Relative path from this module's directory.

    Returns:
        Script contents as string.
    """
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
