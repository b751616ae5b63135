"""Cache-aside client with stampede protection.

CacheClient sits between services and a slower system of record. It serves
reads from the cache store and offers three query strategies:

- query_with_pass_through: null caching against penetration. An id absent
  from the store is cached as an empty payload (the null marker) for a short,
  fixed TTL so repeated lookups stop reaching the store.
- query_with_mutex: single synchronous rebuild against breakdown. On a miss
  one caller takes the rebuild lock and reloads; the others sleep and retry
  within a bounded attempt budget.
- query_with_logical_expire: stale-while-revalidate against breakdown with no
  added latency. Entries never expire physically; once their logical deadline
  passes, the stale value is returned and a single background rebuild is
  handed to the rebuild scheduler.

Key convention:
    data key: {key_prefix}{id}
    lock key: {lock_prefix}{key_prefix}{id}

Error handling (Result types, nothing is raised for runtime failures):
- Backend read or lock failure: Failure(CacheError) to the caller, no retry
- Undecodable payload: treated as a miss and logged
- Loader exception (synchronous strategies): Failure(LoadError)
- Write-back failure after a successful load: logged, loaded value returned
- Loader exception (background rebuild): logged, stale entry kept

Usage:
    client = get_cache_client()

    result = await client.query_with_mutex(
        "cache:shop:", shop_id, Shop, shop_repository.get_by_id, ttl=1800
    )
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.errors import LoadError, LockContentionError
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.distributed_lock_protocol import DistributedLockProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rebuild_scheduler_protocol import RebuildSchedulerProtocol
from src.domain.protocols.serializer_protocol import SerializerProtocol
from src.domain.value_objects.cache_entry import (
    NULL_MARKER,
    LogicalExpiryEntry,
    is_null_marker,
)
from src.domain.value_objects.lock_lease import LockLease
from src.domain.value_objects.rebuild_task import RebuildTask
from src.infrastructure.cache.cache_metrics import CacheMetrics
from src.infrastructure.cache.serializers import PydanticSerializer, as_serializer
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import SerializationError

ID = TypeVar("ID")
T = TypeVar("T")

Loader = Callable[[ID], Awaitable[T | None]]
Target = SerializerProtocol[T] | type[T] | Any

_ANY_SERIALIZER: SerializerProtocol[Any] = PydanticSerializer(Any)


def utc_now() -> datetime:
    """Default clock: current aware UTC time."""
    return datetime.now(UTC)


def _require_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {value!r}")


class _ReadState(Enum):
    HIT = "hit"
    NULL = "null"
    MISS = "miss"


@dataclass(frozen=True, slots=True)
class _Lookup(Generic[T]):
    state: _ReadState
    value: T | None = None


class CacheClient:
    """Cache-aside orchestrator over a store, a lock and a rebuild scheduler.

    Attributes:
        _store: Key-value backend.
        _lock: Lease-based rebuild lock.
        _scheduler: Background executor for logical-expiry rebuilds.
        _logger: Structured logger.
        _metrics: Optional hit/miss/rebuild counters.
        _clock: Returns the current aware UTC datetime.
        _null_ttl: TTL of the null marker (independent of query TTLs).
        _lock_ttl: Lease used for rebuild locks.
        _retry_interval: Sleep between mutex lock attempts (seconds).
        _max_attempts: Lock attempts before the mutex strategy gives up.
    """

    def __init__(
        self,
        *,
        store: CacheStoreProtocol,
        lock: DistributedLockProtocol,
        scheduler: RebuildSchedulerProtocol,
        logger: LoggerProtocol,
        metrics: CacheMetrics | None = None,
        clock: Callable[[], datetime] = utc_now,
        null_ttl: float = 120,
        lock_ttl: float = 10.0,
        retry_interval: float = 0.05,
        max_attempts: int = 100,
    ) -> None:
        _require_positive("null_ttl", null_ttl)
        _require_positive("lock_ttl", lock_ttl)
        _require_positive("retry_interval", retry_interval)
        _require_positive("max_attempts", max_attempts)
        self._store = store
        self._lock = lock
        self._scheduler = scheduler
        self._logger = logger
        self._metrics = metrics
        self._clock = clock
        self._null_ttl = null_ttl
        self._lock_ttl = lock_ttl
        self._retry_interval = retry_interval
        self._max_attempts = max_attempts

    # ---------------------------------------------------------------------
    # Write helpers
    # ---------------------------------------------------------------------
    async def set(
        self,
        key: str,
        value: Any,
        ttl: float,
        serializer: Target[Any] | None = None,
    ) -> Result[None, DomainError]:
        """Serialize a value and store it with a hard TTL.

        Args:
            key: Data key.
            value: Value to cache.
            ttl: Time to live in seconds.
            serializer: Serializer or target type (inferred when None).

        Returns:
            Result with None on success, SerializationError or CacheError.
        """
        _require_positive("ttl", ttl)
        encoded = self._encode(key, value, self._serializer_for(serializer))
        match encoded:
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=payload):
                return await self._store.set(key, payload, ttl)

    async def set_with_logical_expire(
        self,
        key: str,
        value: Any,
        logical_ttl: float,
        serializer: Target[Any] | None = None,
    ) -> Result[None, DomainError]:
        """Store a value wrapped in a logical-expiry envelope, with no backend TTL.

        The entry goes stale ``logical_ttl`` seconds after now but stays in the
        store until it is overwritten or invalidated.

        Returns:
            Result with None on success, SerializationError or CacheError.
        """
        _require_positive("logical_ttl", logical_ttl)
        codec = self._serializer_for(serializer)
        try:
            entry = LogicalExpiryEntry.create(
                data=codec.dump(value), now=self._clock(), logical_ttl=logical_ttl
            )
            payload = entry.to_json()
        except (TypeError, ValueError) as e:
            return self._encode_failure(key, e)
        return await self._store.set(key, payload, None)

    async def invalidate(self, key: str) -> Result[bool, DomainError]:
        """Delete a data key after the system of record changed.

        Returns:
            Result with True if an entry was removed, or CacheError.
        """
        result = await self._store.delete(key)
        if isinstance(result, Success):
            self._logger.debug("Cache invalidated", key=key, existed=result.value)
        return result

    # ---------------------------------------------------------------------
    # Query strategies
    # ---------------------------------------------------------------------
    async def query_with_pass_through(
        self,
        key_prefix: str,
        id: ID,
        target: Target[T],
        load: Loader[ID, T],
        ttl: float,
    ) -> Result[T | None, DomainError]:
        """Read-through with null caching (penetration protection).

        Concurrent misses are not coordinated: each may call ``load`` once.

        Args:
            key_prefix: Data key namespace.
            id: Identifier appended to the prefix and passed to ``load``.
            target: Serializer or target type of the cached value.
            load: Async system-of-record lookup returning None when absent.
            ttl: Hard TTL of a loaded value in seconds.

        Returns:
            Result with the value, None when absent, or a DomainError.
        """
        _require_positive("ttl", ttl)
        key = f"{key_prefix}{id}"
        serializer = as_serializer(target)

        lookup = await self._read(key, serializer, key_prefix)
        match lookup:
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=_Lookup(state=_ReadState.HIT, value=value)):
                return Success(value=value)
            case Success(value=_Lookup(state=_ReadState.NULL)):
                return Success(value=None)

        return await self._load_and_write(key, id, serializer, load, ttl, key_prefix)

    async def query_with_mutex(
        self,
        key_prefix: str,
        id: ID,
        target: Target[T],
        load: Loader[ID, T],
        ttl: float,
    ) -> Result[T | None, DomainError]:
        """Read-through with a single rebuild per missing key (breakdown protection).

        The lock winner re-reads the key, then loads and writes it. Losers
        sleep ``retry_interval`` and start over, at most ``max_attempts`` times.

        Returns:
            Result with the value, None when absent, LockContentionError when
            the attempt budget ran out, or another DomainError.
        """
        _require_positive("ttl", ttl)
        key = f"{key_prefix}{id}"
        serializer = as_serializer(target)

        for attempt in range(1, self._max_attempts + 1):
            lookup = await self._read(key, serializer, key_prefix, record=attempt == 1)
            match lookup:
                case Failure(error=error):
                    return Failure(error=error)
                case Success(value=_Lookup(state=_ReadState.HIT, value=value)):
                    return Success(value=value)
                case Success(value=_Lookup(state=_ReadState.NULL)):
                    return Success(value=None)

            acquired = await self._lock.try_acquire(key, self._lock_ttl)
            match acquired:
                case Failure(error=error):
                    self._record_error(key_prefix)
                    return Failure(error=error)
                case Success(value=None):
                    self._record("record_lock_contention", key_prefix)
                    if attempt < self._max_attempts:
                        await asyncio.sleep(self._retry_interval)
                    continue
                case Success(value=lease):
                    return await self._rebuild_holding_lock(
                        lease, key, id, serializer, load, ttl, key_prefix
                    )

        self._logger.warning(
            "Lock wait exhausted",
            key=key,
            attempts=self._max_attempts,
            retry_interval=self._retry_interval,
        )
        return Failure(
            error=LockContentionError(
                code=ErrorCode.LOCK_WAIT_EXHAUSTED,
                message=f"Gave up waiting for rebuild of '{key}'",
                key=key,
                attempts=self._max_attempts,
            )
        )

    async def query_with_logical_expire(
        self,
        key_prefix: str,
        id: ID,
        target: Target[T],
        load: Loader[ID, T],
        logical_ttl: float,
    ) -> Result[T | None, DomainError]:
        """Stale-while-revalidate read (breakdown protection, zero added latency).

        Never awaits ``load``. A missing key is reported as absent (entries
        are expected to be pre-populated). An expired entry is returned as-is
        while at most one background rebuild refreshes it.

        Returns:
            Result with the (possibly stale) value, None when absent, or
            CacheError when the backend read failed.
        """
        _require_positive("logical_ttl", logical_ttl)
        key = f"{key_prefix}{id}"
        serializer = as_serializer(target)

        result = await self._store.get(key)
        match result:
            case Failure(error=error):
                self._record_error(key_prefix)
                return Failure(error=error)
            case Success(value=raw):
                pass

        if raw is None or is_null_marker(raw):
            self._record("record_miss" if raw is None else "record_null_hit", key_prefix)
            return Success(value=None)

        entry = self._decode_entry(key, raw, serializer, key_prefix)
        if entry is None:
            # Undecodable: nothing to serve, but a rebuild can repair the key.
            await self._trigger_rebuild(
                key, id, serializer, load, logical_ttl, key_prefix
            )
            return Success(value=None)

        value, expire_at = entry
        now = self._clock()
        if now <= expire_at:
            self._record("record_hit", key_prefix)
            return Success(value=value)

        self._record("record_stale_hit", key_prefix)
        self._logger.info(
            "Stale entry served",
            key=key,
            expired_for_seconds=round((now - expire_at).total_seconds(), 3),
        )
        fresh = await self._trigger_rebuild(
            key, id, serializer, load, logical_ttl, key_prefix
        )
        if fresh is not None:
            return Success(value=fresh)
        return Success(value=value)

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    def _serializer_for(self, target: Target[Any] | None) -> SerializerProtocol[Any]:
        if target is None:
            return _ANY_SERIALIZER
        return as_serializer(target)

    def _record(self, counter: str, namespace: str) -> None:
        if self._metrics is not None:
            getattr(self._metrics, counter)(namespace)

    def _record_error(self, namespace: str) -> None:
        self._record("record_error", namespace)

    def _encode(
        self, key: str, value: Any, serializer: SerializerProtocol[Any]
    ) -> Result[str, DomainError]:
        try:
            return Success(
                value=json.dumps(serializer.dump(value), separators=(",", ":"))
            )
        except (TypeError, ValueError) as e:
            return self._encode_failure(key, e)

    def _encode_failure(self, key: str, error: Exception) -> Failure[DomainError]:
        return Failure(
            error=SerializationError(
                code=ErrorCode.SERIALIZATION_FAILED,
                infrastructure_code=InfrastructureErrorCode.SERIALIZATION_ENCODE_ERROR,
                message=f"Failed to serialize value for key '{key}'",
                details={
                    "key": key,
                    "error": str(error),
                    "type": type(error).__name__,
                },
            )
        )

    async def _read(
        self,
        key: str,
        serializer: SerializerProtocol[T],
        namespace: str,
        *,
        record: bool = True,
    ) -> Result[_Lookup[T], DomainError]:
        """Read a hard-TTL key and classify it as hit, null marker or miss."""
        result = await self._store.get(key)
        match result:
            case Failure(error=error):
                self._record_error(namespace)
                return Failure(error=error)
            case Success(value=None):
                if record:
                    self._record("record_miss", namespace)
                self._logger.debug("Cache miss", key=key)
                return Success(value=_Lookup(state=_ReadState.MISS))
            case Success(value=raw) if is_null_marker(raw):
                if record:
                    self._record("record_null_hit", namespace)
                self._logger.debug("Null marker hit", key=key)
                return Success(value=_Lookup(state=_ReadState.NULL))
            case Success(value=raw):
                pass

        try:
            value = serializer.load(json.loads(raw))
        except (TypeError, ValueError) as e:
            # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
            self._record_error(namespace)
            self._logger.warning(
                "Undecodable cache payload treated as miss",
                key=key,
                error_type=type(e).__name__,
            )
            return Success(value=_Lookup(state=_ReadState.MISS))

        if record:
            self._record("record_hit", namespace)
        self._logger.debug("Cache hit", key=key)
        return Success(value=_Lookup(state=_ReadState.HIT, value=value))

    def _decode_entry(
        self,
        key: str,
        raw: str,
        serializer: SerializerProtocol[T],
        namespace: str,
    ) -> tuple[T, datetime] | None:
        try:
            entry = LogicalExpiryEntry.from_json(raw)
            return serializer.load(entry.data), entry.expire_at
        except (TypeError, ValueError) as e:
            self._record_error(namespace)
            self._logger.warning(
                "Undecodable logical expiry entry",
                key=key,
                error_type=type(e).__name__,
            )
            return None

    async def _load_and_write(
        self,
        key: str,
        id: Any,
        serializer: SerializerProtocol[T],
        load: Loader[Any, T],
        ttl: float,
        namespace: str,
    ) -> Result[T | None, DomainError]:
        """Call the loader and cache its answer (value or null marker)."""
        self._record("record_load", namespace)
        try:
            value = await load(id)
        except Exception as e:
            self._record_error(namespace)
            self._logger.warning("Loader failed", key=key, error_type=type(e).__name__)
            return Failure(
                error=LoadError(
                    code=ErrorCode.LOAD_FAILED,
                    message=f"System of record lookup failed for '{key}'",
                    key=key,
                    details={"error": str(e), "type": type(e).__name__},
                )
            )

        if value is None:
            written = await self._store.set(key, NULL_MARKER, self._null_ttl)
            self._check_write(written, key, namespace, kind="null_marker")
            return Success(value=None)

        encoded = self._encode(key, value, serializer)
        match encoded:
            case Success(value=payload):
                written = await self._store.set(key, payload, ttl)
                self._check_write(written, key, namespace, kind="value")
            case Failure(error=error):
                self._record_error(namespace)
                self._logger.warning(
                    "Loaded value not cacheable", key=key, error=error.message
                )
        return Success(value=value)

    def _check_write(
        self,
        result: Result[None, DomainError],
        key: str,
        namespace: str,
        *,
        kind: str,
    ) -> None:
        if isinstance(result, Failure):
            self._record_error(namespace)
            self._logger.warning(
                "Cache write-back failed",
                key=key,
                kind=kind,
                error_code=result.error.code.value,
            )

    async def _rebuild_holding_lock(
        self,
        lease: LockLease,
        key: str,
        id: Any,
        serializer: SerializerProtocol[T],
        load: Loader[Any, T],
        ttl: float,
        namespace: str,
    ) -> Result[T | None, DomainError]:
        try:
            # Another holder may have finished between our read and the lock.
            recheck = await self._read(key, serializer, namespace, record=False)
            match recheck:
                case Failure(error=error):
                    return Failure(error=error)
                case Success(value=_Lookup(state=_ReadState.HIT, value=value)):
                    return Success(value=value)
                case Success(value=_Lookup(state=_ReadState.NULL)):
                    return Success(value=None)
            return await self._load_and_write(key, id, serializer, load, ttl, namespace)
        finally:
            await self._lock.release(lease)

    async def _trigger_rebuild(
        self,
        key: str,
        id: Any,
        serializer: SerializerProtocol[T],
        load: Loader[Any, T],
        logical_ttl: float,
        namespace: str,
    ) -> T | None:
        """Try to hand a rebuild to the scheduler; never waits for it.

        Returns:
            The fresh value if a concurrent rebuild already refreshed the
            entry (nothing is scheduled then), otherwise None.
        """
        acquired = await self._lock.try_acquire(key, self._lock_ttl)
        match acquired:
            case Failure(error=error):
                self._record_error(namespace)
                self._logger.warning(
                    "Rebuild lock unavailable", key=key, error_code=error.code.value
                )
                return None
            case Success(value=None):
                self._record("record_lock_contention", namespace)
                return None
            case Success(value=lease):
                pass

        fresh = await self._read_fresh_entry(key, serializer)
        if fresh is not None:
            await self._lock.release(lease)
            return fresh

        task = RebuildTask(
            key=key,
            run=self._make_rebuild(
                lease, key, id, serializer, load, logical_ttl, namespace
            ),
        )
        submitted = self._scheduler.submit(task)
        match submitted:
            case Success():
                self._record("record_rebuild_scheduled", namespace)
                self._logger.info("Rebuild scheduled", key=key)
            case Failure():
                self._record("record_rebuild_rejected", namespace)
                await self._lock.release(lease)
        return None

    async def _read_fresh_entry(
        self, key: str, serializer: SerializerProtocol[T]
    ) -> T | None:
        result = await self._store.get(key)
        if not isinstance(result, Success) or not result.value:
            return None
        try:
            entry = LogicalExpiryEntry.from_json(result.value)
            if entry.is_expired(self._clock()):
                return None
            return serializer.load(entry.data)
        except (TypeError, ValueError):
            return None

    def _make_rebuild(
        self,
        lease: LockLease,
        key: str,
        id: Any,
        serializer: SerializerProtocol[T],
        load: Loader[Any, T],
        logical_ttl: float,
        namespace: str,
    ) -> Callable[[], Awaitable[None]]:
        async def rebuild() -> None:
            try:
                self._record("record_load", namespace)
                value = await load(id)
                if value is None:
                    written = await self._store.set(key, NULL_MARKER, self._null_ttl)
                    self._check_write(written, key, namespace, kind="null_marker")
                else:
                    written = await self.set_with_logical_expire(
                        key, value, logical_ttl, serializer
                    )
                    self._check_write(written, key, namespace, kind="logical_entry")
                self._logger.info("Rebuild completed", key=key, found=value is not None)
            except Exception:
                # Stale entry stays in place; the scheduler logs the failure.
                self._record_error(namespace)
                raise
            finally:
                await self._lock.release(lease)

        return rebuild
