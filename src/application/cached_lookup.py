"""CachedLookup - one entity type, one caching strategy.

Binds a key prefix, a system-of-record loader, a serializer and a strategy
to a CacheClient. Services call ``get(id)`` and never see which stampede
protection is in use.

Architecture:
- Application layer (orchestrates the infrastructure cache client)
- Returns Result[T | None, DomainError] (explicit error handling)
- Writes go to the system of record first, then the key is invalidated

Usage:
    shops = CachedLookup(
        client=get_cache_client(),
        key_prefix="cache:shop:",
        target=Shop,
        load=shop_repository.find_by_id,
        strategy=CacheStrategy.LOGICAL_EXPIRE,
        ttl=20,
    )

    await shops.preload(1)           # warm up before logical expiry serves
    result = await shops.get(1)
    await shops.update(1, lambda: shop_repository.save(shop))
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import CacheStrategy
from src.domain.errors import LoadError
from src.infrastructure.cache.serializers import as_serializer

if TYPE_CHECKING:
    from src.infrastructure.cache.cache_client import CacheClient

ID = TypeVar("ID")
T = TypeVar("T")


class CachedLookup(Generic[ID, T]):
    """Strategy-bound cache-aside accessor for a single key namespace.

    Dependencies (injected via constructor):
        - CacheClient: Store, lock and rebuild orchestration

    Attributes:
        strategy: Query strategy used by get().
        key_prefix: Data key namespace (e.g. "cache:shop:").
        ttl: Hard TTL (pass-through, mutex) or logical TTL (logical expire),
            in seconds.
    """

    def __init__(
        self,
        *,
        client: "CacheClient",
        key_prefix: str,
        target: Any,
        load: Callable[[ID], Awaitable[T | None]],
        strategy: CacheStrategy = CacheStrategy.PASS_THROUGH,
        ttl: float,
    ) -> None:
        """Initialize lookup.

        Args:
            client: Cache client.
            key_prefix: Data key namespace.
            target: Cached value type, or a serializer for it.
            load: Async system-of-record lookup returning None when absent.
            strategy: Query strategy used by get().
            ttl: Seconds; meaning depends on strategy.

        Raises:
            ValueError: If key_prefix is empty or ttl is not positive.
        """
        if not key_prefix:
            raise ValueError("key_prefix must not be empty")
        if ttl <= 0:
            raise ValueError("ttl must be greater than 0")
        self._client = client
        self._serializer = as_serializer(target)
        self._load = load
        self.key_prefix = key_prefix
        self.strategy = strategy
        self.ttl = ttl

    def key_for(self, id: ID) -> str:
        """Data key of ``id``."""
        return f"{self.key_prefix}{id}"

    async def get(self, id: ID) -> Result[T | None, DomainError]:
        """Read through the cache with the configured strategy.

        Returns:
            Success(value), Success(None) when absent, or Failure(DomainError).
        """
        match self.strategy:
            case CacheStrategy.PASS_THROUGH:
                query = self._client.query_with_pass_through
            case CacheStrategy.MUTEX:
                query = self._client.query_with_mutex
            case CacheStrategy.LOGICAL_EXPIRE:
                query = self._client.query_with_logical_expire
        return await query(self.key_prefix, id, self._serializer, self._load, self.ttl)

    async def preload(self, id: ID) -> Result[T | None, DomainError]:
        """Load ``id`` and store it as a logical-expiry entry.

        Used to warm keys served by the logical-expire strategy, which never
        loads on a miss. Nothing is written when the loader finds no record.

        Returns:
            Success(value) (None when absent), Failure(LoadError) if the
            loader raised, or the cache write error.
        """
        key = self.key_for(id)
        try:
            value = await self._load(id)
        except Exception as e:
            return Failure(
                error=LoadError(
                    code=ErrorCode.LOAD_FAILED,
                    message=f"System of record lookup failed for '{key}'",
                    key=key,
                    details={"error": str(e), "type": type(e).__name__},
                )
            )

        if value is None:
            return Success(value=None)

        written = await self._client.set_with_logical_expire(
            key, value, self.ttl, self._serializer
        )
        match written:
            case Failure(error=error):
                return Failure(error=error)
            case _:
                return Success(value=value)

    async def update(
        self, id: ID, persist: Callable[[], Awaitable[Any]]
    ) -> Result[bool, DomainError]:
        """Write to the system of record, then drop the cached entry.

        Exceptions from ``persist`` propagate untouched and leave the cache
        as it was.

        Args:
            id: Identifier of the changed record.
            persist: Async write to the system of record.

        Returns:
            Result with True if a cached entry was removed, or CacheError.
        """
        await persist()
        return await self.invalidate(id)

    async def invalidate(self, id: ID) -> Result[bool, DomainError]:
        """Drop the cached entry of ``id``."""
        return await self._client.invalidate(self.key_for(id))
