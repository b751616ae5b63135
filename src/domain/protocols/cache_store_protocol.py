"""Cache store protocol for the domain layer.

This module defines the key-value operations the cache-aside layer needs from
its backend, without knowing about any specific implementation.
Infrastructure adapters implement this protocol to provide storage.

Architecture:
- Protocol-based (structural typing)
- Single-key, atomic operations only
- All operations return Result types
- No retries: callers decide the retry policy
"""

from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result


class CacheStoreProtocol(Protocol):
    """Key-value store the cache client is built on.

    Values are opaque text payloads; the cache client owns serialization.
    TTLs are in seconds and may be fractional.
    """

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get a payload.

        Args:
            key: Cache key.

        Returns:
            Result with the payload, None if the key does not exist, or
            CacheError. An empty string is a valid (present) payload.

        Example:
            result = await store.get("cache:shop:1")
            match result:
                case Success(value=None):
                    # Unknown, must reload
                    pass
                case Success(value=""):
                    # Null marker
                    pass
                case Success(value=payload):
                    shop = json.loads(payload)
                case Failure(error=error):
                    # Backend unavailable
                    pass
        """
        ...

    async def set(
        self,
        key: str,
        value: str,
        ttl: float | None = None,
    ) -> Result[None, DomainError]:
        """Store a payload, replacing any previous one.

        Args:
            key: Cache key.
            value: Payload.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        ...

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl: float,
    ) -> Result[bool, DomainError]:
        """Atomically store a payload only if the key does not exist.

        Args:
            key: Cache key.
            value: Payload.
            ttl: Time to live in seconds (required, the key must not leak).

        Returns:
            Result with True if this caller wrote the key, False if it
            already existed, or CacheError.
        """
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete a key.

        Returns:
            Result with True if the key was deleted, False if it did not
            exist, or CacheError.
        """
        ...

    async def compare_and_delete(
        self, key: str, expected: str
    ) -> Result[bool, DomainError]:
        """Atomically delete a key only if it still holds ``expected``.

        Returns:
            Result with True if deleted, False if the key is missing or holds
            another value, or CacheError.
        """
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Check backend connectivity (health check).

        Returns:
            Result with True if reachable, or CacheError.
        """
        ...
