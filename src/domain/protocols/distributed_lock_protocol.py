"""Distributed lock protocol.

Lease-based mutual exclusion keyed per logical resource. Because the lock
lives in the shared backend it coordinates across processes, not only tasks.
"""

from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.value_objects.lock_lease import LockLease


class DistributedLockProtocol(Protocol):
    """Non-blocking, lease-based lock."""

    async def try_acquire(
        self, resource_key: str, lease_ttl: float | None = None
    ) -> Result[LockLease | None, DomainError]:
        """Try to take the lock once, without waiting.

        Args:
            resource_key: Logical resource to lock (typically the data key).
            lease_ttl: Lease in seconds; implementation default if None.

        Returns:
            Result with a LockLease if acquired, None if someone else holds
            the lock, or CacheError if the backend failed.
        """
        ...

    async def release(self, lease: LockLease) -> Result[bool, DomainError]:
        """Release a held lock.

        Only deletes the lock if it still carries this lease's token.

        Returns:
            Result with True if released, False if the lease had already
            expired (the lock is gone or owned by another holder), or
            CacheError.
        """
        ...
