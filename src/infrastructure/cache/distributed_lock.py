"""Lease-based distributed lock on top of the cache store.

Acquisition is a single SET NX PX with a random holder token; release is a
compare-and-delete on that token. The lock therefore:

- never blocks (one attempt, immediate answer),
- self-heals when a holder crashes (the lease expires),
- cannot be released by a slow holder whose lease already expired and was
  re-acquired by someone else.

Note: Does NOT inherit from DistributedLockProtocol (uses structural typing).
"""

import secrets
from dataclasses import replace

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.lock_lease import LockLease


class RedisDistributedLock:
    """Distributed lock keyed per logical resource.

    Attributes:
        _store: Cache store providing set_if_absent and compare_and_delete.
        _prefix: Lock key namespace, kept apart from data keys.
        _lease_ttl: Default lease in seconds.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        store: CacheStoreProtocol,
        logger: LoggerProtocol,
        prefix: str = "lock:",
        lease_ttl: float = 10.0,
    ) -> None:
        if not prefix:
            raise ValueError("Lock prefix must not be empty")
        if lease_ttl <= 0:
            raise ValueError("Lock lease must be positive")
        self._store = store
        self._logger = logger
        self._prefix = prefix
        self._lease_ttl = lease_ttl

    @property
    def prefix(self) -> str:
        """Lock key namespace."""
        return self._prefix

    def lock_key(self, resource_key: str) -> str:
        """Backend key holding the lock for ``resource_key``."""
        return f"{self._prefix}{resource_key}"

    async def try_acquire(
        self, resource_key: str, lease_ttl: float | None = None
    ) -> Result[LockLease | None, DomainError]:
        """Try once to take the lock.

        Args:
            resource_key: Logical resource to lock.
            lease_ttl: Lease in seconds (defaults to the lock's lease).

        Returns:
            Result with a LockLease if acquired, None if already held, or the
            store's CacheError re-coded as LOCK_ACQUIRE_FAILED.
        """
        lease = lease_ttl if lease_ttl is not None else self._lease_ttl
        lock_key = self.lock_key(resource_key)
        token = secrets.token_hex(16)

        result = await self._store.set_if_absent(lock_key, token, lease)
        match result:
            case Success(value=True):
                self._logger.debug(
                    "Lock acquired", lock_key=lock_key, lease_ttl=lease
                )
                return Success(
                    value=LockLease(
                        resource_key=resource_key,
                        lock_key=lock_key,
                        token=token,
                        lease_ttl=lease,
                    )
                )
            case Success():
                self._logger.debug("Lock busy", lock_key=lock_key)
                return Success(value=None)
            case Failure(error=error):
                return Failure(
                    error=replace(
                        error,
                        code=ErrorCode.LOCK_ACQUIRE_FAILED,
                        message=f"Failed to acquire lock '{lock_key}'",
                    )
                )

    async def release(self, lease: LockLease) -> Result[bool, DomainError]:
        """Release a lock if this lease still owns it.

        Returns:
            Result with True if released, False if the lease had expired, or
            the store's CacheError.
        """
        result = await self._store.compare_and_delete(lease.lock_key, lease.token)
        match result:
            case Success(value=True):
                self._logger.debug("Lock released", lock_key=lease.lock_key)
                return Success(value=True)
            case Success():
                self._logger.warning(
                    "Lock lease expired before release",
                    lock_key=lease.lock_key,
                    lease_ttl=lease.lease_ttl,
                )
                return Success(value=False)
            case Failure(error=error):
                self._logger.warning(
                    "Lock release failed",
                    lock_key=lease.lock_key,
                    error_code=error.code.value,
                )
                return Failure(error=error)
