"""Cache query error types.

Returned (inside Failure) by the cache-aside query strategies when a request
cannot produce a definite answer.

Usage:
    from src.domain.errors import LoadError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=LoadError(
        code=ErrorCode.LOAD_FAILED,
        message="System of record lookup failed",
        key="cache:shop:1",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheQueryError(DomainError):
    """A cache-aside query could not be completed.

    Also used for coordination failures that are not backend outages, such
    as a rebuild rejected by a saturated scheduler.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        key: Data key the query was serving.
        details: Additional context.
    """

    key: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class LoadError(CacheQueryError):
    """The system-of-record loader raised while rebuilding a key.

    Only surfaced by the synchronous strategies (pass-through, mutex).
    Background rebuilds log the failure and keep serving the stale entry.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class LockContentionError(CacheQueryError):
    """The mutex strategy ran out of lock attempts.

    Attributes:
        attempts: Number of lock attempts made before giving up.
    """

    attempts: int = 0
