"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Cache backend errors (CACHE_*)
- Payload errors (SERIALIZATION_*)
- System-of-record errors (LOAD_*)
- Coordination errors (LOCK_*, REBUILD_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Cache backend errors
    CACHE_UNAVAILABLE = "cache_unavailable"
    CACHE_READ_FAILED = "cache_read_failed"
    CACHE_WRITE_FAILED = "cache_write_failed"

    # Payload errors
    SERIALIZATION_FAILED = "serialization_failed"

    # System-of-record errors
    LOAD_FAILED = "load_failed"

    # Coordination errors
    LOCK_ACQUIRE_FAILED = "lock_acquire_failed"
    LOCK_WAIT_EXHAUSTED = "lock_wait_exhausted"
    REBUILD_REJECTED = "rebuild_rejected"
