"""Domain value objects.

Immutable value objects describing cache payloads, lock leases and rebuild
work items.
"""

from src.domain.value_objects.cache_entry import (
    NULL_MARKER,
    LogicalExpiryEntry,
    is_null_marker,
)
from src.domain.value_objects.lock_lease import LockLease
from src.domain.value_objects.rebuild_task import RebuildTask

__all__ = [
    "NULL_MARKER",
    "LockLease",
    "LogicalExpiryEntry",
    "RebuildTask",
    "is_null_marker",
]
