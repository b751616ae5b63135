"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from src.domain.protocols import CacheStoreProtocol, DistributedLockProtocol
"""

from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.distributed_lock_protocol import DistributedLockProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rebuild_scheduler_protocol import RebuildSchedulerProtocol
from src.domain.protocols.serializer_protocol import SerializerProtocol

__all__ = [
    "CacheStoreProtocol",
    "DistributedLockProtocol",
    "LoggerProtocol",
    "RebuildSchedulerProtocol",
    "SerializerProtocol",
]
