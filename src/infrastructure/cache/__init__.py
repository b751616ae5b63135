"""Cache infrastructure package.

Stampede-safe cache-aside over Redis. All dependencies are wired through
src.core.container.

Architecture:
- RedisCacheStore: Redis implementation of CacheStoreProtocol
- RedisDistributedLock: SET NX PX lease with token-checked release
- CacheClient: pass-through, mutex and logical-expire query strategies
- CacheMetrics: per-namespace hit/miss/rebuild counters
- PydanticSerializer: typed JSON (de)serialization
- Use src.core.container.get_cache_client() for dependency injection
"""

from src.infrastructure.cache.cache_client import CacheClient
from src.infrastructure.cache.cache_metrics import CacheMetrics, CacheStats
from src.infrastructure.cache.distributed_lock import RedisDistributedLock
from src.infrastructure.cache.redis_store import RedisCacheStore
from src.infrastructure.cache.serializers import PydanticSerializer, as_serializer

__all__ = [
    "CacheClient",
    "CacheMetrics",
    "CacheStats",
    "PydanticSerializer",
    "RedisCacheStore",
    "RedisDistributedLock",
    "as_serializer",
]
