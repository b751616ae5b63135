"""Container module - Centralized dependency injection.

Re-exports every factory so callers import from one place:

    from src.core.container import get_cache_client, get_logger

The container is organized into modules by concern:
- infrastructure: Logger and Redis connection pool
- cache: Cache store, distributed lock, rebuild scheduler, metrics, client
"""

# Infrastructure services
from src.core.container.infrastructure import get_logger, get_redis_client

# Cache-aside components
from src.core.container.cache import (
    get_cache_client,
    get_cache_metrics,
    get_cache_store,
    get_distributed_lock,
    get_rebuild_scheduler,
)

__all__ = [
    # Infrastructure
    "get_logger",
    "get_redis_client",
    # Cache
    "get_cache_client",
    "get_cache_metrics",
    "get_cache_store",
    "get_distributed_lock",
    "get_rebuild_scheduler",
]
