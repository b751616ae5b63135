"""Background jobs infrastructure package.

Runs logical-expiry cache rebuilds off the request path.

Architecture:
- RebuildScheduler: bounded asyncio worker pool (reject-and-log when full)
- One scheduler per process, created by the container and injected into
  the cache client

Usage:
    from src.core.container import get_rebuild_scheduler

    scheduler = get_rebuild_scheduler()
    print(scheduler.stats.to_dict())
"""

from src.infrastructure.jobs.rebuild_scheduler import (
    RebuildScheduler,
    RebuildSchedulerStats,
)

__all__ = ["RebuildScheduler", "RebuildSchedulerStats"]
