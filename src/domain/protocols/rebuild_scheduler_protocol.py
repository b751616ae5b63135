"""Rebuild scheduler protocol."""

from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.value_objects.rebuild_task import RebuildTask


class RebuildSchedulerProtocol(Protocol):
    """Bounded background executor for cache rebuilds."""

    def submit(self, task: RebuildTask) -> Result[None, DomainError]:
        """Enqueue a rebuild without blocking the caller.

        Returns:
            Success when accepted, or Failure(CacheQueryError) with
            REBUILD_REJECTED when the pool is saturated or stopped. A rejected
            task never runs, so the caller still owns any lock it took.
        """
        ...
