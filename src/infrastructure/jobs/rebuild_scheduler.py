"""Bounded worker pool for asynchronous cache rebuilds.

RebuildScheduler runs RebuildTasks on a fixed number of worker tasks fed by a
bounded asyncio queue. It is constructed explicitly and injected into the
cache client; there is no process-wide pool.

Architecture:
- submit() never blocks: put_nowait on the bounded queue
- Saturation policy: reject and log (Failure(REBUILD_REJECTED)); rebuilds are
  best-effort and the next expired read will try again
- A failing task is caught, logged and counted; it never stops its worker
- Workers start lazily on the first submit (a running loop is required)

Usage:
    scheduler = RebuildScheduler(logger=logger, workers=10, queue_size=100)

    match scheduler.submit(RebuildTask(key=key, run=rebuild)):
        case Success():
            ...
        case Failure(error=error):
            # Rejected: caller still owns its lock
            ...

    await scheduler.stop()  # drain then cancel workers on shutdown
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.errors import CacheQueryError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.rebuild_task import RebuildTask


@dataclass(frozen=True, kw_only=True)
class RebuildSchedulerStats:
    """Snapshot of scheduler counters.

    Attributes:
        workers: Configured worker count.
        queue_size: Configured queue capacity.
        pending: Tasks accepted but not yet picked up by a worker.
        submitted: Tasks accepted since construction.
        rejected: Tasks refused (saturated or stopped).
        completed: Tasks that finished without raising.
        failed: Tasks that raised.
        running: Whether worker tasks are alive.
    """

    workers: int
    queue_size: int
    pending: int
    submitted: int
    rejected: int
    completed: int
    failed: int
    running: bool

    def to_dict(self) -> dict[str, Any]:  # noqa: PLW3201
        """Convert to dictionary for JSON serialization."""
        return {
            "workers": self.workers,
            "queue_size": self.queue_size,
            "pending": self.pending,
            "submitted": self.submitted,
            "rejected": self.rejected,
            "completed": self.completed,
            "failed": self.failed,
            "running": self.running,
        }


class RebuildScheduler:
    """Fixed-capacity asyncio worker pool.

    Note: Does NOT inherit from RebuildSchedulerProtocol (uses structural typing).

    Attributes:
        _workers_count: Number of worker tasks.
        _queue_size: Capacity of the pending-task queue.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        workers: int = 10,
        queue_size: int = 100,
    ) -> None:
        if workers <= 0:
            raise ValueError("workers must be greater than 0")
        if queue_size <= 0:
            raise ValueError("queue_size must be greater than 0")
        self._workers_count = workers
        self._queue_size = queue_size
        self._logger = logger
        self._queue: asyncio.Queue[RebuildTask] | None = None
        self._workers: list[asyncio.Task[None]] = []
        self._stopped = False
        self._submitted = 0
        self._rejected = 0
        self._completed = 0
        self._failed = 0

    @property
    def running(self) -> bool:
        """Whether worker tasks have been started and not stopped."""
        return bool(self._workers) and not self._stopped

    @property
    def stats(self) -> RebuildSchedulerStats:
        """Current counters."""
        return RebuildSchedulerStats(
            workers=self._workers_count,
            queue_size=self._queue_size,
            pending=self._queue.qsize() if self._queue is not None else 0,
            submitted=self._submitted,
            rejected=self._rejected,
            completed=self._completed,
            failed=self._failed,
            running=self.running,
        )

    def start(self) -> None:
        """Start the worker tasks on the running event loop.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        if self._workers:
            return
        asyncio.get_running_loop()
        self._stopped = False
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._workers = [
            asyncio.create_task(self._work(index), name=f"cache-rebuild-{index}")
            for index in range(self._workers_count)
        ]
        self._logger.info(
            "Rebuild scheduler started",
            workers=self._workers_count,
            queue_size=self._queue_size,
        )

    def submit(self, task: RebuildTask) -> Result[None, DomainError]:
        """Enqueue a rebuild without blocking.

        Args:
            task: Rebuild to run.

        Returns:
            Success when accepted, Failure(CacheQueryError) with
            REBUILD_REJECTED when saturated or stopped.
        """
        if self._stopped:
            return self._reject(task, reason="stopped")

        if not self._workers:
            try:
                self.start()
            except RuntimeError as e:
                self._logger.error(
                    "Rebuild scheduler could not start", error=e, key=task.key
                )
                return self._reject(task, reason="no_event_loop")

        assert self._queue is not None
        try:
            self._queue.put_nowait(task)
        except asyncio.QueueFull:
            return self._reject(task, reason="saturated")

        self._submitted += 1
        return Success(value=None)

    async def join(self) -> None:
        """Wait until every accepted task has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self, *, drain: bool = True) -> None:
        """Stop accepting tasks and shut the workers down.

        Args:
            drain: Wait for pending tasks first. When False, pending tasks
                are dropped; their locks free themselves when the lease ends.
        """
        self._stopped = True
        if self._queue is not None:
            if drain:
                await self._queue.join()
            else:
                dropped = 0
                while not self._queue.empty():
                    self._queue.get_nowait()
                    self._queue.task_done()
                    dropped += 1
                if dropped:
                    self._logger.warning(
                        "Pending rebuilds dropped on shutdown", dropped=dropped
                    )

        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self._queue = None
        self._logger.info("Rebuild scheduler stopped", drained=drain)

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    def _reject(self, task: RebuildTask, *, reason: str) -> Failure[DomainError]:
        self._rejected += 1
        self._logger.warning(
            "Rebuild rejected",
            key=task.key,
            reason=reason,
            queue_size=self._queue_size,
        )
        return Failure(
            error=CacheQueryError(
                code=ErrorCode.REBUILD_REJECTED,
                message=f"Rebuild of '{task.key}' rejected ({reason})",
                key=task.key,
                details={"reason": reason},
            )
        )

    async def _work(self, index: int) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            task = await queue.get()
            try:
                await task.run()
                self._completed += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._failed += 1
                self._logger.error(
                    "Rebuild task failed", error=e, key=task.key, worker=index
                )
            finally:
                queue.task_done()
