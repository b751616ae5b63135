"""Rebuild task value object."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RebuildTask:
    """Asynchronous cache rebuild handed to the rebuild scheduler.

    The scheduler owns the task from submission to completion. ``run`` must
    release whatever lock it holds on every exit path; the scheduler only
    guarantees that a failing task does not affect other tasks.

    Attributes:
        key: Data key being rebuilt (used for logging and metrics).
        run: Zero-argument coroutine function performing the rebuild.
    """

    key: str
    run: Callable[[], Awaitable[None]]
