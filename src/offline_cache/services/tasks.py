"""Completion tracking for background work.

Every branch that outlives the response it belongs to (stale-while-revalidate
refreshes, sync replays) is handed to ``TaskTracker.wait_until`` so it stays
referenced until it settles and can be drained on shutdown.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from offline_cache.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TaskTracker:
    """Keeps background tasks alive until they settle."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def wait_until(self, coro: Coroutine[Any, Any, T], name: str | None = None) -> "asyncio.Task[T]":
        """Schedule a coroutine and keep it referenced until it completes.

        Args:
            coro: The work to run
            name: Optional task name, used in log lines

        Returns:
            The scheduled task; callers may still await it
        """
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task %s failed: %s", task.get_name(), exc)

    @property
    def pending(self) -> int:
        """Number of tasks that have not settled yet."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every outstanding task, including ones scheduled meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
