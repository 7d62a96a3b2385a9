"""Fire-and-forget tasks that must not outlive the application silently."""

import asyncio
from collections.abc import Coroutine
from typing import Any

import logfire


class BackgroundTaskGroup:
    """Owns background cleanup tasks (e.g. self-healing of stale invites).

    Tasks are tracked until they finish so they are not garbage collected
    mid-flight, failures are logged, and shutdown can wait for them.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Schedule a coroutine on the running loop.

        Args:
            coro: Coroutine to run
            name: Task name for logging

        Returns:
            The scheduled task
        """
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logfire.warn("Background task cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logfire.warn(
                "Background task failed",
                task=task.get_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )

    async def drain(self) -> None:
        """Wait for every scheduled task, including ones spawned meanwhile."""
        while True:
            running = [task for task in self._tasks if not task.done()]
            if not running:
                return
            await asyncio.gather(*running, return_exceptions=True)
