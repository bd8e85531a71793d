"""Detached (fire-and-forget) background tasks.

Sample data population and usage telemetry run next to the main pipeline
without being awaited by it. Their failures are logged at debug level and
dropped; they never reach the command's exit path.

Completion is unordered relative to later pipeline steps and to process
exit: commands call ``settle()`` before closing the HTTP client, which waits
at most a grace period and cancels whatever is still pending.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_GRACE_PERIOD = 10.0


class DetachedTasks:
    """Holds references to detached tasks so they are not garbage collected."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of detached tasks still running."""
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        """Start ``coro`` in the background with log-and-drop error handling.

        Must be called from inside a running event loop.

        Args:
            coro: Coroutine to run
            name: Task name used in log lines

        Returns:
            The spawned task (callers are not expected to await it)
        """
        task = asyncio.create_task(self._guard(coro, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("detached_task_spawned", task=name)
        return task

    async def _guard(self, coro: Coroutine[Any, Any, Any], name: str) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            logger.debug("detached_task_cancelled", task=name)
            raise
        except Exception as e:
            logger.debug("detached_task_failed", task=name, error=str(e))
        else:
            logger.debug("detached_task_finished", task=name)

    async def settle(self, timeout: float = DEFAULT_GRACE_PERIOD) -> None:
        """Give pending tasks up to ``timeout`` seconds, then cancel the rest."""
        if not self._tasks:
            return

        pending = set(self._tasks)
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            logger.debug("detached_tasks_abandoned", count=len(still_pending))
            await asyncio.gather(*still_pending, return_exceptions=True)
