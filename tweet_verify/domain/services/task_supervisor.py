"""Supervisor for fact-check pipelines that outlive their HTTP request."""

import asyncio
import logging
from typing import Awaitable, Dict, Optional

logger = logging.getLogger(__name__)


class BackgroundTaskSupervisor:
    """Tracks detached background tasks until they finish.

    The hosting application drains the supervisor on shutdown so accepted
    requests are not dropped while their pipeline is still running.
    """

    def __init__(self):
        """Initialize an empty supervisor."""
        self._tasks: Dict[str, asyncio.Task] = {}

    def submit(self, coro: Awaitable[None], name: str) -> asyncio.Task:
        """Schedule ``coro`` on the running loop and track it under ``name``.

        Args:
            coro: Coroutine to run
            name: Task name, usually the request id

        Returns:
            The created task
        """
        task = asyncio.create_task(coro, name=name)
        self._tasks[name] = task
        task.add_done_callback(lambda t: self._on_done(name, t))
        logger.debug(f"🧵 Background task submitted: {name} ({len(self._tasks)} pending)")
        return task

    def _on_done(self, name: str, task: asyncio.Task) -> None:
        if self._tasks.get(name) is task:
            del self._tasks[name]
        if task.cancelled():
            logger.warning(f"⚠️ Background task cancelled: {name}")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"❌ Background task {name} crashed: {exc!r}", exc_info=exc)

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def is_running(self, name: str) -> bool:
        """Check if a task with ``name`` is still in flight."""
        return name in self._tasks

    async def wait_all(self, timeout: Optional[float] = None) -> bool:
        """Wait for all tracked tasks.

        Args:
            timeout: Maximum seconds to wait, None waits forever

        Returns:
            True if every task finished within the timeout
        """
        tasks = list(self._tasks.values())
        if not tasks:
            return True
        logger.info(f"⏳ Waiting for {len(tasks)} background task(s)")
        done, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            logger.warning(f"⚠️ {len(pending)} background task(s) still running after {timeout}s")
        return not pending

    async def cancel_all(self) -> None:
        """Cancel every tracked task and wait for the cancellations."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"🛑 Cancelled {len(tasks)} background task(s)")
