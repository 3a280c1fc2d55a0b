"""Delayed background job scheduling on the asyncio event loop."""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_LOGGER = logging.getLogger(__name__)


class AsyncioScheduler:
    """Run one-shot jobs after a delay as background tasks.

    Jobs run on the event loop that was running when they were scheduled.
    The scheduler keeps a reference to every pending task until it finishes
    and logs anything a job leaks, so a crashed job never disappears silently.

    Example:
        ```python
        scheduler = AsyncioScheduler()
        scheduler.schedule(2.0, initializer)

        # On host shutdown
        await scheduler.shutdown()
        ```
    """

    def __init__(self, name: str = "pybridgedevice") -> None:
        """Initialize the scheduler.

        Args:
            name: Prefix for task names, shown in asyncio debug output.
        """
        self._name = name
        self._tasks: set[asyncio.Task[None]] = set()
        self._job_ids = itertools.count()

    @property
    def pending_count(self) -> int:
        """Get number of jobs not yet finished."""
        return len(self._tasks)

    def schedule(self, delay: float, job: Callable[[], Awaitable[None]]) -> asyncio.Task[None]:
        """Schedule job to run once after delay seconds.

        Args:
            delay: Seconds to wait before running the job.
            job: Zero-argument callable returning an awaitable.

        Returns:
            The background task wrapping the delayed job.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self._run_later(delay, job),
            name=f"{self._name}-job-{next(self._job_ids)}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        _LOGGER.debug("Scheduled %s in %.3fs", task.get_name(), delay)
        return task

    async def _run_later(self, delay: float, job: Callable[[], Awaitable[None]]) -> None:
        """Sleep, then run the job, logging any exception it raises."""
        await asyncio.sleep(delay)
        try:
            await job()
        except asyncio.CancelledError:
            raise
        except Exception:
            _LOGGER.exception("Scheduled job %r failed", job)

    async def shutdown(self) -> None:
        """Cancel all pending jobs and wait for them to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        _LOGGER.debug("Scheduler shutdown complete (%d jobs cancelled)", len(tasks))
