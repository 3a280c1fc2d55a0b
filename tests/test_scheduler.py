"""Tests for the asyncio scheduler."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from pybridgedevice.protocols import Scheduler
from pybridgedevice.scheduler import AsyncioScheduler


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler class."""

    def test_satisfies_protocol(self) -> None:
        """Test the scheduler satisfies the Scheduler protocol."""
        assert isinstance(AsyncioScheduler(), Scheduler)

    async def test_runs_after_delay(self) -> None:
        """Test a job runs only once its delay has elapsed."""
        scheduler = AsyncioScheduler()
        job = AsyncMock()

        task = scheduler.schedule(0.05, job)
        await asyncio.sleep(0.01)

        job.assert_not_awaited()
        assert scheduler.pending_count == 1

        await task

        job.assert_awaited_once()

    async def test_schedule_returns_immediately(self) -> None:
        """Test scheduling does not wait for the job."""
        scheduler = AsyncioScheduler()

        task = scheduler.schedule(10.0, AsyncMock())

        assert not task.done()
        await scheduler.shutdown()

    async def test_failing_job_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test an exception leaking from a job is logged, not raised."""
        scheduler = AsyncioScheduler()
        job = AsyncMock(side_effect=RuntimeError("boom"))

        task = scheduler.schedule(0, job)
        await task

        assert task.exception() is None
        assert "Scheduled job" in caplog.text
        assert "boom" in caplog.text

    async def test_finished_tasks_are_released(self) -> None:
        """Test finished jobs are no longer counted as pending."""
        scheduler = AsyncioScheduler()

        task = scheduler.schedule(0, AsyncMock())
        await task
        await asyncio.sleep(0)

        assert scheduler.pending_count == 0

    async def test_shutdown_cancels_pending(self) -> None:
        """Test shutdown cancels jobs that have not run yet."""
        scheduler = AsyncioScheduler()
        job = AsyncMock()

        task = scheduler.schedule(10.0, job)
        await scheduler.shutdown()

        assert task.cancelled()
        job.assert_not_awaited()

    async def test_task_names(self) -> None:
        """Test task names carry the scheduler name."""
        scheduler = AsyncioScheduler(name="kitchen")

        task = scheduler.schedule(10.0, AsyncMock())

        assert task.get_name().startswith("kitchen-job-")
        await scheduler.shutdown()

    async def test_task_names_unique_after_jobs_finish(self) -> None:
        """Test a finished job's name is never reused for a later job."""
        scheduler = AsyncioScheduler(name="kitchen")

        first = scheduler.schedule(0, AsyncMock())
        pending = scheduler.schedule(10.0, AsyncMock())
        await first
        assert scheduler.pending_count == 1
        third = scheduler.schedule(10.0, AsyncMock())

        names = {first.get_name(), pending.get_name(), third.get_name()}
        assert len(names) == 3
        await scheduler.shutdown()

    def test_schedule_without_loop_raises(self) -> None:
        """Test scheduling outside an event loop fails loudly."""
        with pytest.raises(RuntimeError):
            AsyncioScheduler().schedule(1.0, AsyncMock())
