# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the job scheduler."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.infrastructure.background.scheduler import (
    JobScheduler,
    start_scheduler,
    stop_scheduler,
)


class TestJobScheduler:
    """Tests for JobScheduler."""

    def test_rejects_non_positive_interval(self) -> None:
        scheduler = JobScheduler()

        with pytest.raises(ValueError, match="must be positive"):
            scheduler.add_interval_task("bad", AsyncMock(), seconds=0)

    @pytest.mark.asyncio
    async def test_execute_task_counts_runs(self) -> None:
        scheduler = JobScheduler()
        job = AsyncMock()
        task = scheduler.add_interval_task("job", job, seconds=60)

        await scheduler._execute_task(task.id)

        job.assert_awaited_once()
        assert task.run_count == 1
        assert task.error_count == 0
        assert task.last_run is not None

    @pytest.mark.asyncio
    async def test_failures_are_counted_not_raised(self) -> None:
        scheduler = JobScheduler()
        task = scheduler.add_interval_task(
            "flaky", AsyncMock(side_effect=RuntimeError("boom")), seconds=60
        )

        await scheduler._execute_task(task.id)

        assert task.run_count == 0
        assert task.error_count == 1
        assert scheduler.get_stats()["total_errors"] == 1

    @pytest.mark.asyncio
    async def test_unknown_task_is_ignored(self) -> None:
        await JobScheduler()._execute_task("missing")

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        scheduler = JobScheduler()

        await scheduler.start()
        scheduler.add_interval_task("job", AsyncMock(), seconds=60)
        assert scheduler.is_running is True
        assert scheduler.get_stats()["task_count"] == 1

        await scheduler.stop()
        assert scheduler.is_running is False
        assert scheduler.list_tasks() == []


class TestStartScheduler:
    @pytest.mark.asyncio
    async def test_registers_publication_job(self) -> None:
        settings = MagicMock()
        settings.scheduler.visibility_interval_seconds = 30

        scheduler = await start_scheduler(settings)
        try:
            (task,) = scheduler.list_tasks()
            assert task.name == "Publish Due Contents"
            assert task.interval_seconds == 30
        finally:
            await stop_scheduler()
