# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process scheduler for periodic jobs.

Wraps APScheduler's AsyncIOScheduler so jobs run on the API event loop.
Each registered job is an async callable without arguments; failures are
counted and logged, and never stop the schedule.

Example:
    from src.infrastructure.background.scheduler import get_scheduler

    scheduler = get_scheduler()
    await scheduler.start()
    scheduler.add_interval_task(
        name="Publish Due Contents",
        func=run_publish_due_contents,
        seconds=60,
    )
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable
from uuid import uuid4

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.infrastructure.background.jobs import run_publish_due_contents

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Awaitable[Any]]


@dataclass
class ScheduledTask:
    """A registered periodic job.

    Attributes:
        name: Human-readable task name.
        func: Coroutine function run on each tick.
        interval_seconds: Seconds between runs.
        id: Unique task identifier.
        last_run: Last run timestamp.
        run_count: Total number of runs.
        error_count: Number of failed runs.
    """

    name: str
    func: JobFunc
    interval_seconds: int
    id: str = field(default_factory=lambda: str(uuid4()))
    last_run: datetime | None = None
    run_count: int = 0
    error_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "interval_seconds": self.interval_seconds,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "run_count": self.run_count,
            "error_count": self.error_count,
        }


class JobScheduler:
    """Interval scheduler on top of AsyncIOScheduler.

    Attributes:
        _scheduler: APScheduler instance, created on start.
        _tasks: Registered tasks by id.
        _running: Whether scheduler is running.
    """

    def __init__(self) -> None:
        self._scheduler: AsyncIOScheduler | None = None
        self._tasks: dict[str, ScheduledTask] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def add_interval_task(
        self,
        name: str,
        func: JobFunc,
        seconds: int,
        start_immediately: bool = False,
    ) -> ScheduledTask:
        """Register a job that runs every ``seconds``.

        Args:
            name: Task name.
            func: Coroutine function to run.
            seconds: Interval in seconds.
            start_immediately: Run once right away instead of after the first interval.

        Returns:
            Created ScheduledTask.

        Raises:
            ValueError: If the interval is not positive.
        """
        if seconds <= 0:
            raise ValueError(f"Interval must be positive, got {seconds}")

        task = ScheduledTask(name=name, func=func, interval_seconds=seconds)
        self._tasks[task.id] = task

        if self._scheduler:
            job_kwargs: dict[str, Any] = {}
            if start_immediately:
                # Passing next_run_time=None would add the job paused
                job_kwargs["next_run_time"] = datetime.now(timezone.utc)

            self._scheduler.add_job(
                self._execute_task,
                trigger=IntervalTrigger(seconds=seconds),
                args=[task.id],
                id=task.id,
                name=name,
                max_instances=1,
                coalesce=True,
                **job_kwargs,
            )

        logger.info("Added interval task: %s (every %ds)", name, seconds)
        return task

    async def _execute_task(self, task_id: str) -> None:
        task = self._tasks.get(task_id)
        if not task:
            return

        logger.debug("Executing scheduled task: %s", task.name)
        try:
            await task.func()
            task.run_count += 1
        except Exception as e:
            task.error_count += 1
            logger.error("Scheduled task %s failed: %s", task.name, str(e), exc_info=True)
        finally:
            task.last_run = datetime.now(timezone.utc)

    def list_tasks(self) -> list[ScheduledTask]:
        return list(self._tasks.values())

    async def start(self) -> None:
        """Start the scheduler on the running event loop."""
        if self._running:
            return

        self._scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self._scheduler.start()
        self._running = True
        logger.info("Job scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler without waiting for running jobs."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

        self._tasks.clear()
        self._running = False
        logger.info("Job scheduler stopped")

    def get_stats(self) -> dict[str, Any]:
        return {
            "is_running": self._running,
            "task_count": len(self._tasks),
            "total_runs": sum(t.run_count for t in self._tasks.values()),
            "total_errors": sum(t.error_count for t in self._tasks.values()),
            "tasks": [t.to_dict() for t in self._tasks.values()],
        }


_scheduler: JobScheduler | None = None


def get_scheduler() -> JobScheduler:
    """Get the singleton scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = JobScheduler()
    return _scheduler


async def start_scheduler(settings: "Settings") -> JobScheduler:
    """Start the scheduler and register the periodic jobs.

    Args:
        settings: Application settings.

    Returns:
        Started scheduler instance.
    """
    scheduler = get_scheduler()
    await scheduler.start()

    scheduler.add_interval_task(
        name="Publish Due Contents",
        func=run_publish_due_contents,
        seconds=settings.scheduler.visibility_interval_seconds,
    )

    return scheduler


async def stop_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        await _scheduler.stop()
        _scheduler = None
