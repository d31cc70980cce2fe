# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background processing.

- scheduler: APScheduler wrapper running jobs on the API event loop
- jobs: the periodic jobs themselves
"""

from src.infrastructure.background.jobs import publish_due_contents, run_publish_due_contents
from src.infrastructure.background.scheduler import (
    JobScheduler,
    ScheduledTask,
    get_scheduler,
    start_scheduler,
    stop_scheduler,
)

__all__ = [
    "JobScheduler",
    "ScheduledTask",
    "get_scheduler",
    "publish_due_contents",
    "run_publish_due_contents",
    "start_scheduler",
    "stop_scheduler",
]
