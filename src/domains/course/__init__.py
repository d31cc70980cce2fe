# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain package."""

from src.domains.course.service import (
    CourseAccessDeniedError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
    TeacherNotFoundError,
)

__all__ = [
    "CourseService",
    "CourseServiceError",
    "CourseNotFoundError",
    "CourseAccessDeniedError",
    "TeacherNotFoundError",
]
