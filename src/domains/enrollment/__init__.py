# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package."""

from src.domains.enrollment.service import (
    CourseNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
    NotEnrolledError,
    StudentNotFoundError,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentServiceError",
    "CourseNotFoundError",
    "NotEnrolledError",
    "StudentNotFoundError",
]
