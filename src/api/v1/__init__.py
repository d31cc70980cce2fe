# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Login, logout, password setup and recovery.
    users: User lookup, profile updates, enrollment removal, role changes.
    admins: Admin account creation.
    students: Student accounts, search, courses and learning profile.
    teachers: Teacher accounts and courses.
    directors: Director accounts and institute courses.
    institutes: Institute management.
    courses: Courses with their sections and content.
    contents: Reactions to content.
    learning_test: Learning style test.
    survey: Satisfaction surveys and their results.
"""

from fastapi import APIRouter

from src.api.v1 import (
    admins,
    auth,
    contents,
    courses,
    directors,
    institutes,
    learning_test,
    students,
    survey,
    teachers,
    users,
)

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(admins.router, prefix="/admins", tags=["Admins"])
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])
router.include_router(directors.router, prefix="/directors", tags=["Directors"])
router.include_router(institutes.router, prefix="/institutes", tags=["Institutes"])
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(contents.router, prefix="/contents", tags=["Contents"])
router.include_router(learning_test.router, prefix="/test", tags=["Learning Test"])
router.include_router(survey.router, prefix="/survey", tags=["Survey"])

__all__ = ["router"]
