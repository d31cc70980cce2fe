# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student endpoints.

This module provides endpoints for students:
- POST / - Create a student account
- POST /bulk - Create several student accounts in one transaction
- GET / - Search students
- GET /me/courses - Courses of the calling student
- GET /{user_id}/learning-profile - Stored learning profile of a student
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import (
    get_db,
    get_registration_service,
    require_admin_or_director,
    require_auth,
    require_student,
)
from src.api.errors import registration_http_error
from src.api.middleware.auth import CurrentUser
from src.domains.course.service import CourseService
from src.domains.institute.service import InstituteNotFoundError
from src.domains.registration.service import RegistrationError, RegistrationService
from src.domains.student.service import StudentNotFoundError, StudentService, StudentSummary
from src.models.course import CourseResponse
from src.models.learning_test import LearningProfile, LearningProfileResponse
from src.models.user import AccountCreatedResponse, AccountCreateRequest, BulkAccountCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
    description="Create a student account. Directors create into their own institute.",
)
async def create_student(
    data: AccountCreateRequest,
    current_user: CurrentUser = Depends(require_admin_or_director),
    service: RegistrationService = Depends(get_registration_service),
) -> AccountCreatedResponse:
    logger.info("Creating student: email=%s, by=%s", data.email, current_user.id)
    try:
        (created,) = await service.create_students([data], current_user.id, current_user.role)
    except (RegistrationError, InstituteNotFoundError) as e:
        raise registration_http_error(e)
    return created


@router.post(
    "/bulk",
    response_model=list[AccountCreatedResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create students in bulk",
    description="Create several student accounts. Either all are created or none.",
)
async def create_students_bulk(
    data: BulkAccountCreateRequest,
    current_user: CurrentUser = Depends(require_admin_or_director),
    service: RegistrationService = Depends(get_registration_service),
) -> list[AccountCreatedResponse]:
    logger.info("Creating %d students, by=%s", len(data.accounts), current_user.id)
    try:
        return await service.create_students(data.accounts, current_user.id, current_user.role)
    except (RegistrationError, InstituteNotFoundError) as e:
        raise registration_http_error(e)


@router.get(
    "",
    response_model=list[StudentSummary],
    summary="Search students",
    description="Every filter given must match. Teachers only see students of "
    "their own courses; directors only students of their institute.",
)
async def find_students(
    course_id: Annotated[str | None, Query(alias="courseId")] = None,
    student_user_id: Annotated[str | None, Query(alias="studentUserId")] = None,
    learning_profile: Annotated[LearningProfile | None, Query(alias="learningProfile")] = None,
    teacher_user_id: Annotated[str | None, Query(alias="teacherUserId")] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[StudentSummary]:
    if current_user.is_student:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Students cannot search students",
        )

    return await StudentService(db).find_students(
        caller_id=current_user.id,
        caller_role=current_user.role,
        course_id=course_id,
        student_user_id=student_user_id,
        learning_profile=learning_profile,
        teacher_user_id=teacher_user_id,
    )


@router.get(
    "/me/courses",
    response_model=list[CourseResponse],
    summary="My courses",
    description="Courses the calling student is enrolled in.",
)
async def my_courses(
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    return await CourseService(db).list_student_courses(current_user.id)


@router.get(
    "/{user_id}/learning-profile",
    response_model=LearningProfileResponse,
    summary="Learning profile",
    description="Profile computed from the student's last learning style test.",
)
async def get_learning_profile(
    user_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> LearningProfileResponse:
    """Read a student's learning profile. Students can only read their own.

    Raises:
        HTTPException: 403 for another student's profile, 404 if the user is
            not a student.
    """
    if current_user.is_student and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot view other students' profiles",
        )

    try:
        return await StudentService(db).get_learning_profile(user_id)
    except StudentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
