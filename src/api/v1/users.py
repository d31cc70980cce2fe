# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User management API endpoints.

This module provides endpoints for user management:
- GET / - List users (admins: all, directors: their institute)
- GET /me - Get the calling user
- PATCH /me - Update email and names of the calling user
- GET /{user_id} - Get user details
- DELETE /{user_id}/courses/{course_id} - Remove a student from a course
- PATCH /{user_id}/role - Change the role of a user

Example:
    PATCH /api/v1/users/6f1c.../role
    {
        "newRole": "TEACHER"
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin_or_director, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.course.service import CourseAccessDeniedError, CourseService
from src.domains.course.service import CourseNotFoundError as CourseMissingError
from src.domains.enrollment.service import (
    CourseNotFoundError,
    NotEnrolledError,
    StudentNotFoundError,
)
from src.domains.user.role_transition import (
    InvalidTransitionError,
    PersistenceError,
    RoleRecordNotFoundError,
)
from src.domains.user.role_transition import UserNotFoundError as TransitionUserNotFoundError
from src.domains.user.service import UserAlreadyExistsError, UserNotFoundError, UserService
from src.infrastructure.database.models.user import Role
from src.models.common import MessageResponse
from src.models.user import ChangeRoleRequest, UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_service(db: AsyncSession) -> UserService:
    return UserService(db=db)


async def _ensure_same_institute(
    service: UserService,
    director_id: str,
    user_id: str,
    allow_unassigned: bool = False,
) -> None:
    """Directors may only act on users of their own institute.

    Unknown users answer 404. With allow_unassigned, a user without an
    institute (no role record, or an admin) passes so the caller can report
    the specific reason.
    """
    try:
        await service.get_user(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user_institute = await service.institute_of(user_id)
    if user_institute is None and allow_unassigned:
        return
    director_institute = await service.institute_of(director_id)
    if user_institute is None or user_institute != director_institute:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User belongs to another institute",
        )


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="List users, optionally by role. Directors only see their institute.",
)
async def list_users(
    role: Annotated[Role | None, Query(description="Filter by role")] = None,
    current_user: CurrentUser = Depends(require_admin_or_director),
    db: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    service = _get_user_service(db)

    institute_id = None
    if current_user.is_director:
        institute_id = await service.institute_of(current_user.id)
        if institute_id is None:
            return []

    return await service.list_users(role=role, institute_id=institute_id)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        return await _get_user_service(db).get_user(current_user.id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update current user",
    description="Update email, first name and last name of the calling user.",
)
async def update_me(
    data: UserUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the calling user's profile.

    Raises:
        HTTPException: 404 if the user vanished, 409 if the email is taken.
    """
    try:
        return await _get_user_service(db).update_profile(current_user.id, data)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
    description="Users can view themselves; admins anyone; directors their institute.",
)
async def get_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    service = _get_user_service(db)

    if user_id != current_user.id:
        if current_user.is_director:
            await _ensure_same_institute(service, current_user.id, user_id)
        elif not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cannot view other users' profiles",
            )

    try:
        return await service.get_user(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.delete(
    "/{user_id}/courses/{course_id}",
    response_model=MessageResponse,
    summary="Remove student from course",
    description="Unlink a student from a course on both sides. Allowed for admins, "
    "the director of the course's institute and the owning teacher.",
)
async def remove_from_course(
    user_id: str,
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Remove a student from a course.

    Raises:
        HTTPException: 403 without access to the course, 404 if the course or
            student is unknown or the student is not enrolled.
    """
    if current_user.is_student:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Students cannot manage enrollments",
        )

    try:
        await CourseService(db).get_accessible_course(course_id, current_user.id, current_user.role)
        await _get_user_service(db).remove_from_course(user_id, course_id)
    except (CourseMissingError, CourseNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    except CourseAccessDeniedError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No access to course")
    except StudentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    except NotEnrolledError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    logger.info("Student %s removed from course %s by %s", user_id, course_id, current_user.id)
    return MessageResponse(message="Student removed from course")


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Change role",
    description="Move a user between STUDENT, TEACHER and DIRECTOR. Student to "
    "teacher drops the enrollments; teacher to student or director deletes the "
    "teacher's courses. All or nothing.",
)
async def change_role(
    user_id: str,
    data: ChangeRoleRequest,
    current_user: CurrentUser = Depends(require_admin_or_director),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Change the role of a user.

    Raises:
        HTTPException: 400 for a transition that is not allowed, 404 for an
            unknown user, 409 when the role record is missing, 503 when the
            store fails.
    """
    service = _get_user_service(db)
    if current_user.is_director:
        await _ensure_same_institute(service, current_user.id, user_id, allow_unassigned=True)

    try:
        updated = await service.change_role(user_id, data.new_role)
    except TransitionUserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RoleRecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PersistenceError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Role change could not be saved",
        )

    logger.info("Role of %s changed to %s by %s", user_id, data.new_role.value, current_user.id)
    return updated
