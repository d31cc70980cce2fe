# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, section and content endpoints.

This module provides endpoints for courses and what they contain:
- POST / - Create a course (teacher)
- GET /{course_id} - Get a course
- DELETE /{course_id} - Delete an owned course with its sections and content
- POST /{course_id}/sections - Add a section
- GET /{course_id}/sections/{section_id} - Get a section with its content
- PATCH /{course_id}/sections/{section_id} - Update a section
- DELETE /{course_id}/sections/{section_id} - Delete a section and its content
- POST /{course_id}/sections/{section_id}/contents - Add content to a section

Access: admins see every course, teachers their own, students the courses
they are enrolled in and directors the courses of their institute. Only the
owning teacher changes a course.

Example:
    POST /api/v1/courses
    {
        "title": "Matemática I",
        "studentEmails": ["ana@school.edu", "luis@school.edu"]
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth, require_teacher
from src.api.middleware.auth import CurrentUser
from src.domains.content.service import ContentService
from src.domains.course.service import (
    CourseAccessDeniedError,
    CourseNotFoundError,
    CourseService,
    TeacherNotFoundError,
)
from src.domains.section.service import SectionNotFoundError, SectionService
from src.models.common import MessageResponse
from src.models.course import (
    ContentCreateRequest,
    ContentResponse,
    CourseCreatedResponse,
    CourseCreateRequest,
    CourseResponse,
    SectionCreateRequest,
    SectionDetailResponse,
    SectionResponse,
    SectionUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _course_http_error(error: Exception) -> HTTPException:
    if isinstance(error, CourseNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    if isinstance(error, SectionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))


# =========================================================================
# Courses
# =========================================================================


@router.post(
    "",
    response_model=CourseCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Create a course owned by the calling teacher and enroll the "
    "students listed by email. Emails that match no student are returned in "
    "notEnrolled.",
)
async def create_course(
    data: CourseCreateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> CourseCreatedResponse:
    try:
        return await CourseService(db).create_course(current_user.id, data)
    except TeacherNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Teacher record not found",
        )


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course",
)
async def get_course(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    try:
        return await CourseService(db).get_course(course_id, current_user.id, current_user.role)
    except (CourseNotFoundError, CourseAccessDeniedError) as e:
        raise _course_http_error(e)


@router.delete(
    "/{course_id}",
    response_model=MessageResponse,
    summary="Delete course",
    description="Delete an owned course with its sections and content, and "
    "unlink it from its students.",
)
async def delete_course(
    course_id: str,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await CourseService(db).delete_course(course_id, current_user.id)
    except (CourseNotFoundError, CourseAccessDeniedError) as e:
        raise _course_http_error(e)
    return MessageResponse(message="Course deleted")


# =========================================================================
# Sections
# =========================================================================


@router.post(
    "/{course_id}/sections",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create section",
)
async def create_section(
    course_id: str,
    data: SectionCreateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    try:
        return await SectionService(db).create_section(course_id, current_user.id, data)
    except (CourseNotFoundError, CourseAccessDeniedError) as e:
        raise _course_http_error(e)


@router.get(
    "/{course_id}/sections/{section_id}",
    response_model=SectionDetailResponse,
    summary="Get section",
    description="Section with its content. Students only see visible content.",
)
async def get_section(
    course_id: str,
    section_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SectionDetailResponse:
    try:
        return await SectionService(db).get_section(
            course_id, section_id, current_user.id, current_user.role
        )
    except (CourseNotFoundError, CourseAccessDeniedError, SectionNotFoundError) as e:
        raise _course_http_error(e)


@router.patch(
    "/{course_id}/sections/{section_id}",
    response_model=SectionResponse,
    summary="Update section",
)
async def update_section(
    course_id: str,
    section_id: str,
    data: SectionUpdateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    try:
        return await SectionService(db).update_section(
            course_id, section_id, current_user.id, data
        )
    except (CourseNotFoundError, CourseAccessDeniedError, SectionNotFoundError) as e:
        raise _course_http_error(e)


@router.delete(
    "/{course_id}/sections/{section_id}",
    response_model=MessageResponse,
    summary="Delete section",
    description="Delete a section and all of its content.",
)
async def delete_section(
    course_id: str,
    section_id: str,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await SectionService(db).delete_section(course_id, section_id, current_user.id)
    except (CourseNotFoundError, CourseAccessDeniedError, SectionNotFoundError) as e:
        raise _course_http_error(e)
    return MessageResponse(message="Section deleted")


# =========================================================================
# Contents
# =========================================================================


@router.post(
    "/{course_id}/sections/{section_id}/contents",
    response_model=ContentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create content",
    description="AUTOMATIC content is published at once. DEFERRED content is "
    "published by the scheduler once its publication date is reached.",
)
async def create_content(
    course_id: str,
    section_id: str,
    data: ContentCreateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ContentResponse:
    try:
        return await ContentService(db).create_content(
            course_id, section_id, current_user.id, data
        )
    except (CourseNotFoundError, CourseAccessDeniedError, SectionNotFoundError) as e:
        raise _course_http_error(e)
