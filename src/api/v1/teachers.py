# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher endpoints.

- POST / - Create a teacher account
- GET /me/courses - Courses owned by the calling teacher
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import (
    get_db,
    get_registration_service,
    require_admin_or_director,
    require_teacher,
)
from src.api.errors import registration_http_error
from src.api.middleware.auth import CurrentUser
from src.domains.course.service import CourseService
from src.domains.institute.service import InstituteNotFoundError
from src.domains.registration.service import RegistrationError, RegistrationService
from src.models.course import CourseResponse
from src.models.user import AccountCreatedResponse, AccountCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create teacher",
    description="Create a teacher account. Directors create into their own institute.",
)
async def create_teacher(
    data: AccountCreateRequest,
    current_user: CurrentUser = Depends(require_admin_or_director),
    service: RegistrationService = Depends(get_registration_service),
) -> AccountCreatedResponse:
    logger.info("Creating teacher: email=%s, by=%s", data.email, current_user.id)
    try:
        return await service.create_teacher(data, current_user.id, current_user.role)
    except (RegistrationError, InstituteNotFoundError) as e:
        raise registration_http_error(e)


@router.get(
    "/me/courses",
    response_model=list[CourseResponse],
    summary="My courses",
    description="Courses owned by the calling teacher.",
)
async def my_courses(
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    return await CourseService(db).list_teacher_courses(current_user.id)
