# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Director endpoints.

- POST / - Create a director account for an institute
- GET / - List directors
- GET /courses - Courses of the teachers of the calling director's institute
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import (
    get_db,
    get_registration_service,
    require_admin,
    require_admin_or_director,
    require_director,
)
from src.api.errors import registration_http_error
from src.api.middleware.auth import CurrentUser
from src.domains.director.service import DirectorNotFoundError, DirectorService, DirectorSummary
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
    summary="Create director",
    description="Create a director account. The institute is required.",
)
async def create_director(
    data: AccountCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: RegistrationService = Depends(get_registration_service),
) -> AccountCreatedResponse:
    logger.info("Creating director: email=%s, by=%s", data.email, current_user.id)
    try:
        return await service.create_director(data)
    except (RegistrationError, InstituteNotFoundError) as e:
        raise registration_http_error(e)


@router.get(
    "",
    response_model=list[DirectorSummary],
    summary="List directors",
    description="Admins see every director; directors those of their institute.",
)
async def list_directors(
    current_user: CurrentUser = Depends(require_admin_or_director),
    db: AsyncSession = Depends(get_db),
) -> list[DirectorSummary]:
    try:
        return await DirectorService(db).list_directors(current_user.id, current_user.role)
    except DirectorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Director not found")


@router.get(
    "/courses",
    response_model=list[CourseResponse],
    summary="Institute courses",
    description="Courses owned by the teachers of the calling director's institute.",
)
async def institute_courses(
    current_user: CurrentUser = Depends(require_director),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    try:
        return await DirectorService(db).list_institute_courses(current_user.id)
    except DirectorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Director not found")
