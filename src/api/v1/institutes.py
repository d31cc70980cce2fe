# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institute endpoints.

- POST / - Create an institute
- GET / - List institutes
- GET /{institute_id} - Get an institute
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.institute.service import (
    InstituteAlreadyExistsError,
    InstituteNotFoundError,
    InstituteService,
)
from src.models.institute import InstituteCreateRequest, InstituteResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=InstituteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create institute",
)
async def create_institute(
    data: InstituteCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> InstituteResponse:
    try:
        return await InstituteService(db).create_institute(data)
    except InstituteAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "",
    response_model=list[InstituteResponse],
    summary="List institutes",
)
async def list_institutes(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[InstituteResponse]:
    return await InstituteService(db).list_institutes()


@router.get(
    "/{institute_id}",
    response_model=InstituteResponse,
    summary="Get institute",
)
async def get_institute(
    institute_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> InstituteResponse:
    try:
        return await InstituteService(db).get_institute(institute_id)
    except InstituteNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Institute not found")
