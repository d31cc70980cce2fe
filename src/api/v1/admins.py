# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admin account endpoints.

- POST / - Create an admin account
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_registration_service, require_admin
from src.api.errors import registration_http_error
from src.api.middleware.auth import CurrentUser
from src.domains.institute.service import InstituteNotFoundError
from src.domains.registration.service import RegistrationError, RegistrationService
from src.models.user import AccountCreatedResponse, AccountCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create admin",
    description="Create an admin account. The credentials are emailed.",
)
async def create_admin(
    data: AccountCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: RegistrationService = Depends(get_registration_service),
) -> AccountCreatedResponse:
    logger.info("Creating admin: email=%s, by=%s", data.email, current_user.id)
    try:
        return await service.create_admin(data)
    except (RegistrationError, InstituteNotFoundError) as e:
        raise registration_http_error(e)
