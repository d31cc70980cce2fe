# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP translation of errors shared by several routers."""

from fastapi import HTTPException, status

from src.domains.institute.service import InstituteNotFoundError
from src.domains.registration.service import (
    EmailAlreadyRegisteredError,
    InstituteMismatchError,
    InstituteRequiredError,
    RegistrationError,
)


def registration_http_error(error: RegistrationError | InstituteNotFoundError) -> HTTPException:
    """Map an account creation failure to its HTTP answer."""
    if isinstance(error, EmailAlreadyRegisteredError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, InstituteNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Institute not found")
    if isinstance(error, InstituteMismatchError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, InstituteRequiredError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
