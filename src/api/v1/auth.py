# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST / - Login with email and password
- DELETE / - Logout (clears the session cookie)
- POST /setPassword - Choose a password through an emailed link
- POST /passwordRecovery - Ask for a password recovery link

Example:
    POST /api/v1/auth
    {
        "email": "ana@school.edu",
        "password": "s3cretpass"
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from src.api.dependencies import get_auth_service
from src.api.middleware.rate_limit import RATE_LIMIT_AUTH, get_ip_only, limiter
from src.core.config import get_settings
from src.domains.auth.service import (
    AuthService,
    InvalidCredentialsError,
    InvalidPasswordTokenError,
    PasswordNotSecureError,
    PasswordsDoNotMatchError,
)
from src.models.auth import (
    LoginRequest,
    LoginResponse,
    PasswordRecoveryRequest,
    SetPasswordRequest,
)
from src.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=LoginResponse,
    summary="Login",
    description="Authenticate with email and password. The session token is "
    "returned in the body and set as an httpOnly cookie.",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Log a user in.

    Raises:
        HTTPException: 401 if the credentials are wrong.
    """
    try:
        result = await auth_service.login(str(data.email), data.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    jwt_settings = get_settings().jwt
    response.set_cookie(
        key=jwt_settings.cookie_name,
        value=result.access_token,
        max_age=result.expires_in,
        httponly=True,
        secure=jwt_settings.cookie_secure,
        samesite="lax",
    )
    return result


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Logout",
    description="Clear the session cookie.",
)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(get_settings().jwt.cookie_name)
    return MessageResponse(message="Logged out")


@router.post(
    "/setPassword",
    response_model=MessageResponse,
    summary="Set password",
    description="Choose a new password with the token of an emailed link.",
)
async def set_password(
    data: SetPasswordRequest,
    token: str = Query(min_length=1, description="Token from the emailed link"),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set the password of the account the link was issued for.

    Raises:
        HTTPException: 401 for a bad token, 400 for a rejected password.
    """
    try:
        await auth_service.set_password(token, data)
    except InvalidPasswordTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except (PasswordsDoNotMatchError, PasswordNotSecureError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MessageResponse(message="Password updated")


@router.post(
    "/passwordRecovery",
    response_model=MessageResponse,
    summary="Password recovery",
    description="Mail a recovery link. Answers the same whether or not the account exists.",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def password_recovery(
    request: Request,
    data: PasswordRecoveryRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.request_password_recovery(str(data.email))
    return MessageResponse(message="If the account exists, a recovery link has been sent")
