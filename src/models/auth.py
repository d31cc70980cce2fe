# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication schemas."""

from pydantic import EmailStr, Field

from src.models.common import CamelModel
from src.models.user import UserResponse


class LoginRequest(CamelModel):
    """Email and password login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(CamelModel):
    """Session token plus what the client needs to route the user."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    requires_survey: bool
    user: UserResponse


class SetPasswordRequest(CamelModel):
    """Password chosen through an emailed link."""

    email: EmailStr
    new_password: str = Field(max_length=128)
    new_password_confirmation: str = Field(max_length=128)


class PasswordRecoveryRequest(CamelModel):
    """Ask for a password recovery link."""

    email: EmailStr
