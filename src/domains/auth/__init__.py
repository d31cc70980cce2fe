# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides authentication services:
- JWT token creation and validation
- Email and password login
- Password setup and recovery links
- Password hashing and generation

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    JWTManager: JWT token creation and validation.
    AuthService: Login and password management service.
"""

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from src.domains.auth.password import PasswordHasher, generate_password, is_secure_password
from src.domains.auth.service import (
    AuthenticationError,
    AuthService,
    InvalidCredentialsError,
    InvalidPasswordTokenError,
    PasswordNotSecureError,
    PasswordsDoNotMatchError,
)

__all__ = [
    "PasswordHasher",
    "generate_password",
    "is_secure_password",
    "JWTManager",
    "JWTError",
    "TokenExpiredError",
    "InvalidTokenError",
    "TokenPayload",
    "AuthService",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidPasswordTokenError",
    "PasswordsDoNotMatchError",
    "PasswordNotSecureError",
]
