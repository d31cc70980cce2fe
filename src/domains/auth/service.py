# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for email and password sessions.

This module provides the main AuthService that orchestrates:
- Login with email and password, issuing the session token
- First-login password setup through an emailed link
- Password recovery through a short-lived emailed link

Example:
    >>> auth_service = AuthService(db_session, jwt_manager, mailer, settings.jwt)
    >>> result = await auth_service.login("ana@school.edu", "s3cretpass")
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import JWTSettings
from src.domains.auth.jwt import InvalidTokenError, JWTManager, TokenExpiredError
from src.domains.auth.password import PasswordHasher, is_secure_password, password_fingerprint
from src.infrastructure.database.models.user import User
from src.infrastructure.notifications.mailer import MailDeliveryError, Mailer
from src.infrastructure.notifications.templates import (
    EmailContent,
    password_recovery_email,
    set_password_email,
)
from src.models.auth import LoginResponse, SetPasswordRequest
from src.models.user import UserResponse

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when the email is unknown or the password is wrong."""

    pass


class InvalidPasswordTokenError(AuthenticationError):
    """Raised when a set-password link is expired, forged or for another account."""

    pass


class PasswordsDoNotMatchError(AuthenticationError):
    """Raised when the password and its confirmation differ."""

    pass


class PasswordNotSecureError(AuthenticationError):
    """Raised when a new password is too weak."""

    pass


class AuthService:
    """Authentication service.

    Attributes:
        _db: Database session for queries.
        _jwt_manager: JWT token manager.
        _mailer: Sends set-password and recovery links.
        _settings: Token lifetimes.
        _hasher: Password hasher.
        _public_url: Base URL of the links sent by email.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        mailer: Mailer,
        settings: JWTSettings,
        password_hasher: PasswordHasher | None = None,
        public_url: str = "",
    ) -> None:
        self._db = db
        self._jwt_manager = jwt_manager
        self._mailer = mailer
        self._settings = settings
        self._hasher = password_hasher or PasswordHasher()
        self._public_url = public_url.rstrip("/")

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate a user and issue a session token.

        Users that still carry the temporary password receive a link to
        choose their own; the login itself succeeds either way.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password wrong.
        """
        user = await self._get_by_email(email)
        if user is None or not self._hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise InvalidCredentialsError("Invalid credentials")

        access_token = self._jwt_manager.create_access_token(
            user_id=user.id,
            role=user.role,
            email=user.email,
        )

        if user.force_password_reset:
            link = self._password_link(user, self._settings.password_set_expire_minutes)
            await self._send(user, set_password_email(user.first_name, link))

        logger.info("User logged in: %s (%s)", user.id, user.role)

        return LoginResponse(
            access_token=access_token,
            expires_in=self._jwt_manager.access_token_ttl_seconds,
            requires_survey=user.requires_survey,
            user=UserResponse.model_validate(user),
        )

    async def set_password(self, token: str, request: SetPasswordRequest) -> None:
        """Replace the password of the account a link was issued for.

        Raises:
            InvalidPasswordTokenError: If the token is invalid, expired or
                bound to another email, or was already used.
            PasswordsDoNotMatchError: If the confirmation differs.
            PasswordNotSecureError: If the password is too weak.
        """
        try:
            payload = self._jwt_manager.decode_token(token, expected_type="password")
        except (TokenExpiredError, InvalidTokenError) as e:
            raise InvalidPasswordTokenError(str(e)) from e

        email = str(request.email).lower()
        if payload.email.lower() != email:
            raise InvalidPasswordTokenError("Token was issued for another account")

        if request.new_password != request.new_password_confirmation:
            raise PasswordsDoNotMatchError("Passwords do not match")
        if not is_secure_password(request.new_password):
            raise PasswordNotSecureError(
                "Password must have at least 8 characters including a letter and a digit"
            )

        user = await self._db.get(User, payload.sub)
        if user is None or user.email != email:
            raise InvalidPasswordTokenError("Token was issued for another account")
        if payload.pwd != password_fingerprint(user.password_hash):
            raise InvalidPasswordTokenError("Token was already used")

        user.password_hash = self._hasher.hash(request.new_password)
        user.force_password_reset = False
        await self._db.commit()

        logger.info("Password set for user %s", user.id)

    async def request_password_recovery(self, email: str) -> None:
        """Mail a recovery link when the account exists.

        Unknown emails are ignored silently so callers cannot enumerate accounts.
        """
        user = await self._get_by_email(email)
        if user is None:
            logger.info("Password recovery requested for unknown email")
            return

        minutes = self._settings.password_recovery_expire_minutes
        link = self._password_link(user, minutes)
        await self._send(user, password_recovery_email(user.first_name, link, minutes))

        logger.info("Password recovery link issued for user %s", user.id)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_by_email(self, email: str) -> User | None:
        result = await self._db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    def _password_link(self, user: User, expires_minutes: int) -> str:
        token = self._jwt_manager.create_password_token(
            user.id,
            user.email,
            expires_minutes,
            fingerprint=password_fingerprint(user.password_hash),
        )
        return f"{self._public_url}/set-password?token={token}"

    async def _send(self, user: User, content: EmailContent) -> None:
        try:
            await self._mailer.send(user.email, content)
        except MailDeliveryError as e:
            logger.warning("Email not delivered to %s: %s", user.email, str(e))
