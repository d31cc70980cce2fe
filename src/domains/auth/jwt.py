# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

Two token kinds are issued with python-jose:
- access: the session token, sent as an httpOnly cookie or Bearer header.
- password: a short-lived token embedded in set-password and recovery links.
  It is bound to the account email so a link cannot be reused for another
  account, and to a fingerprint of the current password hash so it stops
  working once the password changes.

Example:
    >>> from src.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token("user-123", role="STUDENT", email="a@b.c")
    >>> claims = jwt_manager.decode_token(token, expected_type="access")
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import ExpiredSignatureError, jwt
from pydantic import BaseModel

from src.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)

TokenType = Literal["access", "password"]


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token kind.
        role: User role at issue time. Empty for password tokens.
        email: Account email.
        pwd: Password hash fingerprint. Only set on password tokens.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID.
    """

    sub: str
    type: TokenType
    role: str | None = None
    email: str
    pwd: str | None = None
    exp: int
    iat: int
    jti: str


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def access_token_ttl_seconds(self) -> int:
        """Lifetime of session tokens in seconds."""
        return self._settings.access_token_expire_minutes * 60

    def create_access_token(self, user_id: str, role: str, email: str) -> str:
        """Create a session token.

        Args:
            user_id: User identifier.
            role: Current role of the user.
            email: Account email.

        Returns:
            Signed JWT string.
        """
        return self._encode(
            user_id,
            "access",
            email=email,
            minutes=self._settings.access_token_expire_minutes,
            role=role,
        )

    def create_password_token(
        self,
        user_id: str,
        email: str,
        expires_minutes: int,
        fingerprint: str | None = None,
    ) -> str:
        """Create a token for a set-password or recovery link.

        Args:
            user_id: User identifier.
            email: Account email the link is bound to.
            expires_minutes: Link lifetime.
            fingerprint: Fingerprint of the password hash the link replaces.

        Returns:
            Signed JWT string.
        """
        return self._encode(
            user_id,
            "password",
            email=email,
            minutes=expires_minutes,
            fingerprint=fingerprint,
        )

    def _encode(
        self,
        user_id: str,
        token_type: TokenType,
        email: str,
        minutes: int,
        role: str | None = None,
        fingerprint: str | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "type": token_type,
            "role": role,
            "email": email,
            "pwd": fingerprint,
            "exp": int((now + timedelta(minutes=minutes)).timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(
        self,
        token: str,
        expected_type: TokenType | None = None,
    ) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.
            expected_type: Expected token kind.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or of the wrong kind.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except Exception as e:
            logger.debug("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}") from e

        if expected_type and payload.get("type") != expected_type:
            raise InvalidTokenError(
                f"Expected {expected_type} token, got {payload.get('type')}"
            )

        try:
            return TokenPayload.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError(f"Malformed token claims: {str(e)}") from e

    def verify_token(self, token: str, expected_type: TokenType | None = None) -> bool:
        """Check a token without raising."""
        try:
            self.decode_token(token, expected_type)
            return True
        except (TokenExpiredError, InvalidTokenError):
            return False
