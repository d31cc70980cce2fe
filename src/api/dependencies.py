# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users and enforce roles
- Get service instances

Example:
    @router.get("/students")
    async def list_students(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_current_user
from src.core.config import get_settings
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import PasswordHasher
from src.domains.auth.service import AuthService
from src.domains.registration.service import RegistrationService
from src.domains.survey.service import SurveyService
from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models.user import Role, User
from src.infrastructure.notifications.mailer import Mailer
from src.infrastructure.notifications.mailer import get_mailer as get_app_mailer

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Commits on success and rolls back on error.

    Yields:
        AsyncSession.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Require authenticated user.

    The role is read from the database on every request, so a role change
    applies to tokens issued before it.

    Raises:
        HTTPException: If not authenticated or the account no longer exists.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    role = await db.scalar(select(User.role).where(User.id == user.id))
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if role != user.role:
        logger.debug("Role of %s changed since login: %s -> %s", user.id, user.role, role)
        user.role = role
    return user


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.get("/admin")
        async def admin_only(
            user: CurrentUser = Depends(RequireRole(Role.ADMIN)),
        ):
            ...
    """

    def __init__(self, *roles: Role | str) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted roles (any of these).
        """
        self.roles = tuple(r.value if isinstance(r, Role) else r for r in roles)

    async def __call__(self, user: CurrentUser = Depends(require_auth)) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: If the user holds none of the roles.
        """
        if not user.has_any_role(*self.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(self.roles)}",
            )

        return user


require_admin = RequireRole(Role.ADMIN)
require_admin_or_director = RequireRole(Role.ADMIN, Role.DIRECTOR)
require_director = RequireRole(Role.DIRECTOR)
require_teacher = RequireRole(Role.TEACHER)
require_student = RequireRole(Role.STUDENT)
require_teacher_or_director = RequireRole(Role.TEACHER, Role.DIRECTOR)
require_survey_respondent = RequireRole(Role.STUDENT, Role.TEACHER)


# =========================================================================
# Service Dependencies
# =========================================================================


def get_jwt_manager() -> JWTManager:
    """Get JWT manager instance."""
    settings = get_settings()
    return JWTManager(settings.jwt)


def get_password_hasher() -> PasswordHasher:
    """Get password hasher instance."""
    return PasswordHasher()


def get_mailer() -> Mailer:
    """Get the application mailer."""
    return get_app_mailer()


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    mailer: Mailer = Depends(get_mailer),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    """Get AuthService instance."""
    settings = get_settings()
    return AuthService(
        db,
        jwt_manager,
        mailer,
        settings.jwt,
        password_hasher=hasher,
        public_url=settings.api.public_url,
    )


async def get_registration_service(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegistrationService:
    """Get RegistrationService instance."""
    settings = get_settings()
    return RegistrationService(db, mailer, hasher, login_url=settings.api.public_url)


async def get_survey_service(db: AsyncSession = Depends(get_db)) -> SurveyService:
    """Get SurveyService instance."""
    return SurveyService(db, interval_minutes=get_settings().survey.interval_minutes)

