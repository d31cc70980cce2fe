# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Director service: director listing and institute scope lookup."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.course.service import CourseService
from src.infrastructure.database.models.roles import Director
from src.infrastructure.database.models.user import Role, User
from src.models.common import CamelModel
from src.models.course import CourseResponse

logger = logging.getLogger(__name__)


class DirectorServiceError(Exception):
    """Base exception for director service errors."""

    pass


class DirectorNotFoundError(DirectorServiceError):
    """Raised when a user has no director record."""

    pass


class DirectorSummary(CamelModel):
    user_id: str
    first_name: str
    last_name: str
    email: str
    institute_id: str | None = None


class DirectorService:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_institute_id(self, user_id: str) -> str:
        """Institute of a director.

        Raises:
            DirectorNotFoundError: If the user is not a director of any institute.
        """
        institute_id = await self._db.scalar(
            select(Director.institute_id).where(Director.user_id == user_id)
        )
        if institute_id is None:
            raise DirectorNotFoundError(f"Director {user_id} not found")
        return institute_id

    async def list_directors(self, caller_id: str, caller_role: str) -> list[DirectorSummary]:
        """All directors for admins; directors of the same institute for directors."""
        stmt = select(Director, User).join(User, User.id == Director.user_id)
        if caller_role == Role.DIRECTOR.value:
            stmt = stmt.where(Director.institute_id == await self.get_institute_id(caller_id))

        result = await self._db.execute(stmt.order_by(User.last_name, User.first_name))
        return [
            DirectorSummary(
                user_id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                institute_id=director.institute_id,
            )
            for director, user in result.all()
        ]

    async def list_institute_courses(self, user_id: str) -> list[CourseResponse]:
        """Courses of the teachers in the director's institute.

        Raises:
            DirectorNotFoundError: If the user is not a director of any institute.
        """
        institute_id = await self.get_institute_id(user_id)
        return await CourseService(self._db).list_institute_courses(institute_id)
