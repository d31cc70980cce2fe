# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service.

This module provides the UserService that handles:
- User lookup and listing
- Profile updates by the user themself
- Removing a student from a course
- Role changes (delegated to RoleTransitionManager)

Example:
    >>> user_service = UserService(db_session)
    >>> me = await user_service.get_user(current_user.id)
    >>> users = await user_service.list_users(role=Role.TEACHER)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.service import EnrollmentService
from src.domains.user.role_transition import RoleTransitionManager
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.user import Role, User
from src.models.user import UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base exception for user service errors."""

    pass


class UserNotFoundError(UserServiceError):
    """Raised when a user is not found."""

    pass


class UserAlreadyExistsError(UserServiceError):
    """Raised when an email is already used by another account."""

    pass


class UserService:
    """Service for reading and updating users.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_user(self, user_id: str) -> UserResponse:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If user not found.
        """
        user = await self._db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return UserResponse.model_validate(user)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def list_users(
        self,
        role: Role | None = None,
        institute_id: str | None = None,
    ) -> list[UserResponse]:
        """List users, optionally filtered by role and institute.

        Admins have no institute, so an institute filter never returns them.
        """
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        if institute_id is not None:
            members = (
                select(Student.user_id).where(Student.institute_id == institute_id)
                .union(select(Teacher.user_id).where(Teacher.institute_id == institute_id))
                .union(select(Director.user_id).where(Director.institute_id == institute_id))
            )
            stmt = stmt.where(User.id.in_(members))

        result = await self._db.execute(stmt.order_by(User.last_name, User.first_name))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def institute_of(self, user_id: str) -> str | None:
        """Institute of the role record held by a user. None for admins."""
        for record in (Student, Teacher, Director):
            institute_id = await self._db.scalar(
                select(record.institute_id).where(record.user_id == user_id)
            )
            if institute_id is not None:
                return institute_id
        return None

    async def update_profile(self, user_id: str, request: UserUpdateRequest) -> UserResponse:
        """Update email and names of the calling user.

        Raises:
            UserNotFoundError: If user not found.
            UserAlreadyExistsError: If the new email belongs to someone else.
        """
        user = await self._db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        if request.email is not None:
            email = str(request.email).lower()
            if email != user.email:
                other = await self.get_by_email(email)
                if other is not None:
                    raise UserAlreadyExistsError(f"Email {email} is already in use")
                user.email = email
        if request.first_name is not None:
            user.first_name = request.first_name
        if request.last_name is not None:
            user.last_name = request.last_name

        await self._db.commit()
        await self._db.refresh(user)

        logger.info("User profile updated: %s", user.id)
        return UserResponse.model_validate(user)

    async def remove_from_course(self, user_id: str, course_id: str) -> None:
        """Remove a student from a course on both sides."""
        await EnrollmentService(self._db).remove_student_from_course(user_id, course_id)

    async def change_role(self, user_id: str, new_role: Role) -> UserResponse:
        """Move a user to another role with its cascade. See RoleTransitionManager."""
        return await RoleTransitionManager(self._db).change_role(user_id, new_role)
