# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role transitions between students, teachers and directors.

Allowed transitions:

    STUDENT  -> TEACHER
    TEACHER  -> STUDENT, DIRECTOR
    DIRECTOR -> (none)
    ADMIN    -> (none)

Leaving a role retires its record:
- STUDENT: the user is pulled from every course it is enrolled in.
- TEACHER: every owned course is deleted with its sections and content,
  and the course links are pulled from the enrolled students.

The new role record is created in the institute of the retired one. The
whole cascade runs in one transaction: any failure rolls back and the user
keeps the old role with every course intact.

Concurrent transitions of the same user are not serialized. Two requests
racing on one user can both pass validation and both commit.

Example:
    >>> manager = RoleTransitionManager(db)
    >>> user = await manager.change_role(user_id, Role.DIRECTOR)
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.course.service import CourseService
from src.domains.enrollment.service import EnrollmentService
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.user import Role, User
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[Role, frozenset[Role]] = {
    Role.STUDENT: frozenset({Role.TEACHER}),
    Role.TEACHER: frozenset({Role.STUDENT, Role.DIRECTOR}),
    Role.DIRECTOR: frozenset(),
    Role.ADMIN: frozenset(),
}

RoleRecord = Student | Teacher | Director


class RoleTransitionError(Exception):
    """Base exception for role transition errors."""

    pass


class UserNotFoundError(RoleTransitionError):
    """Raised when the user does not exist."""

    pass


class InvalidTransitionError(RoleTransitionError):
    """Raised when the transition is not allowed. Nothing was changed."""

    def __init__(self, current: Role, requested: Role) -> None:
        super().__init__(f"Cannot change role from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


class RoleRecordNotFoundError(RoleTransitionError):
    """Raised when the user's current role has no matching record."""

    pass


class PersistenceError(RoleTransitionError):
    """Raised when the store fails during the transition. The transaction was rolled back."""

    pass


def is_transition_allowed(current: Role, requested: Role) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


@dataclass
class RetiredRole:
    """What is left of the old role once its record is gone."""

    institute_id: str | None
    detached_courses: int = 0
    deleted_courses: int = 0


class RoleTransitionManager:
    """Applies role transitions and their cascades in one transaction.

    Attributes:
        _db: Async database session. The manager commits or rolls it back.
        _courses: Course service used to purge owned courses.
        _enrollment: Enrollment service used to detach students.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._courses = CourseService(db)
        self._enrollment = EnrollmentService(db)

    async def change_role(self, user_id: str, new_role: Role | str) -> UserResponse:
        """Move a user to a new role.

        Args:
            user_id: User to transition.
            new_role: Target role.

        Returns:
            The user with its new role.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidTransitionError: If the transition is not allowed.
            RoleRecordNotFoundError: If the current role record is missing.
            PersistenceError: If the store fails. Nothing was changed.
        """
        requested = Role(new_role)

        try:
            user = await self._get_user(user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")

            current = Role(user.role)
            if not is_transition_allowed(current, requested):
                raise InvalidTransitionError(current, requested)

            retired = await self._retire(user, current)
            self._db.add(self._build_role_record(user, requested, retired.institute_id))
            user.role = requested.value

            await self._db.commit()
        except RoleTransitionError:
            await self._db.rollback()
            raise
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("Role transition failed for user %s: %s", user_id, str(e))
            raise PersistenceError(f"Failed to change role of user {user_id}") from e

        logger.info(
            "Role changed: user=%s %s -> %s (detached=%d, deleted_courses=%d)",
            user_id,
            current.value,
            requested.value,
            retired.detached_courses,
            retired.deleted_courses,
        )
        return UserResponse.model_validate(user)

    async def _get_user(self, user_id: str) -> User | None:
        return await self._db.get(User, user_id)

    async def _retire(self, user: User, current: Role) -> RetiredRole:
        if current == Role.STUDENT:
            return await self._retire_student(user)
        if current == Role.TEACHER:
            return await self._retire_teacher(user)
        # Unreachable while ALLOWED_TRANSITIONS only leaves students and teachers
        raise InvalidTransitionError(current, current)

    async def _retire_student(self, user: User) -> RetiredRole:
        student = await self._get_record(Student, user.id)
        detached = await self._enrollment.detach_student_everywhere(student)
        await self._db.delete(student)
        await self._db.flush()
        return RetiredRole(institute_id=student.institute_id, detached_courses=detached)

    async def _retire_teacher(self, user: User) -> RetiredRole:
        teacher = await self._get_record(Teacher, user.id)
        owned = await self._courses.courses_owned_by(user.id)
        await self._courses.purge_courses(owned)
        await self._db.delete(teacher)
        await self._db.flush()
        return RetiredRole(institute_id=teacher.institute_id, deleted_courses=len(owned))

    async def _get_record(self, model: type[RoleRecord], user_id: str) -> RoleRecord:
        result = await self._db.execute(select(model).where(model.user_id == user_id))
        record = result.scalar_one_or_none()
        if record is None:
            raise RoleRecordNotFoundError(
                f"User {user_id} has no {model.__tablename__} record"
            )
        return record

    @staticmethod
    def _build_role_record(user: User, role: Role, institute_id: str | None) -> RoleRecord:
        if role == Role.STUDENT:
            return Student(user_id=user.id, institute_id=institute_id, courses=[])
        if role == Role.TEACHER:
            return Teacher(user_id=user.id, institute_id=institute_id, courses=[])
        return Director(user_id=user.id, institute_id=institute_id)
