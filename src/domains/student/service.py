# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service.

Student search for teachers, directors and admins, and learning profile
lookup. Course membership is read from the member lists stored on the
courses, which are kept in sync with the student records.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.roles import Director, Student
from src.infrastructure.database.models.user import Role, User
from src.models.common import CamelModel
from src.models.course import CourseLink
from src.models.learning_test import LearningProfile, LearningProfileResponse

logger = logging.getLogger(__name__)


class StudentServiceError(Exception):
    """Base exception for student service errors."""

    pass


class StudentNotFoundError(StudentServiceError):
    """Raised when a user has no student record."""

    pass


class StudentSummary(CamelModel):
    """Student as listed by the search endpoint."""

    user_id: str
    first_name: str
    last_name: str
    email: str
    institute_id: str | None = None
    learning_profile: LearningProfile | None = None
    courses: list[CourseLink] = []


class StudentService:
    """Search students and read learning profiles."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_students(
        self,
        caller_id: str,
        caller_role: str,
        course_id: str | None = None,
        student_user_id: str | None = None,
        learning_profile: LearningProfile | None = None,
        teacher_user_id: str | None = None,
    ) -> list[StudentSummary]:
        """Search students. Every filter given must match.

        Teachers only see students of their own courses and directors only
        students of their institute.

        Args:
            caller_id: User id of the caller.
            caller_role: Role of the caller.
            course_id: Only students enrolled in this course.
            student_user_id: Only this student.
            learning_profile: Only students with this profile.
            teacher_user_id: Only students of this teacher's courses.

        Returns:
            Matching students ordered by name.
        """
        member_scopes: list[set[str]] = []

        if caller_role == Role.TEACHER.value:
            member_scopes.append(await self._members_of(Course.teacher_id == caller_id))
        if teacher_user_id:
            member_scopes.append(await self._members_of(Course.teacher_id == teacher_user_id))
        if course_id:
            member_scopes.append(await self._members_of(Course.id == course_id))

        stmt = select(Student, User).join(User, User.id == Student.user_id)

        if member_scopes:
            allowed = set.intersection(*member_scopes)
            if not allowed:
                return []
            stmt = stmt.where(Student.user_id.in_(allowed))

        if caller_role == Role.DIRECTOR.value:
            institute_id = await self._db.scalar(
                select(Director.institute_id).where(Director.user_id == caller_id)
            )
            if institute_id is None:
                return []
            stmt = stmt.where(Student.institute_id == institute_id)

        if student_user_id:
            stmt = stmt.where(Student.user_id == student_user_id)
        if learning_profile:
            stmt = stmt.where(Student.learning_profile == learning_profile.value)

        result = await self._db.execute(stmt.order_by(User.last_name, User.first_name))
        return [self._to_summary(student, user) for student, user in result.all()]

    async def get_learning_profile(self, user_id: str) -> LearningProfileResponse:
        """Get the stored learning profile of a student.

        Raises:
            StudentNotFoundError: If the user has no student record.
        """
        result = await self._db.execute(select(Student).where(Student.user_id == user_id))
        student = result.scalar_one_or_none()
        if student is None:
            raise StudentNotFoundError(f"Student {user_id} not found")

        return LearningProfileResponse(user_id=user_id, learning_profile=student.learning_profile)

    async def _members_of(self, condition) -> set[str]:
        result = await self._db.execute(select(Course.students).where(condition))
        return {member["id"] for members in result.scalars().all() for member in members}

    @staticmethod
    def _to_summary(student: Student, user: User) -> StudentSummary:
        return StudentSummary(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            institute_id=student.institute_id,
            learning_profile=student.learning_profile,
            courses=[CourseLink.model_validate(link) for link in student.courses],
        )
