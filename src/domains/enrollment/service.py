# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for student course membership.

Membership is stored twice: as a member entry on the course and as a course
link on the student record. This service is the only place that edits
those lists, and it always edits both sides.

The link helpers do not commit: callers such as course creation or role
transition own the transaction. remove_student_from_course is a complete
operation and commits.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.roles import Student
from src.infrastructure.database.models.user import Role, User

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class CourseNotFoundError(EnrollmentServiceError):
    """Raised when the course is not found."""

    pass


class StudentNotFoundError(EnrollmentServiceError):
    """Raised when the user has no student record."""

    pass


class NotEnrolledError(EnrollmentServiceError):
    """Raised when the student is not enrolled in the course."""

    pass


def course_link(course: Course) -> dict:
    return {"id": course.id, "courseName": course.title}


def member_entry(user: User) -> dict:
    return {"id": user.id, "firstName": user.first_name, "lastName": user.last_name}


class EnrollmentService:
    """Keeps course members and student course links in sync.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # =========================================================================
    # Link helpers (caller commits)
    # =========================================================================

    def link(self, course: Course, student: Student, user: User) -> bool:
        """Add the membership on both sides.

        Returns:
            False if the student was already enrolled.
        """
        if course.has_student(user.id):
            return False

        course.students = [*course.students, member_entry(user)]
        student.courses = [
            *(link for link in student.courses if link["id"] != course.id),
            course_link(course),
        ]
        return True

    def unlink(self, course: Course, student: Student) -> bool:
        """Remove the membership on both sides.

        Returns:
            False if the student was not enrolled.
        """
        was_member = course.has_student(student.user_id)
        course.students = [m for m in course.students if m["id"] != student.user_id]
        student.courses = [link for link in student.courses if link["id"] != course.id]
        return was_member

    async def detach_student_everywhere(self, student: Student) -> int:
        """Remove a student from every course it is enrolled in.

        Args:
            student: Student record to detach.

        Returns:
            Number of courses the student was removed from.
        """
        course_ids = student.course_ids()
        courses: list[Course] = []
        if course_ids:
            result = await self._db.execute(select(Course).where(Course.id.in_(course_ids)))
            courses = list(result.scalars().all())

        for course in courses:
            self.unlink(course, student)
        student.courses = []

        return len(courses)

    async def detach_courses_from_members(self, courses: list[Course]) -> None:
        """Pull the given courses from the records of their enrolled students."""
        doomed = {course.id for course in courses}
        member_ids = {member["id"] for course in courses for member in course.students}
        if not member_ids:
            return

        result = await self._db.execute(select(Student).where(Student.user_id.in_(member_ids)))
        for student in result.scalars().all():
            student.courses = [link for link in student.courses if link["id"] not in doomed]

    async def enroll_by_emails(self, course: Course, emails: list[str]) -> list[str]:
        """Enroll the students owning the given emails.

        Args:
            course: Target course.
            emails: Student account emails.

        Returns:
            Emails that do not belong to a student account.
        """
        if not emails:
            return []

        wanted = {email.lower() for email in emails}
        result = await self._db.execute(
            select(User, Student)
            .join(Student, Student.user_id == User.id)
            .where(User.email.in_(wanted), User.role == Role.STUDENT.value)
        )
        found: set[str] = set()
        for user, student in result.all():
            self.link(course, student, user)
            found.add(user.email.lower())

        not_enrolled = [email for email in emails if email.lower() not in found]
        if not_enrolled:
            logger.info(
                "Course %s: %d emails did not match a student", course.id, len(not_enrolled)
            )
        return not_enrolled

    # =========================================================================
    # Operations
    # =========================================================================

    async def get_course(self, course_id: str) -> Course:
        course = await self._db.get(Course, course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def remove_student_from_course(self, user_id: str, course_id: str) -> None:
        """Remove one student from one course, both sides, in one commit.

        Raises:
            CourseNotFoundError: If the course does not exist.
            StudentNotFoundError: If the user has no student record.
            NotEnrolledError: If the student is not in the course.
        """
        course = await self.get_course(course_id)

        result = await self._db.execute(select(Student).where(Student.user_id == user_id))
        student = result.scalar_one_or_none()
        if student is None:
            raise StudentNotFoundError(f"Student {user_id} not found")

        if not self.unlink(course, student):
            raise NotEnrolledError(f"Student {user_id} is not enrolled in course {course_id}")

        await self._db.commit()
        logger.info("Removed student %s from course %s", user_id, course_id)
