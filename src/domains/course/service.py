# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service.

This module provides the CourseService that handles:
- Course creation by teachers, with optional enrollment by email
- Course lookup guarded by the course access rules
- Course deletion with its sections and content
- Course listings for students, teachers and directors

Access rules:
- ADMIN: every course
- TEACHER: courses they own
- STUDENT: courses they are enrolled in
- DIRECTOR: courses owned by teachers of their institute
"""

import logging
import secrets

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.service import EnrollmentService, course_link
from src.infrastructure.database.models.course import Content, Course, Section
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.user import Role
from src.models.course import (
    CourseCreatedResponse,
    CourseCreateRequest,
    CourseResponse,
)

logger = logging.getLogger(__name__)

MATRICULATION_CODE_BYTES = 4


class CourseServiceError(Exception):
    """Base exception for course service errors."""

    pass


class CourseNotFoundError(CourseServiceError):
    """Raised when a course is not found."""

    pass


class CourseAccessDeniedError(CourseServiceError):
    """Raised when the caller may not see or change a course."""

    pass


class TeacherNotFoundError(CourseServiceError):
    """Raised when a teacher user has no teacher record."""

    pass


class CourseService:
    """Service for courses and their cascade deletion.

    Attributes:
        _db: Async database session.
        _enrollment: Keeps member lists and course links in sync.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._enrollment = EnrollmentService(db)

    async def create_course(
        self,
        teacher_user_id: str,
        request: CourseCreateRequest,
    ) -> CourseCreatedResponse:
        """Create a course owned by the calling teacher.

        Args:
            teacher_user_id: User id of the owner.
            request: Course data and student emails to enroll.

        Returns:
            The course plus the emails that matched no student.

        Raises:
            TeacherNotFoundError: If the user has no teacher record.
        """
        teacher = await self._get_teacher(teacher_user_id)

        course = Course(
            title=request.title,
            description=request.description,
            image=request.image,
            matriculation_code=await self._new_matriculation_code(),
            teacher_id=teacher_user_id,
            students=[],
            sections=[],
        )
        self._db.add(course)
        await self._db.flush()

        teacher.courses = [*teacher.courses, course_link(course)]
        not_enrolled = await self._enrollment.enroll_by_emails(
            course, [str(email) for email in request.student_emails]
        )

        await self._db.commit()
        await self._db.refresh(course)

        logger.info(
            "Course created: %s by teacher %s (%d students)",
            course.id,
            teacher_user_id,
            len(course.students),
        )
        return CourseCreatedResponse(course=self._to_response(course), not_enrolled=not_enrolled)

    async def get_course(self, course_id: str, user_id: str, role: str) -> CourseResponse:
        """Get a course the caller has access to.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the caller has no access.
        """
        course = await self.get_accessible_course(course_id, user_id, role)
        return self._to_response(course)

    async def get_accessible_course(self, course_id: str, user_id: str, role: str) -> Course:
        """Load a course and apply the access rules.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the caller has no access.
        """
        course = await self._db.get(Course, course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")

        if not await self.can_access(course, user_id, role):
            raise CourseAccessDeniedError(f"No access to course {course_id}")
        return course

    async def get_owned_course(self, course_id: str, teacher_user_id: str) -> Course:
        """Load a course that must belong to the given teacher.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
        """
        course = await self._db.get(Course, course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        if course.teacher_id != teacher_user_id:
            raise CourseAccessDeniedError(f"Course {course_id} belongs to another teacher")
        return course

    async def can_access(self, course: Course, user_id: str, role: str) -> bool:
        if role == Role.ADMIN.value:
            return True
        if role == Role.TEACHER.value:
            return course.teacher_id == user_id
        if role == Role.STUDENT.value:
            return course.has_student(user_id)
        if role == Role.DIRECTOR.value:
            director_institute = await self._db.scalar(
                select(Director.institute_id).where(Director.user_id == user_id)
            )
            owner_institute = await self._db.scalar(
                select(Teacher.institute_id).where(Teacher.user_id == course.teacher_id)
            )
            return director_institute is not None and director_institute == owner_institute
        return False

    async def delete_course(self, course_id: str, teacher_user_id: str) -> None:
        """Delete an owned course with its sections and content.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
        """
        course = await self.get_owned_course(course_id, teacher_user_id)
        await self.purge_courses([course])
        await self._db.commit()
        logger.info("Course deleted: %s by teacher %s", course_id, teacher_user_id)

    async def purge_courses(self, courses: list[Course]) -> None:
        """Delete courses with their sections and content. Caller commits.

        Course links are pulled from enrolled students and from the owning
        teachers so no record points at a deleted course.
        """
        if not courses:
            return

        course_ids = [course.id for course in courses]
        doomed = set(course_ids)

        await self._enrollment.detach_courses_from_members(courses)

        owner_ids = {course.teacher_id for course in courses}
        owners = await self._db.execute(select(Teacher).where(Teacher.user_id.in_(owner_ids)))
        for teacher in owners.scalars().all():
            teacher.courses = [link for link in teacher.courses if link["id"] not in doomed]
        await self._db.flush()

        section_ids = select(Section.id).where(Section.course_id.in_(course_ids))
        await self._db.execute(
            delete(Content)
            .where(Content.section_id.in_(section_ids))
            .execution_options(synchronize_session=False)
        )
        await self._db.execute(
            delete(Section)
            .where(Section.course_id.in_(course_ids))
            .execution_options(synchronize_session=False)
        )
        for course in courses:
            await self._db.delete(course)
        await self._db.flush()

        logger.debug("Purged %d courses: %s", len(course_ids), course_ids)

    async def courses_owned_by(self, teacher_user_id: str) -> list[Course]:
        result = await self._db.execute(select(Course).where(Course.teacher_id == teacher_user_id))
        return list(result.scalars().all())

    # =========================================================================
    # Listings
    # =========================================================================

    async def list_student_courses(self, user_id: str) -> list[CourseResponse]:
        """Full courses a student is enrolled in, following its course links."""
        result = await self._db.execute(select(Student).where(Student.user_id == user_id))
        student = result.scalar_one_or_none()
        if student is None or not student.courses:
            return []

        courses = await self._db.execute(
            select(Course).where(Course.id.in_(student.course_ids())).order_by(Course.title)
        )
        return [self._to_response(c) for c in courses.scalars().all()]

    async def list_teacher_courses(self, user_id: str) -> list[CourseResponse]:
        """Full courses owned by a teacher."""
        return [self._to_response(c) for c in await self.courses_owned_by(user_id)]

    async def list_institute_courses(self, institute_id: str) -> list[CourseResponse]:
        """Courses owned by the teachers of an institute."""
        teacher_ids = select(Teacher.user_id).where(Teacher.institute_id == institute_id)
        result = await self._db.execute(
            select(Course).where(Course.teacher_id.in_(teacher_ids)).order_by(Course.title)
        )
        return [self._to_response(c) for c in result.scalars().all()]

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_teacher(self, user_id: str) -> Teacher:
        result = await self._db.execute(select(Teacher).where(Teacher.user_id == user_id))
        teacher = result.scalar_one_or_none()
        if teacher is None:
            raise TeacherNotFoundError(f"Teacher {user_id} not found")
        return teacher

    async def _new_matriculation_code(self) -> str:
        while True:
            code = secrets.token_hex(MATRICULATION_CODE_BYTES).upper()
            taken = await self._db.scalar(
                select(Course.id).where(Course.matriculation_code == code)
            )
            if taken is None:
                return code

    @staticmethod
    def _to_response(course: Course) -> CourseResponse:
        return CourseResponse.model_validate(course)
