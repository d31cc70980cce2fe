# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Enrollment service."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.domains.enrollment.service import (
    CourseNotFoundError,
    EnrollmentService,
    NotEnrolledError,
    StudentNotFoundError,
)
from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.roles import Student
from src.infrastructure.database.models.user import Role, User


def result_with(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def enrollment_service(mock_db):
    """Create enrollment service with mock database."""
    return EnrollmentService(db=mock_db)


@pytest.fixture
def sample_course():
    return Course(
        id=str(uuid4()),
        title="Matematica I",
        matriculation_code="ABC123",
        teacher_id=str(uuid4()),
        students=[],
        sections=[],
    )


@pytest.fixture
def sample_user():
    return User(
        id=str(uuid4()),
        first_name="John",
        last_name="Doe",
        email="student@school.com",
        password_hash="hash",
        role=Role.STUDENT.value,
    )


@pytest.fixture
def sample_student(sample_user):
    return Student(id=str(uuid4()), user_id=sample_user.id, courses=[])


class TestLink:
    """Tests for the link helpers."""

    def test_link_updates_both_sides(
        self, enrollment_service, sample_course, sample_student, sample_user
    ):
        assert enrollment_service.link(sample_course, sample_student, sample_user) is True

        assert sample_course.students == [
            {"id": sample_user.id, "firstName": "John", "lastName": "Doe"}
        ]
        assert sample_student.courses == [{"id": sample_course.id, "courseName": "Matematica I"}]

    def test_link_twice_is_a_no_op(
        self, enrollment_service, sample_course, sample_student, sample_user
    ):
        enrollment_service.link(sample_course, sample_student, sample_user)

        assert enrollment_service.link(sample_course, sample_student, sample_user) is False
        assert len(sample_course.students) == 1
        assert len(sample_student.courses) == 1

    def test_link_reassigns_lists(
        self, enrollment_service, sample_course, sample_student, sample_user
    ):
        """JSON columns only notice new list objects."""
        members_before = sample_course.students
        links_before = sample_student.courses

        enrollment_service.link(sample_course, sample_student, sample_user)

        assert sample_course.students is not members_before
        assert sample_student.courses is not links_before

    def test_unlink_updates_both_sides(
        self, enrollment_service, sample_course, sample_student, sample_user
    ):
        enrollment_service.link(sample_course, sample_student, sample_user)

        assert enrollment_service.unlink(sample_course, sample_student) is True
        assert sample_course.students == []
        assert sample_student.courses == []

    def test_unlink_not_member(self, enrollment_service, sample_course, sample_student):
        assert enrollment_service.unlink(sample_course, sample_student) is False


class TestDetach:
    @pytest.mark.asyncio
    async def test_detach_student_without_courses_runs_no_query(
        self, enrollment_service, mock_db, sample_student
    ):
        assert await enrollment_service.detach_student_everywhere(sample_student) == 0
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_by_empty_email_list(self, enrollment_service, mock_db, sample_course):
        assert await enrollment_service.enroll_by_emails(sample_course, []) == []
        mock_db.execute.assert_not_called()


class TestRemoveStudentFromCourse:
    """Tests for remove_student_from_course."""

    @pytest.mark.asyncio
    async def test_course_not_found(self, enrollment_service, mock_db):
        mock_db.get.return_value = None

        with pytest.raises(CourseNotFoundError):
            await enrollment_service.remove_student_from_course("u", "missing")

    @pytest.mark.asyncio
    async def test_student_not_found(self, enrollment_service, mock_db, sample_course):
        mock_db.get.return_value = sample_course
        mock_db.execute.return_value = result_with(None)

        with pytest.raises(StudentNotFoundError):
            await enrollment_service.remove_student_from_course("u", sample_course.id)

    @pytest.mark.asyncio
    async def test_not_enrolled(self, enrollment_service, mock_db, sample_course, sample_student):
        mock_db.get.return_value = sample_course
        mock_db.execute.return_value = result_with(sample_student)

        with pytest.raises(NotEnrolledError):
            await enrollment_service.remove_student_from_course(
                sample_student.user_id, sample_course.id
            )
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_removes_and_commits(
        self, enrollment_service, mock_db, sample_course, sample_student, sample_user
    ):
        enrollment_service.link(sample_course, sample_student, sample_user)
        mock_db.get.return_value = sample_course
        mock_db.execute.return_value = result_with(sample_student)

        await enrollment_service.remove_student_from_course(sample_user.id, sample_course.id)

        assert not sample_course.has_student(sample_user.id)
        assert sample_student.courses == []
        mock_db.commit.assert_awaited_once()
