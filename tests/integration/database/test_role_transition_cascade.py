# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role transition cascades against a real database."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from src.domains.user.role_transition import (
    InvalidTransitionError,
    PersistenceError,
    RoleRecordNotFoundError,
    RoleTransitionManager,
)
from src.infrastructure.database.models import (
    Content,
    Course,
    Director,
    Role,
    Section,
    Student,
    Teacher,
    User,
)


async def count(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestStudentToTeacher:
    @pytest.mark.asyncio
    async def test_student_leaves_every_course(self, db_session, factory):
        institute = await factory.institute()
        teacher = await factory.user(Role.TEACHER, institute)
        student = await factory.user(Role.STUDENT, institute, first_name="Luis")
        classmate = await factory.user(Role.STUDENT, institute, first_name="Sofia")
        first = await factory.course(teacher, [student, classmate])
        second = await factory.course(teacher, [student])
        await db_session.commit()

        response = await RoleTransitionManager(db_session).change_role(student.id, Role.TEACHER)

        assert response.role == Role.TEACHER
        assert await factory.record(Student, student.id) is None
        new_record = await factory.record(Teacher, student.id)
        assert new_record.institute_id == institute.id
        assert new_record.courses == []

        await db_session.refresh(first)
        await db_session.refresh(second)
        assert [m["id"] for m in first.students] == [classmate.id]
        assert second.students == []
        classmate_record = await factory.record(Student, classmate.id)
        assert [link["id"] for link in classmate_record.courses] == [first.id]


class TestTeacherTransitions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("target,record", [(Role.STUDENT, Student), (Role.DIRECTOR, Director)])
    async def test_owned_courses_are_deleted(self, db_session, factory, target, record):
        institute = await factory.institute()
        teacher = await factory.user(Role.TEACHER, institute)
        other_teacher = await factory.user(Role.TEACHER, institute)
        student = await factory.user(Role.STUDENT, institute)
        owned = await factory.course(teacher, [student])
        kept = await factory.course(other_teacher, [student])
        section = Section(course_id=owned.id, name="Unidad 1", visible=True)
        db_session.add(section)
        await db_session.flush()
        db_session.add(Content(section_id=section.id, title="Apunte", visible=True, reactions=[]))
        await db_session.commit()

        response = await RoleTransitionManager(db_session).change_role(teacher.id, target)

        assert response.role == target
        assert await db_session.get(Course, owned.id) is None
        assert await db_session.get(Course, kept.id) is not None
        assert await count(db_session, Section) == 0
        assert await count(db_session, Content) == 0
        assert await factory.record(Teacher, teacher.id) is None

        new_record = await factory.record(record, teacher.id)
        assert new_record.institute_id == institute.id

        student_record = await factory.record(Student, student.id)
        await db_session.refresh(student_record)
        assert [link["id"] for link in student_record.courses] == [kept.id]


class TestFailures:
    @pytest.mark.asyncio
    async def test_invalid_transition_leaves_database_untouched(self, db_session, factory):
        institute = await factory.institute()
        director = await factory.user(Role.DIRECTOR, institute)
        await db_session.commit()

        with pytest.raises(InvalidTransitionError):
            await RoleTransitionManager(db_session).change_role(director.id, Role.TEACHER)

        stored = await db_session.get(User, director.id)
        assert stored.role == Role.DIRECTOR.value
        assert await factory.record(Director, director.id) is not None
        assert await count(db_session, Teacher) == 0

    @pytest.mark.asyncio
    async def test_missing_record_rolls_back(self, db_session, factory):
        user = await factory.user(Role.STUDENT)
        await db_session.delete(await factory.record(Student, user.id))
        await db_session.commit()

        with pytest.raises(RoleRecordNotFoundError):
            await RoleTransitionManager(db_session).change_role(user.id, Role.TEACHER)

        assert await count(db_session, Teacher) == 0

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_old_state(self, db_session, factory):
        """A store failure at commit leaves the teacher and its courses intact."""
        institute = await factory.institute()
        teacher = await factory.user(Role.TEACHER, institute)
        student = await factory.user(Role.STUDENT, institute)
        course = await factory.course(teacher, [student])
        await db_session.commit()
        teacher_id, course_id, student_id = teacher.id, course.id, student.id

        failure = OperationalError("COMMIT", {}, Exception("database is locked"))
        with patch.object(db_session, "commit", side_effect=failure):
            with pytest.raises(PersistenceError):
                await RoleTransitionManager(db_session).change_role(teacher_id, Role.DIRECTOR)

        db_session.expunge_all()
        stored = await db_session.get(User, teacher_id)
        assert stored.role == Role.TEACHER.value
        assert await factory.record(Teacher, teacher_id) is not None
        assert await factory.record(Director, teacher_id) is None
        assert await db_session.get(Course, course_id) is not None
        student_record = await factory.record(Student, student_id)
        assert [link["id"] for link in student_record.courses] == [course_id]
