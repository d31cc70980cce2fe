# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Each test gets a fresh SQLite file with every table created, plus a
factory that inserts institutes, accounts with their role records and
courses.
"""

from pathlib import Path
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.domains.enrollment.service import EnrollmentService, course_link
from src.infrastructure.database.models import (
    Base,
    Course,
    Director,
    Institute,
    Role,
    Student,
    Teacher,
    User,
)


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create an engine on a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker configured like the application one."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for database tests."""
    async with db_sessionmaker() as session:
        yield session
        await session.rollback()


class ModelFactory:
    """Inserts consistent rows: users always get their role record."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def institute(self, name: str | None = None) -> Institute:
        institute = Institute(name=name or f"Instituto {uuid4().hex[:8]}")
        self._session.add(institute)
        await self._session.flush()
        return institute

    async def user(
        self,
        role: Role,
        institute: Institute | None = None,
        first_name: str = "Ana",
        last_name: str = "Perez",
        email: str | None = None,
    ) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{uuid4().hex[:10]}@school.edu",
            password_hash="not-a-real-hash",
            role=role.value,
            force_password_reset=False,
        )
        self._session.add(user)
        await self._session.flush()

        institute_id = institute.id if institute else None
        if role == Role.STUDENT:
            self._session.add(Student(user_id=user.id, institute_id=institute_id, courses=[]))
        elif role == Role.TEACHER:
            self._session.add(Teacher(user_id=user.id, institute_id=institute_id, courses=[]))
        elif role == Role.DIRECTOR:
            self._session.add(Director(user_id=user.id, institute_id=institute_id))
        await self._session.flush()
        return user

    async def course(
        self,
        teacher: User,
        students: list[User] | None = None,
        title: str | None = None,
    ) -> Course:
        course = Course(
            title=title or f"Curso {uuid4().hex[:6]}",
            matriculation_code=uuid4().hex[:8].upper(),
            teacher_id=teacher.id,
            students=[],
            sections=[],
        )
        self._session.add(course)
        await self._session.flush()

        teacher_record = await self.record(Teacher, teacher.id)
        teacher_record.courses = [*teacher_record.courses, course_link(course)]

        enrollment = EnrollmentService(self._session)
        for student_user in students or []:
            enrollment.link(course, await self.record(Student, student_user.id), student_user)
        await self._session.flush()
        return course

    async def record(self, model, user_id: str):
        result = await self._session.execute(select(model).where(model.user_id == user_id))
        return result.scalar_one_or_none()


@pytest.fixture
def factory(db_session: AsyncSession) -> ModelFactory:
    return ModelFactory(db_session)
