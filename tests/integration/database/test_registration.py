# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account creation and the first admin seed."""

from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr
from sqlalchemy import func, select

from src.core.config.settings import AdminSeedSettings
from src.domains.auth.password import PasswordHasher
from src.domains.institute.service import InstituteNotFoundError
from src.domains.registration.service import (
    EmailAlreadyRegisteredError,
    RegistrationService,
)
from src.infrastructure.database.models import Director, Role, Student, Teacher, User
from src.infrastructure.database.seeds import seed_admin
from src.infrastructure.notifications.mailer import MailDeliveryError
from src.models.user import AccountCreateRequest


def account(email: str, institute_id: str | None = None) -> AccountCreateRequest:
    return AccountCreateRequest(
        first_name="Maria",
        last_name="Lopez",
        email=email,
        document_number="30111222",
        institute_id=institute_id,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def mailer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(db_session, mailer, hasher) -> RegistrationService:
    return RegistrationService(db_session, mailer, password_hasher=hasher, login_url="http://app")


class TestRegistration:
    @pytest.mark.asyncio
    async def test_student_gets_record_and_welcome_mail(
        self, db_session, factory, service, mailer, hasher
    ):
        institute = await factory.institute()
        admin = await factory.user(Role.ADMIN)
        await db_session.commit()

        (created,) = await service.create_students(
            [account("Nueva@School.edu", institute.id)], admin.id, Role.ADMIN.value
        )

        assert created.user.email == "nueva@school.edu"
        assert created.user.force_password_reset is True
        record = await factory.record(Student, created.user.id)
        assert record.institute_id == institute.id

        to, content = mailer.send.call_args.args
        assert to == "nueva@school.edu"
        password = content.text.split("Contraseña temporal: ", 1)[1].split()[0]
        stored = await db_session.get(User, created.user.id)
        assert hasher.verify(password, stored.password_hash)

    @pytest.mark.asyncio
    async def test_director_registers_into_own_institute(self, db_session, factory, service):
        institute = await factory.institute()
        director = await factory.user(Role.DIRECTOR, institute)
        await db_session.commit()

        created = await service.create_teacher(account("t@school.edu"), director.id, "DIRECTOR")

        assert created.institute_id == institute.id
        assert (await factory.record(Teacher, created.user.id)).institute_id == institute.id

    @pytest.mark.asyncio
    async def test_director_account(self, db_session, factory, service):
        institute = await factory.institute()
        await db_session.commit()

        created = await service.create_director(account("d@school.edu", institute.id))

        assert created.user.role == Role.DIRECTOR
        assert (await factory.record(Director, created.user.id)).institute_id == institute.id

    @pytest.mark.asyncio
    async def test_unknown_institute(self, service):
        with pytest.raises(InstituteNotFoundError):
            await service.create_director(account("d@school.edu", "missing"))

    @pytest.mark.asyncio
    async def test_bulk_is_all_or_nothing(self, db_session, factory, service):
        await factory.user(Role.STUDENT, email="taken@school.edu")
        admin = await factory.user(Role.ADMIN)
        await db_session.commit()

        with pytest.raises(EmailAlreadyRegisteredError):
            await service.create_students(
                [account("fresh@school.edu"), account("taken@school.edu")],
                admin.id,
                Role.ADMIN.value,
            )

        fresh = await db_session.scalar(select(User).where(User.email == "fresh@school.edu"))
        assert fresh is None

    @pytest.mark.asyncio
    async def test_mail_failure_keeps_account(self, db_session, service, mailer):
        mailer.send.side_effect = MailDeliveryError("smtp down")

        created = await service.create_admin(account("admin2@school.edu"))

        assert await db_session.get(User, created.user.id) is not None


class TestSeedAdmin:
    @pytest.mark.asyncio
    async def test_creates_first_admin(self, db_session, hasher):
        settings = AdminSeedSettings(email="Root@School.edu", password=SecretStr("rootpass1"))

        admin = await seed_admin(db_session, settings, hasher)
        await db_session.commit()

        assert admin.email == "root@school.edu"
        assert admin.force_password_reset is False
        assert hasher.verify("rootpass1", admin.password_hash)

    @pytest.mark.asyncio
    async def test_skips_when_admin_exists(self, db_session, factory, hasher):
        await factory.user(Role.ADMIN)
        await db_session.commit()
        settings = AdminSeedSettings(email="root@school.edu", password=SecretStr("rootpass1"))

        assert await seed_admin(db_session, settings, hasher) is None
        count = await db_session.scalar(
            select(func.count()).select_from(User).where(User.role == Role.ADMIN.value)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_skips_without_credentials(self, db_session):
        assert await seed_admin(db_session, AdminSeedSettings(email=None, password=None)) is None
