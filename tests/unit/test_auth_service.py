# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the authentication service."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import SecretStr

from src.core.config.settings import JWTSettings
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import PasswordHasher, password_fingerprint
from src.domains.auth.service import (
    AuthService,
    InvalidCredentialsError,
    InvalidPasswordTokenError,
    PasswordNotSecureError,
    PasswordsDoNotMatchError,
)
from src.infrastructure.database.models.user import Role, User
from src.infrastructure.notifications.mailer import MailDeliveryError
from src.models.auth import SetPasswordRequest

PASSWORD = "initial-pass1"


def result_with(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_settings() -> JWTSettings:
    return JWTSettings(secret_key=SecretStr("unit-test-secret"))


@pytest.fixture
def jwt_manager(jwt_settings: JWTSettings) -> JWTManager:
    return JWTManager(jwt_settings)


@pytest.fixture
def mailer() -> AsyncMock:
    mailer = AsyncMock()
    mailer.send.return_value = True
    return mailer


@pytest.fixture
def user(hasher: PasswordHasher) -> User:
    return User(
        id=str(uuid4()),
        first_name="Ana",
        last_name="Perez",
        email="ana@school.edu",
        password_hash=hasher.hash(PASSWORD),
        role=Role.TEACHER.value,
        force_password_reset=False,
        next_survey_date=None,
    )


@pytest.fixture
def auth_service(mock_db, jwt_manager, mailer, jwt_settings, hasher) -> AuthService:
    return AuthService(
        mock_db,
        jwt_manager,
        mailer,
        jwt_settings,
        password_hasher=hasher,
        public_url="https://app.adaptaria.test/",
    )


class TestLogin:
    """Tests for AuthService.login."""

    @pytest.mark.asyncio
    async def test_login_issues_access_token(self, auth_service, mock_db, jwt_manager, user):
        mock_db.execute.return_value = result_with(user)

        response = await auth_service.login("Ana@School.edu", PASSWORD)

        payload = jwt_manager.decode_token(response.access_token, expected_type="access")
        assert payload.sub == user.id
        assert payload.role == Role.TEACHER.value
        assert response.expires_in == 12 * 60 * 60
        assert response.user.email == user.email

    @pytest.mark.asyncio
    async def test_teacher_without_survey_date_requires_survey(
        self, auth_service, mock_db, user
    ):
        mock_db.execute.return_value = result_with(user)

        response = await auth_service.login(user.email, PASSWORD)

        assert response.requires_survey is True

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service, mock_db):
        mock_db.execute.return_value = result_with(None)

        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await auth_service.login("nobody@school.edu", PASSWORD)

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service, mock_db, user):
        mock_db.execute.return_value = result_with(user)

        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await auth_service.login(user.email, "wrong-pass1")

    @pytest.mark.asyncio
    async def test_forced_reset_mails_set_password_link(
        self, auth_service, mock_db, mailer, user
    ):
        user.force_password_reset = True
        mock_db.execute.return_value = result_with(user)

        await auth_service.login(user.email, PASSWORD)

        to, content = mailer.send.call_args.args
        assert to == user.email
        assert "https://app.adaptaria.test/set-password?token=" in content.text

    @pytest.mark.asyncio
    async def test_mail_failure_does_not_block_login(self, auth_service, mock_db, mailer, user):
        user.force_password_reset = True
        mock_db.execute.return_value = result_with(user)
        mailer.send.side_effect = MailDeliveryError("smtp down")

        response = await auth_service.login(user.email, PASSWORD)

        assert response.access_token


class TestSetPassword:
    """Tests for AuthService.set_password."""

    def _request(self, email: str, password: str, confirmation: str | None = None):
        return SetPasswordRequest(
            email=email,
            new_password=password,
            new_password_confirmation=confirmation if confirmation is not None else password,
        )

    @pytest.mark.asyncio
    async def test_sets_password_and_clears_flag(
        self, auth_service, mock_db, jwt_manager, hasher, user
    ):
        user.force_password_reset = True
        mock_db.get.return_value = user
        token = jwt_manager.create_password_token(
            user.id, user.email, 60, password_fingerprint(user.password_hash)
        )

        await auth_service.set_password(token, self._request(user.email, "brand-new-pass9"))

        assert user.force_password_reset is False
        assert hasher.verify("brand-new-pass9", user.password_hash)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_used_token_cannot_be_replayed(self, auth_service, mock_db, jwt_manager, user):
        mock_db.get.return_value = user
        token = jwt_manager.create_password_token(
            user.id, user.email, 60, password_fingerprint(user.password_hash)
        )
        await auth_service.set_password(token, self._request(user.email, "brand-new-pass9"))

        with pytest.raises(InvalidPasswordTokenError, match="already used"):
            await auth_service.set_password(token, self._request(user.email, "other-pass77"))
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_token_without_fingerprint_is_rejected(
        self, auth_service, mock_db, jwt_manager, user
    ):
        mock_db.get.return_value = user
        token = jwt_manager.create_password_token(user.id, user.email, 60)

        with pytest.raises(InvalidPasswordTokenError):
            await auth_service.set_password(token, self._request(user.email, "brand-new-pass9"))
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_for_other_email(self, auth_service, jwt_manager, user):
        token = jwt_manager.create_password_token(user.id, user.email, 60)

        with pytest.raises(InvalidPasswordTokenError):
            await auth_service.set_password(token, self._request("other@school.edu", "pass1234"))

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_password_token(self, auth_service, jwt_manager, user):
        token = jwt_manager.create_access_token(user.id, user.role, user.email)

        with pytest.raises(InvalidPasswordTokenError):
            await auth_service.set_password(token, self._request(user.email, "pass1234"))

    @pytest.mark.asyncio
    async def test_expired_token(self, auth_service, jwt_manager, user):
        token = jwt_manager.create_password_token(user.id, user.email, -1)

        with pytest.raises(InvalidPasswordTokenError):
            await auth_service.set_password(token, self._request(user.email, "pass1234"))

    @pytest.mark.asyncio
    async def test_passwords_must_match(self, auth_service, mock_db, jwt_manager, user):
        token = jwt_manager.create_password_token(user.id, user.email, 60)

        with pytest.raises(PasswordsDoNotMatchError):
            await auth_service.set_password(
                token, self._request(user.email, "pass1234", "pass12345")
            )
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_password_must_be_secure(self, auth_service, mock_db, jwt_manager, user):
        token = jwt_manager.create_password_token(user.id, user.email, 60)

        with pytest.raises(PasswordNotSecureError):
            await auth_service.set_password(token, self._request(user.email, "short"))
        mock_db.commit.assert_not_called()


class TestPasswordRecovery:
    """Tests for AuthService.request_password_recovery."""

    @pytest.mark.asyncio
    async def test_unknown_email_is_ignored(self, auth_service, mock_db, mailer):
        mock_db.execute.return_value = result_with(None)

        await auth_service.request_password_recovery("nobody@school.edu")

        mailer.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_recovery_link_expires_in_fifteen_minutes(
        self, auth_service, mock_db, mailer, jwt_manager, user
    ):
        mock_db.execute.return_value = result_with(user)

        await auth_service.request_password_recovery(user.email)

        _, content = mailer.send.call_args.args
        token = content.text.split("token=", 1)[1].split()[0]
        payload = jwt_manager.decode_token(token, expected_type="password")
        assert payload.exp - payload.iat == 15 * 60
        assert payload.email == user.email
        assert payload.pwd == password_fingerprint(user.password_hash)
