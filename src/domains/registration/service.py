# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account registration service.

Creates admin, director, teacher and student accounts. Every account gets a
random temporary password and must choose its own on first login
(force_password_reset). The temporary password is mailed once the account
is committed; a failed delivery is logged and does not undo the account.

Institute resolution:
- A director caller always registers into their own institute.
- Otherwise the institute given in the request is used, after checking it
  exists. Directors require one; students and teachers may have none.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.password import PasswordHasher, generate_password
from src.domains.institute.service import InstituteService
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.user import Role, User
from src.infrastructure.notifications.mailer import MailDeliveryError, Mailer
from src.infrastructure.notifications.templates import welcome_email
from src.models.user import AccountCreatedResponse, AccountCreateRequest, UserResponse

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Base exception for registration errors."""

    pass


class EmailAlreadyRegisteredError(RegistrationError):
    """Raised when an email is already used by an account."""

    def __init__(self, emails: list[str]) -> None:
        super().__init__(f"Email already registered: {', '.join(emails)}")
        self.emails = emails


class InstituteRequiredError(RegistrationError):
    """Raised when a director account is requested without an institute."""

    pass


class InstituteMismatchError(RegistrationError):
    """Raised when a director tries to register into another institute."""

    pass


@dataclass
class _PendingAccount:
    user: User
    password: str
    institute_id: str | None


class RegistrationService:
    """Creates accounts with their role records.

    Attributes:
        _db: Async database session.
        _mailer: Sends the welcome email.
        _hasher: Password hasher.
        _login_url: Link included in the welcome email.
    """

    def __init__(
        self,
        db: AsyncSession,
        mailer: Mailer,
        password_hasher: PasswordHasher | None = None,
        login_url: str = "",
    ) -> None:
        self._db = db
        self._mailer = mailer
        self._hasher = password_hasher or PasswordHasher()
        self._login_url = login_url
        self._institutes = InstituteService(db)

    async def create_admin(self, request: AccountCreateRequest) -> AccountCreatedResponse:
        """Create an admin account. Admins have no role record or institute."""
        (created,) = await self._create_accounts([request], Role.ADMIN, institute_id=None)
        return created

    async def create_director(self, request: AccountCreateRequest) -> AccountCreatedResponse:
        """Create a director for the institute given in the request.

        Raises:
            InstituteRequiredError: If no institute was given.
            InstituteNotFoundError: If the institute does not exist.
            EmailAlreadyRegisteredError: If the email is taken.
        """
        if not request.institute_id:
            raise InstituteRequiredError("Directors must belong to an institute")
        await self._institutes.ensure_exists(request.institute_id)

        (created,) = await self._create_accounts(
            [request], Role.DIRECTOR, institute_id=request.institute_id
        )
        return created

    async def create_teacher(
        self,
        request: AccountCreateRequest,
        caller_id: str,
        caller_role: str,
    ) -> AccountCreatedResponse:
        """Create a teacher account.

        Raises:
            InstituteMismatchError: If a director targets another institute.
            InstituteNotFoundError: If the institute does not exist.
            EmailAlreadyRegisteredError: If the email is taken.
        """
        institute_id = await self._resolve_institute(request.institute_id, caller_id, caller_role)
        (created,) = await self._create_accounts([request], Role.TEACHER, institute_id)
        return created

    async def create_students(
        self,
        requests: list[AccountCreateRequest],
        caller_id: str,
        caller_role: str,
    ) -> list[AccountCreatedResponse]:
        """Create one or more student accounts in a single transaction.

        Every account of the batch lands in the same institute: the one of
        the calling director, or the one named by the first request.

        Raises:
            InstituteMismatchError: If a director targets another institute.
            InstituteNotFoundError: If the institute does not exist.
            EmailAlreadyRegisteredError: If any email is taken or repeated.
        """
        requested = {r.institute_id for r in requests if r.institute_id}
        if len(requested) > 1:
            raise InstituteMismatchError("All students of a batch must share one institute")

        institute_id = await self._resolve_institute(
            next(iter(requested), None), caller_id, caller_role
        )
        return await self._create_accounts(requests, Role.STUDENT, institute_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _resolve_institute(
        self,
        requested: str | None,
        caller_id: str,
        caller_role: str,
    ) -> str | None:
        if caller_role == Role.DIRECTOR.value:
            own = await self._db.scalar(
                select(Director.institute_id).where(Director.user_id == caller_id)
            )
            if requested and requested != own:
                raise InstituteMismatchError("Directors can only register into their own institute")
            return own

        if requested:
            await self._institutes.ensure_exists(requested)
        return requested

    async def _create_accounts(
        self,
        requests: list[AccountCreateRequest],
        role: Role,
        institute_id: str | None,
    ) -> list[AccountCreatedResponse]:
        emails = [str(r.email).lower() for r in requests]
        await self._ensure_emails_free(emails)

        pending: list[_PendingAccount] = []
        for request, email in zip(requests, emails):
            password = generate_password()
            user = User(
                first_name=request.first_name,
                last_name=request.last_name,
                email=email,
                password_hash=self._hasher.hash(password),
                role=role.value,
                document_type=request.document_type.value,
                document_number=request.document_number,
                force_password_reset=True,
            )
            self._db.add(user)
            pending.append(_PendingAccount(user=user, password=password, institute_id=institute_id))

        await self._db.flush()

        for account in pending:
            record = self._role_record(account.user, role, institute_id)
            if record is not None:
                self._db.add(record)

        await self._db.commit()

        logger.info(
            "Accounts created: %d %s (institute=%s)", len(pending), role.value, institute_id
        )

        for account in pending:
            await self._send_welcome(account)

        return [
            AccountCreatedResponse(
                user=UserResponse.model_validate(account.user),
                institute_id=account.institute_id,
            )
            for account in pending
        ]

    async def _ensure_emails_free(self, emails: list[str]) -> None:
        repeated = sorted({e for e in emails if emails.count(e) > 1})
        if repeated:
            raise EmailAlreadyRegisteredError(repeated)

        result = await self._db.execute(select(User.email).where(User.email.in_(emails)))
        taken = sorted(result.scalars().all())
        if taken:
            raise EmailAlreadyRegisteredError(taken)

    @staticmethod
    def _role_record(user: User, role: Role, institute_id: str | None):
        if role == Role.STUDENT:
            return Student(user_id=user.id, institute_id=institute_id, courses=[])
        if role == Role.TEACHER:
            return Teacher(user_id=user.id, institute_id=institute_id, courses=[])
        if role == Role.DIRECTOR:
            return Director(user_id=user.id, institute_id=institute_id)
        return None

    async def _send_welcome(self, account: _PendingAccount) -> None:
        content = welcome_email(
            account.user.first_name, account.user.email, account.password, self._login_url
        )
        try:
            await self._mailer.send(account.user.email, content)
        except MailDeliveryError as e:
            logger.warning("Welcome email not delivered to %s: %s", account.user.email, str(e))
