# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model.

A user holds exactly one role. Role specific data (institute, enrolled
courses, learning profile) lives in the matching role record, see
src.infrastructure.database.models.roles. Admins have no role record.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.utils.datetime import is_due


class Role(str, Enum):
    """User roles."""

    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class DocumentType(str, Enum):
    """Identity document kinds."""

    DNI = "DNI"
    PASSPORT = "Pasaporte"


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Platform account."""

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    document_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    document_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    force_password_reset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    next_survey_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}"

    @property
    def requires_survey(self) -> bool:
        """Whether the user should be asked to fill the satisfaction survey."""
        if self.role not in (Role.STUDENT.value, Role.TEACHER.value):
            return False
        return self.next_survey_date is None or is_due(self.next_survey_date)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
