# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institute model: the tenant boundary."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Institute(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A school. Directors, teachers and students belong to one."""

    __tablename__ = "institutes"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Institute(id={self.id}, name={self.name})>"
