# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role records.

Each non-admin user has one record matching its role. Students and teachers
keep a denormalized list of course links, ``{"id": ..., "courseName": ...}``,
mirrored by the member list stored on the course.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    JSONList,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Student role record."""

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    institute_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("institutes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    learning_profile: Mapped[str | None] = mapped_column(String(20), nullable=True)
    courses: Mapped[list[dict]] = mapped_column(JSONList, nullable=False, default=list)

    def course_ids(self) -> list[str]:
        """Ids of the courses the student is enrolled in."""
        return [link["id"] for link in self.courses]


class Teacher(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Teacher role record."""

    __tablename__ = "teachers"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    institute_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("institutes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    courses: Mapped[list[dict]] = mapped_column(JSONList, nullable=False, default=list)


class Director(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Director role record."""

    __tablename__ = "directors"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    institute_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("institutes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
