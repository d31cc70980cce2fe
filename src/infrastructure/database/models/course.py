# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, section and content models.

Course keeps two denormalized lists:
- students: ``{"id": user_id, "firstName": ..., "lastName": ...}``
- sections: ``{"id": section_id, "name": ..., "description": ...}``
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    JSONList,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class PublicationType(str, Enum):
    """When a content item becomes visible to students."""

    AUTOMATIC = "AUTOMATIC"
    DEFERRED = "DEFERRED"


class Course(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A course owned by one teacher."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    matriculation_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    teacher_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    students: Mapped[list[dict]] = mapped_column(JSONList, nullable=False, default=list)
    sections: Mapped[list[dict]] = mapped_column(JSONList, nullable=False, default=list)

    def has_student(self, user_id: str) -> bool:
        """Check if a student user is enrolled."""
        return any(member["id"] == user_id for member in self.students)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title})>"


class Section(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A section of a course."""

    __tablename__ = "sections"

    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Content(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A published file or text inside a section.

    reactions holds ``{"idStudent": user_id, "isSatisfied": bool}``, at most
    one per student.
    """

    __tablename__ = "contents"

    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    publication_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PublicationType.AUTOMATIC.value,
    )
    publication_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    file: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reactions: Mapped[list[dict]] = mapped_column(JSONList, nullable=False, default=list)
