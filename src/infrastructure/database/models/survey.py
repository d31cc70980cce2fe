# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Satisfaction survey answers.

Students and teachers answer the same five questions; answers are stored
in separate tables so results can be reported per audience.
"""

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class _SurveyColumns(UUIDPrimaryKeyMixin, TimestampMixin):
    """Columns shared by both survey tables."""

    @declared_attr
    def user_id(cls) -> Mapped[str]:
        return mapped_column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        )

    answers: Mapped[list[int]] = mapped_column(JSON, nullable=False)
    free: Mapped[str | None] = mapped_column(Text, nullable=True)


class StudentSurvey(_SurveyColumns, Base):
    """Survey answered by a student."""

    __tablename__ = "survey_students"


class TeacherSurvey(_SurveyColumns, Base):
    """Survey answered by a teacher."""

    __tablename__ = "survey_teachers"
