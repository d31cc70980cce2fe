# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-03-01

Creates institutes, users, role records, courses with their sections and
contents, learning tests and both survey tables.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _user_fk(unique: bool = True) -> sa.Column:
    return sa.Column(
        "user_id",
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        unique=unique,
        nullable=False,
    )


def _institute_fk() -> sa.Column:
    return sa.Column(
        "institute_id",
        sa.String(36),
        sa.ForeignKey("institutes.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    """Create all tables."""
    # ==========================================================================
    # 1. institutes
    # ==========================================================================
    op.create_table(
        "institutes",
        _id(),
        sa.Column("name", sa.String(255), unique=True, nullable=False),
        *_timestamps(),
    )

    # ==========================================================================
    # 2. users
    # ==========================================================================
    op.create_table(
        "users",
        _id(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("document_type", sa.String(20), nullable=True),
        sa.Column("document_number", sa.String(20), nullable=True),
        sa.Column("force_password_reset", sa.Boolean, nullable=False),
        sa.Column("next_survey_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # ==========================================================================
    # 3. role records
    # ==========================================================================
    op.create_table(
        "students",
        _id(),
        _user_fk(),
        _institute_fk(),
        sa.Column("learning_profile", sa.String(20), nullable=True),
        sa.Column("courses", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_students_institute_id", "students", ["institute_id"])

    op.create_table(
        "teachers",
        _id(),
        _user_fk(),
        _institute_fk(),
        sa.Column("courses", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_teachers_institute_id", "teachers", ["institute_id"])

    op.create_table(
        "directors",
        _id(),
        _user_fk(),
        _institute_fk(),
        *_timestamps(),
    )
    op.create_index("ix_directors_institute_id", "directors", ["institute_id"])

    # ==========================================================================
    # 4. courses, sections, contents
    # ==========================================================================
    op.create_table(
        "courses",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.String(1024), nullable=True),
        sa.Column("matriculation_code", sa.String(32), unique=True, nullable=False),
        sa.Column(
            "teacher_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("students", sa.JSON, nullable=False),
        sa.Column("sections", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_courses_teacher_id", "courses", ["teacher_id"])

    op.create_table(
        "sections",
        _id(),
        sa.Column(
            "course_id",
            sa.String(36),
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("visible", sa.Boolean, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_sections_course_id", "sections", ["course_id"])

    op.create_table(
        "contents",
        _id(),
        sa.Column(
            "section_id",
            sa.String(36),
            sa.ForeignKey("sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("publication_type", sa.String(20), nullable=False),
        sa.Column("publication_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("file", sa.String(1024), nullable=True),
        sa.Column("visible", sa.Boolean, nullable=False),
        sa.Column("reactions", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_contents_section_id", "contents", ["section_id"])
    op.create_index("ix_contents_publication_date", "contents", ["publication_date"])

    # ==========================================================================
    # 5. learning tests and surveys
    # ==========================================================================
    op.create_table(
        "learning_tests",
        _id(),
        _user_fk(),
        sa.Column("answers", sa.JSON, nullable=False),
        *_timestamps(),
    )

    for table in ("survey_students", "survey_teachers"):
        op.create_table(
            table,
            _id(),
            _user_fk(),
            sa.Column("answers", sa.JSON, nullable=False),
            sa.Column("free", sa.Text, nullable=True),
            *_timestamps(),
        )


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "survey_teachers",
        "survey_students",
        "learning_tests",
        "contents",
        "sections",
        "courses",
        "directors",
        "teachers",
        "students",
        "users",
        "institutes",
    ):
        op.drop_table(table)
