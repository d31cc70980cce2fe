# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import Base, TimestampMixin, utc_now
from src.infrastructure.database.models.course import Content, Course, PublicationType, Section
from src.infrastructure.database.models.institute import Institute
from src.infrastructure.database.models.learning_test import LearningTest
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.survey import StudentSurvey, TeacherSurvey
from src.infrastructure.database.models.user import DocumentType, Role, User

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    # Accounts
    "User",
    "Role",
    "DocumentType",
    "Institute",
    "Student",
    "Teacher",
    "Director",
    # Courses
    "Course",
    "Section",
    "Content",
    "PublicationType",
    # Assessments
    "LearningTest",
    "StudentSurvey",
    "TeacherSurvey",
]
