# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, section and content schemas."""

from datetime import datetime
from typing import Self

from pydantic import EmailStr, Field, model_validator

from src.infrastructure.database.models.course import PublicationType
from src.models.common import CamelModel

# =============================================================================
# Denormalized links
# =============================================================================


class CourseLink(CamelModel):
    """Course reference stored on student and teacher records."""

    id: str
    course_name: str


class CourseMember(CamelModel):
    """Student reference stored on a course."""

    id: str
    first_name: str
    last_name: str


class SectionLink(CamelModel):
    """Section reference stored on a course."""

    id: str
    name: str
    description: str | None = None


# =============================================================================
# Courses
# =============================================================================


class CourseCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    image: str | None = Field(default=None, max_length=1024)
    student_emails: list[EmailStr] = Field(default_factory=list)


class CourseResponse(CamelModel):
    id: str
    title: str
    description: str | None = None
    image: str | None = None
    matriculation_code: str
    teacher_id: str
    students: list[CourseMember] = Field(default_factory=list)
    sections: list[SectionLink] = Field(default_factory=list)


class CourseCreatedResponse(CamelModel):
    """Created course and the emails that matched no student."""

    course: CourseResponse
    not_enrolled: list[str] = Field(default_factory=list)


# =============================================================================
# Sections
# =============================================================================


class SectionCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    visible: bool = True


class SectionUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    visible: bool | None = None


class SectionResponse(CamelModel):
    id: str
    course_id: str
    name: str
    description: str | None = None
    visible: bool


# =============================================================================
# Contents
# =============================================================================


class ContentCreateRequest(CamelModel):
    """New content item.

    DEFERRED items need a publication date; AUTOMATIC items are published
    immediately and any date sent is kept for reference only.
    """

    title: str = Field(min_length=1, max_length=255)
    publication_type: PublicationType = PublicationType.AUTOMATIC
    publication_date: datetime | None = None
    file: str | None = Field(default=None, max_length=1024)

    @model_validator(mode="after")
    def _deferred_needs_date(self) -> Self:
        if self.publication_type == PublicationType.DEFERRED and self.publication_date is None:
            raise ValueError("publicationDate is required for DEFERRED content")
        return self


class Reaction(CamelModel):
    id_student: str
    is_satisfied: bool


class ReactionRequest(CamelModel):
    is_satisfied: bool


class ContentResponse(CamelModel):
    id: str
    section_id: str
    title: str
    publication_type: PublicationType
    publication_date: datetime | None = None
    file: str | None = None
    visible: bool
    reactions: list[Reaction] = Field(default_factory=list)


class SectionDetailResponse(SectionResponse):
    """Section with the contents visible to the caller."""

    contents: list[ContentResponse] = Field(default_factory=list)
