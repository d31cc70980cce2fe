# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section service.

Sections belong to one course and are mirrored on the course as
``{"id", "name", "description"}`` entries. Only the owning teacher edits
them; anyone with course access reads them. Students only see visible
sections and visible content.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.course.service import CourseService
from src.infrastructure.database.models.course import Content, Course, Section
from src.infrastructure.database.models.user import Role
from src.models.course import (
    ContentResponse,
    SectionCreateRequest,
    SectionDetailResponse,
    SectionResponse,
    SectionUpdateRequest,
)

logger = logging.getLogger(__name__)


class SectionServiceError(Exception):
    """Base exception for section service errors."""

    pass


class SectionNotFoundError(SectionServiceError):
    """Raised when a section is not found in the given course."""

    pass


def _section_link(section: Section) -> dict:
    return {"id": section.id, "name": section.name, "description": section.description}


class SectionService:
    """Create, edit, delete and read sections."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._courses = CourseService(db)

    async def create_section(
        self,
        course_id: str,
        teacher_user_id: str,
        request: SectionCreateRequest,
    ) -> SectionResponse:
        """Add a section to an owned course.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
        """
        course = await self._courses.get_owned_course(course_id, teacher_user_id)

        section = Section(
            course_id=course.id,
            name=request.name,
            description=request.description,
            visible=request.visible,
        )
        self._db.add(section)
        await self._db.flush()

        course.sections = [*course.sections, _section_link(section)]
        await self._db.commit()
        await self._db.refresh(section)

        logger.info("Section created: %s in course %s", section.id, course.id)
        return SectionResponse.model_validate(section)

    async def update_section(
        self,
        course_id: str,
        section_id: str,
        teacher_user_id: str,
        request: SectionUpdateRequest,
    ) -> SectionResponse:
        """Update name, description or visibility of a section.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
            SectionNotFoundError: If the section is not in the course.
        """
        course = await self._courses.get_owned_course(course_id, teacher_user_id)
        section = await self._get_section(course, section_id)

        if request.name is not None:
            section.name = request.name
        if request.description is not None:
            section.description = request.description
        if request.visible is not None:
            section.visible = request.visible

        course.sections = [
            _section_link(section) if link["id"] == section.id else link
            for link in course.sections
        ]
        await self._db.commit()
        await self._db.refresh(section)

        logger.info("Section updated: %s", section.id)
        return SectionResponse.model_validate(section)

    async def delete_section(self, course_id: str, section_id: str, teacher_user_id: str) -> None:
        """Delete a section with all its content.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
            SectionNotFoundError: If the section is not in the course.
        """
        course = await self._courses.get_owned_course(course_id, teacher_user_id)
        section = await self._get_section(course, section_id)

        await self._db.execute(
            delete(Content)
            .where(Content.section_id == section.id)
            .execution_options(synchronize_session=False)
        )
        course.sections = [link for link in course.sections if link["id"] != section.id]
        await self._db.delete(section)
        await self._db.commit()

        logger.info("Section deleted: %s from course %s", section_id, course_id)

    async def get_section(
        self,
        course_id: str,
        section_id: str,
        user_id: str,
        role: str,
    ) -> SectionDetailResponse:
        """Get a section with its content.

        Students get visible content of visible sections only.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the caller has no access.
            SectionNotFoundError: If the section is not in the course.
        """
        course = await self._courses.get_accessible_course(course_id, user_id, role)
        section = await self._get_section(course, section_id)

        is_student = role == Role.STUDENT.value
        if is_student and not section.visible:
            raise SectionNotFoundError(f"Section {section_id} not found")

        stmt = select(Content).where(Content.section_id == section.id)
        if is_student:
            stmt = stmt.where(Content.visible.is_(True))
        result = await self._db.execute(stmt.order_by(Content.created_at))

        detail = SectionDetailResponse.model_validate(section)
        detail.contents = [ContentResponse.model_validate(c) for c in result.scalars().all()]
        return detail

    async def _get_section(self, course: Course, section_id: str) -> Section:
        section = await self._db.get(Section, section_id)
        if section is None or section.course_id != course.id:
            raise SectionNotFoundError(f"Section {section_id} not found in course {course.id}")
        return section

