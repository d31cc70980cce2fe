# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content service.

Handles content publication inside sections and student reactions.

Publication:
- AUTOMATIC content is visible as soon as it is created.
- DEFERRED content stays hidden until the scheduled publication job
  (src.infrastructure.background.jobs) reaches its publication date.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.course.service import CourseService
from src.domains.section.service import SectionNotFoundError
from src.infrastructure.database.models.course import Content, PublicationType, Section
from src.infrastructure.database.models.user import Role
from src.models.course import ContentCreateRequest, ContentResponse, Reaction, ReactionRequest
from src.utils.datetime import is_due

logger = logging.getLogger(__name__)


class ContentServiceError(Exception):
    """Base exception for content service errors."""

    pass


class ContentNotFoundError(ContentServiceError):
    """Raised when content is not found or not visible to the caller."""

    pass


class ContentService:
    """Publish content and collect reactions."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._courses = CourseService(db)

    async def create_content(
        self,
        course_id: str,
        section_id: str,
        teacher_user_id: str,
        request: ContentCreateRequest,
    ) -> ContentResponse:
        """Add content to a section of an owned course.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If another teacher owns it.
            SectionNotFoundError: If the section is not in the course.
        """
        course = await self._courses.get_owned_course(course_id, teacher_user_id)
        section = await self._db.get(Section, section_id)
        if section is None or section.course_id != course.id:
            raise SectionNotFoundError(f"Section {section_id} not found in course {course_id}")

        deferred = request.publication_type == PublicationType.DEFERRED
        content = Content(
            section_id=section.id,
            title=request.title,
            publication_type=request.publication_type.value,
            publication_date=request.publication_date,
            file=request.file,
            # A deferred date already in the past publishes at once
            visible=not deferred or is_due(request.publication_date),
            reactions=[],
        )
        self._db.add(content)
        await self._db.commit()
        await self._db.refresh(content)

        logger.info(
            "Content created: %s in section %s (type=%s, visible=%s)",
            content.id,
            section.id,
            content.publication_type,
            content.visible,
        )
        return ContentResponse.model_validate(content)

    async def react(self, content_id: str, student_user_id: str, request: ReactionRequest) -> list[Reaction]:
        """Record or replace the student's reaction to a content item.

        Raises:
            ContentNotFoundError: If the content does not exist or is hidden.
            CourseAccessDeniedError: If the student is not enrolled.
        """
        content = await self._get_readable(content_id, student_user_id, Role.STUDENT.value)

        reaction = {"idStudent": student_user_id, "isSatisfied": request.is_satisfied}
        content.reactions = [
            *(r for r in content.reactions if r["idStudent"] != student_user_id),
            reaction,
        ]
        await self._db.commit()

        logger.info("Reaction stored: content=%s student=%s", content_id, student_user_id)
        return [Reaction.model_validate(r) for r in content.reactions]

    async def get_reactions(self, content_id: str, user_id: str, role: str) -> list[Reaction]:
        """List the reactions of a content item.

        Raises:
            ContentNotFoundError: If the content does not exist or is hidden.
            CourseAccessDeniedError: If the caller has no course access.
        """
        content = await self._get_readable(content_id, user_id, role)
        return [Reaction.model_validate(r) for r in content.reactions]

    async def _get_readable(self, content_id: str, user_id: str, role: str) -> Content:
        content = await self._db.get(Content, content_id)
        if content is None:
            raise ContentNotFoundError(f"Content {content_id} not found")

        section = await self._db.get(Section, content.section_id)
        if section is None:
            raise ContentNotFoundError(f"Content {content_id} not found")

        await self._courses.get_accessible_course(section.course_id, user_id, role)

        if role == Role.STUDENT.value and not (content.visible and section.visible):
            raise ContentNotFoundError(f"Content {content_id} not found")
        return content
