# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content reaction endpoints.

- POST /{content_id}/reactions - Record the calling student's reaction
- GET /{content_id}/reactions - List reactions
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth, require_student
from src.api.middleware.auth import CurrentUser
from src.domains.content.service import ContentNotFoundError, ContentService
from src.domains.course.service import CourseAccessDeniedError, CourseNotFoundError
from src.models.course import Reaction, ReactionRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{content_id}/reactions",
    response_model=list[Reaction],
    summary="React to content",
    description="One reaction per student; reacting again replaces it.",
)
async def react(
    content_id: str,
    data: ReactionRequest,
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> list[Reaction]:
    try:
        return await ContentService(db).react(content_id, current_user.id, data)
    except (ContentNotFoundError, CourseNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    except CourseAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.get(
    "/{content_id}/reactions",
    response_model=list[Reaction],
    summary="List reactions",
)
async def get_reactions(
    content_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[Reaction]:
    try:
        return await ContentService(db).get_reactions(
            content_id, current_user.id, current_user.role
        )
    except (ContentNotFoundError, CourseNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    except CourseAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
