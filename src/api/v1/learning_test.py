# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning style test endpoint.

- POST / - Submit the 12x4 answer matrix and get the learning profile

Example:
    POST /api/v1/test
    {
        "answers": [[4, 3, 2, 1], [1, 2, 3, 4], ...]
    }

    200 {"perfil": "DIVERGENT"}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_student
from src.api.middleware.auth import CurrentUser
from src.domains.learning_test import LearningTestService, StudentNotFoundError
from src.models.learning_test import LearningTestRequest, LearningTestResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=LearningTestResponse,
    summary="Submit learning style test",
    description="Every row ranks the four learning modes with distinct values "
    "summing to 10. A new submission replaces the previous one.",
)
async def submit_test(
    data: LearningTestRequest,
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> LearningTestResponse:
    try:
        profile = await LearningTestService(db).submit(current_user.id, data.answers)
    except StudentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student record not found",
        )
    return LearningTestResponse(perfil=profile)
