# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Satisfaction survey endpoints.

- POST / - Answer the survey (students and teachers)
- GET /student-results - Student survey results (teachers and directors)
- GET /teacher-results - Teacher survey results (directors)

Results are scoped to the caller's institute.
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import (
    get_survey_service,
    require_director,
    require_survey_respondent,
    require_teacher_or_director,
)
from src.api.middleware.auth import CurrentUser
from src.domains.survey.service import SurveyNotAllowedError, SurveyService, UserNotFoundError
from src.models.survey import SurveyRequest, SurveyResponse, SurveyResultsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SurveyResponse,
    summary="Answer survey",
    description="Five answers from 1 to 5 and an optional comment. Replaces "
    "the previous answer and schedules the next survey.",
)
async def submit_survey(
    data: SurveyRequest,
    current_user: CurrentUser = Depends(require_survey_respondent),
    service: SurveyService = Depends(get_survey_service),
) -> SurveyResponse:
    try:
        return await service.submit(current_user.id, current_user.role, data)
    except SurveyNotAllowedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get(
    "/student-results",
    response_model=SurveyResultsResponse,
    summary="Student survey results",
)
async def student_results(
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
    course_id: Annotated[str | None, Query(alias="courseId")] = None,
    current_user: CurrentUser = Depends(require_teacher_or_director),
    service: SurveyService = Depends(get_survey_service),
) -> SurveyResultsResponse:
    return await service.student_results(
        current_user.id,
        current_user.role,
        date_from=date_from,
        date_to=date_to,
        course_id=course_id,
    )


@router.get(
    "/teacher-results",
    response_model=SurveyResultsResponse,
    summary="Teacher survey results",
)
async def teacher_results(
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
    current_user: CurrentUser = Depends(require_director),
    service: SurveyService = Depends(get_survey_service),
) -> SurveyResultsResponse:
    return await service.teacher_results(current_user.id, date_from=date_from, date_to=date_to)
