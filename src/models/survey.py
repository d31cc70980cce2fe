# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Satisfaction survey schemas."""

from typing import Annotated

from pydantic import Field

from src.models.common import CamelModel

QUESTION_COUNT = 5

Answer = Annotated[int, Field(ge=1, le=5)]


class SurveyRequest(CamelModel):
    answers: list[Answer] = Field(min_length=QUESTION_COUNT, max_length=QUESTION_COUNT)
    free: str | None = Field(default=None, max_length=2000)


class SurveyResponse(CamelModel):
    id: str
    user_id: str
    answers: list[int]
    free: str | None = None


class SurveyPercentages(CamelModel):
    """Share of surveys (0..100) giving each answer 1..5, per question."""

    question1: list[float]
    question2: list[float]
    question3: list[float]
    question4: list[float]
    question5: list[float]


class SurveyResultsResponse(CamelModel):
    total: int
    percentages: SurveyPercentages
