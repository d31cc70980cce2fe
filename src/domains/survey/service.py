# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Satisfaction survey service.

Students and teachers answer five questions on a 1..5 scale. One survey is
kept per user (a new answer replaces the old one) and the user is asked
again after the configured interval.

Results are reported per question as the share (0..100) of surveys giving
each answer, scoped to the institute of the caller.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.roles import Director, Student, Teacher
from src.infrastructure.database.models.survey import StudentSurvey, TeacherSurvey
from src.infrastructure.database.models.user import Role, User
from src.models.survey import (
    QUESTION_COUNT,
    SurveyPercentages,
    SurveyRequest,
    SurveyResponse,
    SurveyResultsResponse,
)
from src.utils.datetime import minutes_from_now

logger = logging.getLogger(__name__)

ANSWER_VALUES = 5


class SurveyServiceError(Exception):
    """Base exception for survey service errors."""

    pass


class SurveyNotAllowedError(SurveyServiceError):
    """Raised when the user's role does not answer surveys."""

    pass


class UserNotFoundError(SurveyServiceError):
    """Raised when the submitting user does not exist."""

    pass


def compute_percentages(answer_sets: list[list[int]]) -> SurveyPercentages:
    """Share of surveys giving each answer value, per question.

    Args:
        answer_sets: One list of five answers per survey.

    Returns:
        For each question, five percentages for answers 1..5. All zeros
        when there are no surveys.
    """
    counts = [[0] * ANSWER_VALUES for _ in range(QUESTION_COUNT)]
    for answers in answer_sets:
        for question, answer in enumerate(answers[:QUESTION_COUNT]):
            if 1 <= answer <= ANSWER_VALUES:
                counts[question][answer - 1] += 1

    total = len(answer_sets)
    percentages = [
        [(count / total) * 100 if total else 0.0 for count in question_counts]
        for question_counts in counts
    ]
    return SurveyPercentages(
        **{f"question{index + 1}": values for index, values in enumerate(percentages)}
    )


class SurveyService:
    """Stores surveys and computes their results.

    Attributes:
        _db: Async database session.
        _interval_minutes: Delay before the user is asked again.
    """

    def __init__(self, db: AsyncSession, interval_minutes: int = 1) -> None:
        self._db = db
        self._interval_minutes = interval_minutes

    async def submit(self, user_id: str, role: str, request: SurveyRequest) -> SurveyResponse:
        """Store (or replace) the survey of a student or teacher.

        Raises:
            SurveyNotAllowedError: If the role does not answer surveys.
            UserNotFoundError: If the user does not exist.
        """
        model = self._survey_model(role)

        user = await self._db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        result = await self._db.execute(select(model).where(model.user_id == user_id))
        survey = result.scalar_one_or_none()
        if survey is None:
            survey = model(user_id=user_id, answers=list(request.answers), free=request.free)
            self._db.add(survey)
        else:
            survey.answers = list(request.answers)
            survey.free = request.free

        user.next_survey_date = minutes_from_now(self._interval_minutes)

        await self._db.commit()
        await self._db.refresh(survey)

        logger.info("Survey stored: user=%s role=%s", user_id, role)
        return SurveyResponse.model_validate(survey)

    async def student_results(
        self,
        caller_id: str,
        caller_role: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        course_id: str | None = None,
    ) -> SurveyResultsResponse:
        """Results of the student surveys of the caller's institute."""
        institute_id = await self._caller_institute(caller_id, caller_role)
        if institute_id is None:
            return self._results([])

        stmt = (
            select(StudentSurvey.answers)
            .join(Student, Student.user_id == StudentSurvey.user_id)
            .where(Student.institute_id == institute_id)
        )
        if course_id:
            members = await self._db.scalar(select(Course.students).where(Course.id == course_id))
            member_ids = [member["id"] for member in members or []]
            if not member_ids:
                return self._results([])
            stmt = stmt.where(StudentSurvey.user_id.in_(member_ids))
        stmt = self._date_range(stmt, StudentSurvey, date_from, date_to)

        result = await self._db.execute(stmt)
        return self._results(list(result.scalars().all()))

    async def teacher_results(
        self,
        director_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> SurveyResultsResponse:
        """Results of the teacher surveys of the director's institute."""
        institute_id = await self._caller_institute(director_id, Role.DIRECTOR.value)
        if institute_id is None:
            return self._results([])

        stmt = (
            select(TeacherSurvey.answers)
            .join(Teacher, Teacher.user_id == TeacherSurvey.user_id)
            .where(Teacher.institute_id == institute_id)
        )
        stmt = self._date_range(stmt, TeacherSurvey, date_from, date_to)

        result = await self._db.execute(stmt)
        return self._results(list(result.scalars().all()))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _survey_model(role: str) -> type[StudentSurvey] | type[TeacherSurvey]:
        if role == Role.STUDENT.value:
            return StudentSurvey
        if role == Role.TEACHER.value:
            return TeacherSurvey
        raise SurveyNotAllowedError(f"Role {role} does not answer surveys")

    async def _caller_institute(self, user_id: str, role: str) -> str | None:
        record = {Role.TEACHER.value: Teacher, Role.DIRECTOR.value: Director}.get(role)
        if record is None:
            return None
        return await self._db.scalar(select(record.institute_id).where(record.user_id == user_id))

    @staticmethod
    def _date_range(stmt, model, date_from: datetime | None, date_to: datetime | None):
        if date_from is not None:
            stmt = stmt.where(model.updated_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(model.updated_at <= date_to)
        return stmt

    @staticmethod
    def _results(answer_sets: list[list[int]]) -> SurveyResultsResponse:
        return SurveyResultsResponse(
            total=len(answer_sets),
            percentages=compute_percentages(answer_sets),
        )
