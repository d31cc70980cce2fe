# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning test submission.

Stores the latest answer matrix of a student (a resubmission replaces the
previous one), classifies it and saves the resulting profile on the student
record. Both writes share one commit.
"""

import logging
import random

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.learning_test.classifier import classify
from src.infrastructure.database.models.learning_test import LearningTest
from src.infrastructure.database.models.roles import Student
from src.models.learning_test import AnswerMatrix, LearningProfile

logger = logging.getLogger(__name__)


class LearningTestServiceError(Exception):
    """Base exception for learning test errors."""

    pass


class StudentNotFoundError(LearningTestServiceError):
    """Raised when the submitting user has no student record."""

    pass


class LearningTestService:
    """Stores answers and assigns learning profiles.

    Attributes:
        _db: Async database session.
        _rng: Random source for the classifier tie-break.
    """

    def __init__(self, db: AsyncSession, rng: random.Random | None = None) -> None:
        self._db = db
        self._rng = rng

    async def submit(self, user_id: str, answers: AnswerMatrix) -> LearningProfile:
        """Store answers, classify them and update the student's profile.

        Args:
            user_id: Submitting student.
            answers: Validated answer matrix.

        Returns:
            The computed learning profile.

        Raises:
            StudentNotFoundError: If the user has no student record.
        """
        result = await self._db.execute(select(Student).where(Student.user_id == user_id))
        student = result.scalar_one_or_none()
        if student is None:
            raise StudentNotFoundError(f"Student {user_id} not found")

        existing = await self._db.execute(
            select(LearningTest).where(LearningTest.user_id == user_id)
        )
        test = existing.scalar_one_or_none()
        if test is None:
            self._db.add(LearningTest(user_id=user_id, answers=answers.rows))
        else:
            test.answers = answers.rows

        profile = classify(answers, self._rng)
        student.learning_profile = profile.value

        await self._db.commit()

        logger.info("Learning profile assigned: user=%s profile=%s", user_id, profile.value)
        return profile
