# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kolb learning-style classifier.

Column sums of the answer matrix give the four learning-mode scores:

    EC  concrete experience        (column 0)
    OR  reflective observation     (column 1)
    CA  abstract conceptualization (column 2)
    EA  active experimentation     (column 3)

Each style is the quadrant between two adjacent modes and is scored by the
euclidean norm of that pair. The style with the largest norm wins; ties are
broken uniformly at random.

Example:
    >>> from src.models.learning_test import AnswerMatrix
    >>> matrix = AnswerMatrix([[4, 2, 3, 1]] * 12)
    >>> classify(matrix)
    <LearningProfile.DIVERGENT: 'DIVERGENT'>
"""

import math
import random
from dataclasses import dataclass

from src.models.learning_test import AnswerMatrix, LearningProfile


@dataclass(frozen=True)
class ModeScores:
    """Column sums of an answer matrix."""

    ec: int
    or_: int
    ca: int
    ea: int

    @classmethod
    def from_rows(cls, rows: list[list[int]]) -> "ModeScores":
        ec, or_, ca, ea = (sum(row[col] for row in rows) for col in range(4))
        return cls(ec=ec, or_=or_, ca=ca, ea=ea)


def profile_distances(scores: ModeScores) -> dict[LearningProfile, float]:
    """Norm of each style quadrant, keyed by profile."""
    return {
        LearningProfile.DIVERGENT: math.sqrt(scores.or_**2 + scores.ec**2),
        LearningProfile.ASSIMILATOR: math.sqrt(scores.or_**2 + scores.ca**2),
        LearningProfile.ACCOMMODATOR: math.sqrt(scores.ea**2 + scores.ec**2),
        LearningProfile.CONVERGENT: math.sqrt(scores.ea**2 + scores.ca**2),
    }


def classify(matrix: AnswerMatrix, rng: random.Random | None = None) -> LearningProfile:
    """Classify a validated answer matrix into a learning profile.

    Args:
        matrix: Validated 12x4 answer matrix.
        rng: Random source used only to break ties. Defaults to the
            module-level generator.

    Returns:
        The profile with the largest distance.
    """
    distances = profile_distances(ModeScores.from_rows(matrix.rows))
    best = max(distances.values())
    # Integer sums of squares: equal norms are exactly equal floats
    tied = [profile for profile, distance in distances.items() if distance == best]
    if len(tied) == 1:
        return tied[0]
    return (rng or random).choice(tied)
