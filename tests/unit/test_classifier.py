# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the learning-style classifier."""

import math
import random
from unittest.mock import MagicMock

import pytest

from src.domains.learning_test.classifier import ModeScores, classify, profile_distances
from src.models.learning_test import AnswerMatrix, LearningProfile


class TestModeScores:
    """Tests for column sums."""

    def test_column_sums(self, regression_matrix: AnswerMatrix) -> None:
        """Columns map to EC, OR, CA, EA in order."""
        scores = ModeScores.from_rows(regression_matrix.rows)

        assert scores == ModeScores(ec=44, or_=24, ca=37, ea=15)

    def test_sums_add_up_to_total_points(self, regression_matrix: AnswerMatrix) -> None:
        """Twelve rows of ten points each."""
        scores = ModeScores.from_rows(regression_matrix.rows)

        assert scores.ec + scores.or_ + scores.ca + scores.ea == 120


class TestProfileDistances:
    """Tests for the quadrant norms."""

    def test_distances_pair_adjacent_modes(self) -> None:
        """Each profile combines the two modes bounding its quadrant."""
        distances = profile_distances(ModeScores(ec=3, or_=4, ca=5, ea=12))

        assert distances[LearningProfile.DIVERGENT] == 5.0
        assert distances[LearningProfile.ASSIMILATOR] == math.sqrt(41)
        assert distances[LearningProfile.ACCOMMODATOR] == math.sqrt(153)
        assert distances[LearningProfile.CONVERGENT] == 13.0


class TestClassify:
    """Tests for classify()."""

    def test_dominant_profile_is_deterministic(self, regression_matrix: AnswerMatrix) -> None:
        """A strict maximum never consults the random source."""
        rng = MagicMock()

        assert classify(regression_matrix, rng) == LearningProfile.DIVERGENT
        rng.choice.assert_not_called()

    def test_largest_distance_wins(self) -> None:
        """Maximum, not minimum, distance is selected."""
        # EC=12, OR=24, CA=36, EA=48: CONVERGENT has the largest norm
        matrix = AnswerMatrix([[1, 2, 3, 4]] * 12)

        assert classify(matrix) == LearningProfile.CONVERGENT

    def test_four_way_tie_uses_injected_rng(self, balanced_matrix: AnswerMatrix) -> None:
        """Equal sums tie all profiles; the seeded generator picks one."""
        expected = random.Random(7).choice(list(LearningProfile))

        assert classify(balanced_matrix, random.Random(7)) == expected

    def test_two_way_tie_only_offers_tied_profiles(self) -> None:
        """Only the profiles sharing the maximum are candidates."""
        # EC=30, OR=48, CA=30, EA=12: DIVERGENT and ASSIMILATOR tie
        matrix = AnswerMatrix([[3, 4, 2, 1], [2, 4, 3, 1]] * 6)
        rng = MagicMock()
        rng.choice.side_effect = lambda options: options[-1]

        result = classify(matrix, rng)

        rng.choice.assert_called_once_with(
            [LearningProfile.DIVERGENT, LearningProfile.ASSIMILATOR]
        )
        assert result == LearningProfile.ASSIMILATOR

    @pytest.mark.parametrize("seed", range(5))
    def test_tie_result_is_always_a_tied_profile(self, seed: int) -> None:
        """Whatever the seed, the result is one of the tied profiles."""
        matrix = AnswerMatrix([[3, 4, 2, 1], [2, 4, 3, 1]] * 6)

        assert classify(matrix, random.Random(seed)) in {
            LearningProfile.DIVERGENT,
            LearningProfile.ASSIMILATOR,
        }
