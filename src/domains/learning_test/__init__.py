# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning-style test domain package.

- classifier: pure Kolb classification of an answer matrix
- service: submission, storage and profile assignment
"""

from src.domains.learning_test.classifier import classify
from src.domains.learning_test.service import (
    LearningTestService,
    LearningTestServiceError,
    StudentNotFoundError,
)

__all__ = ["classify", "LearningTestService", "LearningTestServiceError", "StudentNotFoundError"]
