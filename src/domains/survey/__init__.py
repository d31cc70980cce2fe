# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Survey domain package."""

from src.domains.survey.service import (
    SurveyNotAllowedError,
    SurveyService,
    SurveyServiceError,
    UserNotFoundError,
    compute_percentages,
)

__all__ = [
    "SurveyService",
    "SurveyServiceError",
    "SurveyNotAllowedError",
    "UserNotFoundError",
    "compute_percentages",
]
