# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institute domain package."""

from src.domains.institute.service import (
    InstituteAlreadyExistsError,
    InstituteNotFoundError,
    InstituteService,
    InstituteServiceError,
)

__all__ = [
    "InstituteService",
    "InstituteServiceError",
    "InstituteNotFoundError",
    "InstituteAlreadyExistsError",
]
