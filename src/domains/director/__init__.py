# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Director domain package."""

from src.domains.director.service import (
    DirectorNotFoundError,
    DirectorService,
    DirectorServiceError,
    DirectorSummary,
)

__all__ = ["DirectorService", "DirectorServiceError", "DirectorNotFoundError", "DirectorSummary"]
