# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section domain package."""

from src.domains.section.service import SectionNotFoundError, SectionService, SectionServiceError

__all__ = ["SectionService", "SectionServiceError", "SectionNotFoundError"]
