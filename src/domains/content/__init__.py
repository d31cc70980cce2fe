# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content domain package."""

from src.domains.content.service import ContentNotFoundError, ContentService, ContentServiceError

__all__ = ["ContentService", "ContentServiceError", "ContentNotFoundError"]
