# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the AdaptarIA API.

Settings are Pydantic models loaded from environment variables.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from src.core.config.settings import (
    AdminSeedSettings,
    APISettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    RateLimitSettings,
    SchedulerSettings,
    Settings,
    SMTPSettings,
    SurveySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "AdminSeedSettings",
    "APISettings",
    "CORSSettings",
    "DatabaseSettings",
    "JWTSettings",
    "RateLimitSettings",
    "SchedulerSettings",
    "SMTPSettings",
    "SurveySettings",
]
