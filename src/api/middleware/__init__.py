# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

- AuthMiddleware: session token authentication.
- limiter: slowapi rate limiter.
"""

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from src.api.middleware.rate_limit import (
    RATE_LIMIT_AUTH,
    get_ip_only,
    limiter,
    rate_limit_exceeded_handler,
)

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "limiter",
    "rate_limit_exceeded_handler",
    "get_ip_only",
    "RATE_LIMIT_AUTH",
]
