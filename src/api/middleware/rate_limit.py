# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Every client gets the configured budget of requests per window (100 per
15 minutes by default). Login is limited per IP address separately.

Example:
    @router.post("")
    @limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses user ID if authenticated, otherwise uses IP address.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


def get_ip_only(request: Request) -> str:
    """Get client IP address only. Used for login, before authentication."""
    return get_remote_address(request)


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[settings.rate_limit.default_limit],
    storage_uri=settings.rate_limit.storage_uri,
    enabled=not settings.is_test,
)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Answer 429 Too Many Requests."""
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    return Response(
        content='{"detail": "Too many requests. Please try again later."}',
        status_code=429,
        media_type="application/json",
        headers={"Retry-After": str(settings.rate_limit.window_minutes * 60)},
    )


# Login attempts per IP
RATE_LIMIT_AUTH = "10/minute"
