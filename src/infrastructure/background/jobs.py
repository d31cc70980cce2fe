# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Periodic jobs run by the in-process scheduler."""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models.course import Content
from src.utils.datetime import utc_now
from src.utils.logging import get_logger

logger = get_logger(__name__)


async def publish_due_contents(session: AsyncSession) -> int:
    """Make deferred content visible once its publication date is reached.

    Args:
        session: Database session. The caller commits.

    Returns:
        Number of content rows made visible.
    """
    result = await session.execute(
        update(Content)
        .where(
            Content.visible.is_(False),
            Content.publication_date.is_not(None),
            Content.publication_date <= utc_now(),
        )
        .values(visible=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


async def run_publish_due_contents() -> int:
    """Scheduler entry point: one session, one commit."""
    async with get_session() as session:
        published = await publish_due_contents(session)

    if published:
        logger.info("due contents published", count=published)
    else:
        logger.debug("no due contents")
    return published
