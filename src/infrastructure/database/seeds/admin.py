# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""First administrator seed.

An empty database has nobody able to create accounts. At startup, when no
admin exists and ADMIN_EMAIL / ADMIN_PASSWORD are set, one is created with
those credentials. The password is used as given, so the account does not
go through the first-login password setup.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import AdminSeedSettings
from src.domains.auth.password import PasswordHasher
from src.infrastructure.database.models.user import Role, User

logger = logging.getLogger(__name__)


async def seed_admin(
    session: AsyncSession,
    settings: AdminSeedSettings,
    password_hasher: PasswordHasher | None = None,
) -> User | None:
    """Create the first admin if none exists.

    Args:
        session: Database session. The caller commits.
        settings: Credentials of the admin to create.
        password_hasher: Password hasher.

    Returns:
        The created admin, or None when nothing was done.
    """
    if not settings.email or settings.password is None:
        logger.info("ADMIN_EMAIL / ADMIN_PASSWORD not set, skipping admin seed")
        return None

    existing = await session.scalar(select(User.id).where(User.role == Role.ADMIN.value).limit(1))
    if existing is not None:
        logger.info("Admin already exists, skipping seed")
        return None

    hasher = password_hasher or PasswordHasher()
    admin = User(
        first_name=settings.first_name,
        last_name=settings.last_name,
        email=settings.email.lower(),
        password_hash=hasher.hash(settings.password.get_secret_value()),
        role=Role.ADMIN.value,
        force_password_reset=False,
    )
    session.add(admin)
    await session.flush()

    logger.info("Initial admin created: %s", admin.email)
    return admin
