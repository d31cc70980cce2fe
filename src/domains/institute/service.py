# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institute service.

Institutes are created by admins and referenced by every director, teacher
and student record of the school.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.institute import Institute
from src.models.institute import InstituteCreateRequest, InstituteResponse

logger = logging.getLogger(__name__)


class InstituteServiceError(Exception):
    """Base exception for institute service errors."""

    pass


class InstituteNotFoundError(InstituteServiceError):
    """Raised when an institute is not found."""

    pass


class InstituteAlreadyExistsError(InstituteServiceError):
    """Raised when an institute name is already taken."""

    pass


class InstituteService:
    """Create and look up institutes."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_institute(self, request: InstituteCreateRequest) -> InstituteResponse:
        """Create an institute.

        Raises:
            InstituteAlreadyExistsError: If the name is taken.
        """
        existing = await self._db.execute(
            select(Institute.id).where(Institute.name == request.name)
        )
        if existing.scalar_one_or_none():
            raise InstituteAlreadyExistsError(f"Institute '{request.name}' already exists")

        institute = Institute(name=request.name)
        self._db.add(institute)
        await self._db.commit()
        await self._db.refresh(institute)

        logger.info("Institute created: %s (%s)", institute.id, institute.name)
        return InstituteResponse.model_validate(institute)

    async def list_institutes(self) -> list[InstituteResponse]:
        result = await self._db.execute(select(Institute).order_by(Institute.name))
        return [InstituteResponse.model_validate(i) for i in result.scalars().all()]

    async def get_institute(self, institute_id: str) -> InstituteResponse:
        """Get an institute by id.

        Raises:
            InstituteNotFoundError: If it does not exist.
        """
        institute = await self._db.get(Institute, institute_id)
        if institute is None:
            raise InstituteNotFoundError(f"Institute {institute_id} not found")
        return InstituteResponse.model_validate(institute)

    async def ensure_exists(self, institute_id: str) -> None:
        """Raise InstituteNotFoundError unless the institute exists."""
        result = await self._db.execute(
            select(Institute.id).where(Institute.id == institute_id)
        )
        if result.scalar_one_or_none() is None:
            raise InstituteNotFoundError(f"Institute {institute_id} not found")
