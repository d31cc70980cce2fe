# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institute schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from src.models.common import CamelModel


class InstituteCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class InstituteResponse(CamelModel):
    id: str
    name: str
    created_at: datetime | None = None
