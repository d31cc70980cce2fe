# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared schema building blocks.

The public API speaks camelCase JSON. Schemas accept both camelCase and
snake_case on input and always emit camelCase.
"""

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Letters (accented included) and single spaces
NAME_PATTERN = re.compile(r"^[^\W\d_]+(?: [^\W\d_]+)*$")
DNI_PATTERN = re.compile(r"^\d{1,8}$")
PASSPORT_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str


def validate_person_name(value: str) -> str:
    """Strip and check that a name holds letters and spaces only.

    Raises:
        ValueError: If the name contains digits or symbols.
    """
    value = " ".join(value.split())
    if not NAME_PATTERN.match(value):
        raise ValueError("must contain letters and spaces only")
    return value
