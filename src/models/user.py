# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and account schemas."""

from datetime import datetime
from typing import Self

from pydantic import EmailStr, Field, field_validator, model_validator

from src.infrastructure.database.models.user import DocumentType, Role
from src.models.common import (
    DNI_PATTERN,
    PASSPORT_PATTERN,
    CamelModel,
    validate_person_name,
)


class UserResponse(CamelModel):
    """Public view of a user."""

    id: str
    first_name: str
    last_name: str
    email: str
    role: Role
    document_type: DocumentType | None = None
    document_number: str | None = None
    force_password_reset: bool = False
    next_survey_date: datetime | None = None


class UserUpdateRequest(CamelModel):
    """Fields a user may change on their own account."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, value: str | None) -> str | None:
        return validate_person_name(value) if value is not None else None


class ChangeRoleRequest(CamelModel):
    """Body of the role change endpoint."""

    new_role: Role


class AccountCreateRequest(CamelModel):
    """Data needed to open any kind of account.

    institute_id is optional for callers that are directors: their own
    institute is used instead.
    """

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    document_type: DocumentType = DocumentType.DNI
    document_number: str = Field(min_length=1, max_length=20)
    institute_id: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, value: str) -> str:
        return validate_person_name(value)

    @model_validator(mode="after")
    def _document_number_matches_type(self) -> Self:
        pattern = DNI_PATTERN if self.document_type == DocumentType.DNI else PASSPORT_PATTERN
        if not pattern.match(self.document_number):
            if self.document_type == DocumentType.DNI:
                raise ValueError("DNI must be 1 to 8 digits")
            raise ValueError("passport number must be alphanumeric")
        return self


class BulkAccountCreateRequest(CamelModel):
    """Several accounts created in one transaction."""

    accounts: list[AccountCreateRequest] = Field(min_length=1, max_length=500)


class AccountCreatedResponse(CamelModel):
    """Result of an account creation."""

    user: UserResponse
    institute_id: str | None = None
