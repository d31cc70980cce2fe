# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account registration domain package."""

from src.domains.registration.service import (
    EmailAlreadyRegisteredError,
    InstituteMismatchError,
    InstituteRequiredError,
    RegistrationError,
    RegistrationService,
)

__all__ = [
    "RegistrationService",
    "RegistrationError",
    "EmailAlreadyRegisteredError",
    "InstituteMismatchError",
    "InstituteRequiredError",
]
