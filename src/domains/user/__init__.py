# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package.

This package provides user management functionality:
- UserService: lookup, listing and profile updates
- RoleTransitionManager: role changes with their cascades

Example:
    >>> from src.domains.user import UserService
    >>> service = UserService(db)
    >>> user = await service.change_role(user_id, Role.TEACHER)
"""

from src.domains.user.role_transition import (
    ALLOWED_TRANSITIONS,
    InvalidTransitionError,
    PersistenceError,
    RoleRecordNotFoundError,
    RoleTransitionError,
    RoleTransitionManager,
)
from src.domains.user.service import (
    UserAlreadyExistsError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "UserService",
    "UserServiceError",
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "ALLOWED_TRANSITIONS",
    "RoleTransitionManager",
    "RoleTransitionError",
    "InvalidTransitionError",
    "RoleRecordNotFoundError",
    "PersistenceError",
]
