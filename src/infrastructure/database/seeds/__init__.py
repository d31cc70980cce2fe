# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed data."""

from src.infrastructure.database.seeds.admin import seed_admin

__all__ = ["seed_admin"]
