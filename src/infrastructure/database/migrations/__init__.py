# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Alembic environment and revisions for the single application database.
Configured by alembic.ini at the repository root.
"""
