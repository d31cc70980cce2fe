# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer.

- database: Async SQLAlchemy connection, models, migrations, seeds
- notifications: Outgoing email
- background: Periodic jobs (APScheduler)
"""
