# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notifications.

- mailer: aiosmtplib delivery with an explicit lifecycle
- templates: welcome, set-password and recovery messages
"""

from src.infrastructure.notifications.mailer import (
    MailDeliveryError,
    Mailer,
    close_mailer,
    get_mailer,
    init_mailer,
)
from src.infrastructure.notifications.templates import EmailContent

__all__ = [
    "EmailContent",
    "MailDeliveryError",
    "Mailer",
    "close_mailer",
    "get_mailer",
    "init_mailer",
]
