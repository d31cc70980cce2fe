# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Outgoing email over async SMTP.

The Mailer is created once at startup (init_mailer) and injected into the
services that notify users. When SMTP is not configured, or while running
tests, messages are logged instead of sent.

Configuration (via environment variables):
- SMTP_HOST: SMTP server hostname. Mail is disabled when unset.
- SMTP_PORT: SMTP server port (default: 587)
- SMTP_USERNAME / SMTP_PASSWORD: SMTP authentication
- SMTP_USE_TLS: Use STARTTLS (default: true)
- SMTP_SENDER / SMTP_SENDER_NAME: From header
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

import aiosmtplib

from src.core.config.settings import SMTPSettings
from src.infrastructure.notifications.templates import EmailContent

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

_mailer: "Mailer | None" = None


class MailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot take a message."""

    pass


class Mailer:
    """Sends multipart (plain text + HTML) emails.

    Attributes:
        _settings: SMTP configuration.
        _enabled: False to only log messages.
    """

    def __init__(self, settings: SMTPSettings, enabled: bool = True) -> None:
        self._settings = settings
        self._enabled = enabled and settings.is_configured

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send(self, to: str, content: EmailContent) -> bool:
        """Send one email.

        Args:
            to: Recipient address.
            content: Rendered subject and bodies.

        Returns:
            True if handed to the server, False if mail is disabled.

        Raises:
            MailDeliveryError: If the SMTP exchange fails.
        """
        if not self._enabled:
            logger.info("Mail disabled, not sending '%s' to %s", content.subject, to)
            return False

        message = self._build_message(to, content)
        password = self._settings.password.get_secret_value() if self._settings.password else None

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username,
                password=password,
                start_tls=self._settings.use_tls,
                timeout=self._settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Failed to send '{content.subject}' to {to}: {e}") from e

        logger.info("Email sent to %s: %s", to, content.subject)
        return True

    def _build_message(self, to: str, content: EmailContent) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self._settings.sender_name} <{self._settings.sender}>"
        message["To"] = to
        message["Subject"] = content.subject
        message.attach(MIMEText(content.text, "plain", "utf-8"))
        message.attach(MIMEText(content.html, "html", "utf-8"))
        return message


def init_mailer(settings: "Settings") -> Mailer:
    """Create the process-wide mailer. Disabled in the test environment."""
    global _mailer
    _mailer = Mailer(settings.smtp, enabled=not settings.is_test)
    if not _mailer.enabled:
        logger.warning("Email delivery disabled: SMTP_HOST not set or test environment")
    return _mailer


def close_mailer() -> None:
    global _mailer
    _mailer = None


def get_mailer() -> Mailer:
    """Get the process-wide mailer, creating a disabled one if none was initialized."""
    if _mailer is None:
        return Mailer(SMTPSettings(), enabled=False)
    return _mailer
