# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email bodies sent to users.

Each builder returns the subject with a plain text and an HTML body.
Every user supplied value is escaped before it reaches the HTML.
"""

from dataclasses import dataclass
from html import escape


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text: str
    html: str


def _layout(title: str, body_html: str, action_url: str | None, action_label: str | None) -> str:
    action_button = ""
    if action_url:
        action_button = f"""
            <div style="margin: 24px 0;">
                <a href="{escape(action_url, quote=True)}"
                   style="background-color: #0F766E; color: white;
                          padding: 12px 24px; text-decoration: none;
                          border-radius: 6px; font-weight: 500;">
                    {escape(action_label or action_url)}
                </a>
            </div>
            """

    html = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #1F2937;
             margin: 0; padding: 0; background-color: #F3F4F6;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background-color: white; border-radius: 8px; padding: 32px;">
            <h1 style="color: #0F766E; font-size: 22px; margin: 0 0 24px 0;">
                {escape(title)}
            </h1>
            <div style="font-size: 16px; color: #374151;">
                {body_html}
            </div>
            {action_button}
            <p style="border-top: 1px solid #E5E7EB; padding-top: 16px;
                      font-size: 12px; color: #9CA3AF;">
                AdaptarIA
            </p>
        </div>
    </div>
</body>
</html>
    """
    return html.strip()


def welcome_email(first_name: str, email: str, password: str, login_url: str) -> EmailContent:
    """Credentials for a freshly created account."""
    subject = "Bienvenido a AdaptarIA"
    text = "\n".join([
        f"Hola {first_name},",
        "",
        "Se creó tu cuenta en AdaptarIA.",
        f"Usuario: {email}",
        f"Contraseña temporal: {password}",
        "",
        f"Ingresá en {login_url} y elegí una nueva contraseña.",
    ])
    body = (
        f"<p>Hola {escape(first_name)},</p>"
        "<p>Se creó tu cuenta en AdaptarIA.</p>"
        f"<p><strong>Usuario:</strong> {escape(email)}<br>"
        f"<strong>Contraseña temporal:</strong> <code>{escape(password)}</code></p>"
        "<p>Al ingresar te pediremos que elijas una nueva contraseña.</p>"
    )
    return EmailContent(subject, text, _layout(subject, body, login_url, "Ingresar"))


def set_password_email(first_name: str, link: str) -> EmailContent:
    """Link sent on first login to replace the temporary password."""
    subject = "Elegí tu contraseña"
    text = "\n".join([
        f"Hola {first_name},",
        "",
        "Para terminar de activar tu cuenta elegí una contraseña nueva:",
        link,
        "",
        "El enlace vence en 24 horas.",
    ])
    body = (
        f"<p>Hola {escape(first_name)},</p>"
        "<p>Para terminar de activar tu cuenta elegí una contraseña nueva.</p>"
        "<p>El enlace vence en 24 horas.</p>"
    )
    return EmailContent(subject, text, _layout(subject, body, link, "Elegir contraseña"))


def password_recovery_email(first_name: str, link: str, expires_minutes: int) -> EmailContent:
    """Recovery link requested from the login screen."""
    subject = "Recuperación de contraseña"
    text = "\n".join([
        f"Hola {first_name},",
        "",
        "Recibimos un pedido para restablecer tu contraseña:",
        link,
        "",
        f"El enlace vence en {expires_minutes} minutos. Si no lo pediste, ignorá este mensaje.",
    ])
    body = (
        f"<p>Hola {escape(first_name)},</p>"
        "<p>Recibimos un pedido para restablecer tu contraseña.</p>"
        f"<p>El enlace vence en {expires_minutes} minutos. "
        "Si no lo pediste, ignorá este mensaje.</p>"
    )
    return EmailContent(subject, text, _layout(subject, body, link, "Restablecer contraseña"))
