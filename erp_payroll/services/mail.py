"""Mail transport used to deliver payroll notifications."""
from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import Protocol

from erp_payroll.core.config import MailSettings, get_settings
from erp_payroll.core.logger import get_logger

LOGGER = get_logger(__name__)


class MailSender(Protocol):
    """Deliver one plain-text message. Any exception means the send failed."""

    def send(self, to_address: str, subject: str, body: str) -> None: ...


class SmtpMailSender:
    """Send mail through an SMTP relay, one connection per message."""

    def __init__(self, settings: MailSettings) -> None:
        self._settings = settings

    def build_message(self, to_address: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, to_address: str, subject: str, body: str) -> None:
        settings = self._settings
        message = self.build_message(to_address, subject, body)
        LOGGER.debug("Sending mail to %s via %s:%s", to_address, settings.host, settings.port)
        with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as smtp:
            if settings.use_tls:
                smtp.starttls()
            if settings.username:
                smtp.login(settings.username, settings.password or "")
            smtp.send_message(message)


def get_mail_sender() -> MailSender:
    """FastAPI dependency returning the configured SMTP sender."""

    return SmtpMailSender(get_settings().mail)


__all__ = ["MailSender", "SmtpMailSender", "get_mail_sender"]
