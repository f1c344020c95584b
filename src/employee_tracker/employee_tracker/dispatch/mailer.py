from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Sequence

from ..core.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    recipients: Sequence[str]
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class MailSettings:
    server: str = "smtp.sendgrid.net"
    port: int = 587
    username: str = "apikey"
    api_key: Optional[str] = None
    sender: Optional[str] = None
    use_tls: bool = True
    timeout: float = 30.0


class SmtpMailer:
    """Send mail through an API-key SMTP relay (SendGrid by default)."""

    def __init__(self, settings: MailSettings):
        self._settings = settings

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key) and bool(self._settings.sender)

    def build(self, message: MailMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self._settings.sender
        msg["To"] = ", ".join(message.recipients)
        msg.set_content(message.text)
        msg.add_alternative(message.html, subtype="html")
        return msg

    def send(self, message: MailMessage) -> None:
        if not self.configured:
            raise MailDeliveryError("Mail is not configured")
        if not message.recipients:
            raise MailDeliveryError("No recipients")

        s = self._settings
        try:
            with smtplib.SMTP(s.server, int(s.port), timeout=s.timeout) as server:
                if s.use_tls:
                    server.starttls()
                server.login(s.username, s.api_key)
                server.send_message(self.build(message))
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("mail relay failed: %s", e)
            raise MailDeliveryError(f"Mail relay failed: {e.__class__.__name__}") from e

        logger.info("mail sent to %s recipient(s)", len(message.recipients))
