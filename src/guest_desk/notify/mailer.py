from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Plain-text notification email over an authenticated STARTTLS relay."""

    def __init__(
        self,
        username: str | None,
        password: str | None,
        recipients: Sequence[str],
        host: str = "smtp.gmail.com",
        port: int = 587,
        timeout: int = 25,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.username = username or ""
        self.password = password or ""
        self.recipients = [r for r in recipients if r]
        self.host = host
        self.port = port
        self.timeout = timeout
        self._smtp_factory = smtp_factory

    def is_configured(self) -> bool:
        return bool(self.host and self.username and self.password and self.recipients)

    def send_email(self, subject: str, body: str) -> bool:
        if not self.is_configured():
            logger.error("Email relay is not configured; '%s' not sent", subject)
            return False

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject[:200]
        msg["From"] = self.username
        msg["To"] = ", ".join(self.recipients)
        try:
            with self._smtp_factory(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.username, self.recipients, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email '%s': %s", subject, e)
            return False

        logger.info("Email '%s' sent to %s", subject, ", ".join(self.recipients))
        return True
