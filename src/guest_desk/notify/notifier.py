from __future__ import annotations

import logging
from dataclasses import dataclass

from guest_desk.notify.mailer import SmtpMailer
from guest_desk.notify.messenger import TwilioMessenger

logger = logging.getLogger(__name__)


@dataclass
class Notifier:
    """Outbound channel used by the dialogue: guest messages, manager alerts, email."""

    messenger: TwilioMessenger
    mailer: SmtpMailer
    manager_number: str | None = None

    def send_message(self, to_number: str, body: str) -> bool:
        return self.messenger.send_message(to_number, body)

    def alert_manager(self, text: str) -> bool:
        if not self.manager_number:
            logger.warning("No manager number configured; alert dropped: %s", text)
            return False
        return self.messenger.send_message(self.manager_number, text)

    def send_email(self, subject: str, body: str) -> bool:
        return self.mailer.send_email(subject, body)
