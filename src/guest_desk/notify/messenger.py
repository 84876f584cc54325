"""
Twilio WhatsApp messenger used for replies, manager alerts and broadcasts.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from twilio.rest import Client

logger = logging.getLogger(__name__)


def format_whatsapp_number(number: str) -> str:
    """Normalise a phone number into Twilio's ``whatsapp:+<digits>`` form."""
    number = (number or "").strip()
    if number.startswith("whatsapp:"):
        return number
    if number.startswith("+"):
        return f"whatsapp:{number}"

    digits_only = re.sub(r"\D", "", number)
    return f"whatsapp:+{digits_only}"


class TwilioMessenger:
    """Sends WhatsApp text messages through the Twilio REST API."""

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        whatsapp_from: Optional[str],
        client: Any = None,
    ):
        self.account_sid = account_sid or None
        self.auth_token = auth_token or None
        self.whatsapp_from = whatsapp_from or None
        self.client = client

    def is_configured(self) -> bool:
        has_client = self.client is not None or bool(self.account_sid and self.auth_token)
        return bool(has_client and self.whatsapp_from)

    def _ensure_client(self):
        if self.client is not None:
            return self.client
        try:
            self.client = Client(self.account_sid, self.auth_token)
        except Exception as exc:
            logger.error("Failed to initialize Twilio client: %s", exc)
            self.client = None
        return self.client

    def send_message(self, to_number: str, body: str) -> bool:
        """
        Send a plain text WhatsApp message.

        Returns:
            bool: True when Twilio accepted the message. Failures are logged
            and reported as False, never raised.
        """
        if not self.is_configured():
            logger.error("Twilio is not configured; message to %s not sent", to_number)
            return False
        if not to_number:
            logger.error("No recipient given; message not sent")
            return False

        client = self._ensure_client()
        if client is None:
            return False

        formatted_to = format_whatsapp_number(to_number)
        try:
            message = client.messages.create(
                from_=format_whatsapp_number(self.whatsapp_from),
                to=formatted_to,
                body=body,
            )
        except Exception as e:
            logger.error("Failed to send WhatsApp message to %s: %s", formatted_to, e)
            return False

        logger.info("WhatsApp message sent to %s. SID: %s", formatted_to, getattr(message, "sid", None))
        return True
