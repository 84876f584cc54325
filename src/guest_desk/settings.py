from __future__ import annotations

import os
from dataclasses import dataclass, field


def get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_list_env(name: str) -> list[str]:
    raw = os.getenv(name) or ""
    return [part.strip() for part in raw.split(",") if part.strip()]


def _get_env(name: str, default: str | None = None) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or default


@dataclass(frozen=True)
class Settings:
    # Twilio
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_whatsapp_number: str | None = None
    manager_whatsapp_number: str | None = None

    # Mail relay
    email_username: str | None = None
    email_password: str | None = None
    manager_emails: list[str] = field(default_factory=list)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout: int = 25

    # Files
    known_senders_path: str = "users.json"
    guest_ledger_path: str = "guests.xlsx"

    # Dialogue
    property_name: str | None = None
    promotion_text: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            twilio_account_sid=_get_env("TWILIO_ACCOUNT_SID"),
            twilio_auth_token=_get_env("TWILIO_AUTH_TOKEN"),
            twilio_whatsapp_number=_get_env("TWILIO_WHATSAPP_NUMBER"),
            manager_whatsapp_number=_get_env("MANAGER_WHATSAPP_NUMBER"),
            email_username=_get_env("EMAIL_USERNAME"),
            email_password=_get_env("EMAIL_PASSWORD"),
            manager_emails=_get_list_env("MANAGER_EMAIL"),
            smtp_host=_get_env("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=get_int_env("SMTP_PORT", 587),
            smtp_timeout=get_int_env("SMTP_TIMEOUT", 25),
            known_senders_path=_get_env("KNOWN_SENDERS_PATH", "users.json"),
            guest_ledger_path=_get_env("GUEST_LEDGER_PATH", "guests.xlsx"),
            property_name=_get_env("PROPERTY_NAME"),
            promotion_text=_get_env("PROMOTION_TEXT"),
        )
