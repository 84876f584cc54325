from __future__ import annotations

from datetime import datetime

import pytest

from guest_desk.dialogue.core.models import InboundMessage
from guest_desk.dialogue.dispatcher import EffectDispatcher
from guest_desk.dialogue.engine import DialogueEngine
from guest_desk.dialogue.front_desk import FrontDesk
from guest_desk.storage.guest_ledger import InMemoryGuestLedger
from guest_desk.storage.sender_registry import MemorySnapshot, SenderRegistry
from guest_desk.storage.session_store import SessionStore


class RecordingNotifier:
    """Stands in for the Twilio/SMTP notifier and remembers every call."""

    def __init__(self, fail_for: set[str] | None = None, fail_email: bool = False):
        self.messages: list[tuple[str, str]] = []
        self.alerts: list[str] = []
        self.emails: list[tuple[str, str]] = []
        self.fail_for = fail_for or set()
        self.fail_email = fail_email

    def send_message(self, to_number: str, body: str) -> bool:
        self.messages.append((to_number, body))
        if to_number in self.fail_for:
            raise RuntimeError(f"provider rejected {to_number}")
        return True

    def alert_manager(self, text: str) -> bool:
        self.alerts.append(text)
        return True

    def send_email(self, subject: str, body: str) -> bool:
        self.emails.append((subject, body))
        return not self.fail_email


class BrokenLedger:
    def append_record(self, record):
        raise OSError("disk full")

    def row_count(self) -> int:
        return 0


def msg(body: str = "", address: str = "whatsapp:+911111111111", media_url: str = "") -> InboundMessage:
    return InboundMessage(address=address, body=body, media_url=media_url, received_at=datetime(2024, 1, 1, 12, 30))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ledger() -> InMemoryGuestLedger:
    return InMemoryGuestLedger()


@pytest.fixture
def snapshot() -> MemorySnapshot:
    return MemorySnapshot()


@pytest.fixture
def desk(notifier, ledger, snapshot) -> FrontDesk:
    return FrontDesk(
        engine=DialogueEngine(),
        sessions=SessionStore(),
        registry=SenderRegistry(snapshot),
        dispatcher=EffectDispatcher(notifier=notifier, ledger=ledger),
        notifier=notifier,
    )
