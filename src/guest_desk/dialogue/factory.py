from __future__ import annotations

import threading
from dataclasses import replace

from guest_desk.dialogue.core.prompts import DEFAULT_CONFIG, DialogueConfig
from guest_desk.dialogue.dispatcher import EffectDispatcher
from guest_desk.dialogue.engine import DialogueEngine
from guest_desk.dialogue.front_desk import FrontDesk
from guest_desk.notify.mailer import SmtpMailer
from guest_desk.notify.messenger import TwilioMessenger
from guest_desk.notify.notifier import Notifier
from guest_desk.settings import Settings
from guest_desk.storage.guest_ledger import ExcelGuestLedger
from guest_desk.storage.sender_registry import JsonFileSnapshot, SenderRegistry
from guest_desk.storage.session_store import SessionStore


_DEFAULT_DESK: FrontDesk | None = None
_DEFAULT_DESK_LOCK = threading.Lock()


def dialogue_config_from(settings: Settings) -> DialogueConfig:
    overrides = {}
    if settings.property_name:
        overrides["property_name"] = settings.property_name
    if settings.promotion_text:
        overrides["promotion_text"] = settings.promotion_text
    return replace(DEFAULT_CONFIG, **overrides) if overrides else DEFAULT_CONFIG


def build_desk(settings: Settings) -> FrontDesk:
    """Wire a FrontDesk with Twilio, SMTP and file-backed storage."""

    messenger = TwilioMessenger(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        whatsapp_from=settings.twilio_whatsapp_number,
    )
    mailer = SmtpMailer(
        username=settings.email_username,
        password=settings.email_password,
        recipients=settings.manager_emails,
        host=settings.smtp_host,
        port=settings.smtp_port,
        timeout=settings.smtp_timeout,
    )
    notifier = Notifier(messenger=messenger, mailer=mailer, manager_number=settings.manager_whatsapp_number)

    return FrontDesk(
        engine=DialogueEngine(config=dialogue_config_from(settings)),
        sessions=SessionStore(),
        registry=SenderRegistry(JsonFileSnapshot(settings.known_senders_path)),
        dispatcher=EffectDispatcher(notifier=notifier, ledger=ExcelGuestLedger(settings.guest_ledger_path)),
        notifier=notifier,
    )


def build_default_desk() -> FrontDesk:
    """Build (and memoize) the desk used by the chat handler and web app."""

    global _DEFAULT_DESK
    if _DEFAULT_DESK is not None:
        return _DEFAULT_DESK

    with _DEFAULT_DESK_LOCK:
        if _DEFAULT_DESK is None:
            _DEFAULT_DESK = build_desk(Settings.from_env())
    return _DEFAULT_DESK
