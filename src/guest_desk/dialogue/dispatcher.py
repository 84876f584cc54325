from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from guest_desk.dialogue.core.models import (
    EffectResult,
    EmailNotification,
    ManagerAlert,
    RecordGuest,
    SideEffect,
)
from guest_desk.notify.notifier import Notifier
from guest_desk.storage.guest_ledger import GuestLedger

logger = logging.getLogger(__name__)


@dataclass
class EffectDispatcher:
    """Executes the side effects of a Turn, one result per effect."""

    notifier: Notifier
    ledger: GuestLedger

    def dispatch(self, effects: Iterable[SideEffect]) -> list[EffectResult]:
        results: list[EffectResult] = []

        for effect in effects:
            kind = type(effect).__name__
            try:
                if isinstance(effect, ManagerAlert):
                    ok = self.notifier.alert_manager(effect.text)
                    results.append(EffectResult(kind=kind, ok=ok, error=None if ok else "alert not delivered"))

                elif isinstance(effect, EmailNotification):
                    ok = self.notifier.send_email(effect.subject, effect.body)
                    results.append(EffectResult(kind=kind, ok=ok, error=None if ok else "email not sent"))

                elif isinstance(effect, RecordGuest):
                    self.ledger.append_record(effect.record)
                    results.append(EffectResult(kind=kind, ok=True))

                else:
                    raise ValueError(f"unknown side effect: {kind}")

            except Exception as e:
                logger.exception("Side effect %s failed", kind)
                results.append(EffectResult(kind=kind, ok=False, error=str(e)))

        return results
