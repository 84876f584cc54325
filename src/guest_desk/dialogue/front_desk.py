from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from guest_desk.dialogue.core.models import EffectResult, InboundMessage, Turn
from guest_desk.dialogue.dispatcher import EffectDispatcher
from guest_desk.dialogue.engine import DialogueEngine
from guest_desk.notify.notifier import Notifier
from guest_desk.storage.sender_registry import SenderRegistry
from guest_desk.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


def _label(value: Any) -> str | None:
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class DeskOutput:
    reply: str
    effects: list[EffectResult]
    trace: list[dict[str, Any]]
    debug: dict[str, Any] = field(default_factory=dict)


@dataclass
class FrontDesk:
    engine: DialogueEngine
    sessions: SessionStore
    registry: SenderRegistry
    dispatcher: EffectDispatcher
    notifier: Notifier

    def handle(self, message: InboundMessage) -> DeskOutput:
        trace: list[dict[str, Any]] = []

        def emit(stage: str, msg: str, data: dict[str, Any] | None = None) -> None:
            trace.append({"ts": time.time(), "stage": stage, "message": msg, "data": data})

        logger.info("Incoming from %s: %r", message.address, message.body)
        emit("input", "received message", {"chars": len(message.body), "media": bool(message.media_url)})

        self.registry.mark_seen(message.address)

        with self.sessions.turn(message.address):
            session = self.sessions.get_or_create(message.address)
            emit("session", "loaded session", {"state": _label(session.state), "step": _label(session.step)})

            turn: Turn = self.engine.step(session, message)

            if turn.session is None:
                self.sessions.reset(message.address)
                emit("session", "flow finished, session deleted")
            else:
                self.sessions.replace(message.address, turn.session)
                emit("session", "stored session", {"state": _label(turn.session.state), "step": _label(turn.session.step)})

        results = self.dispatcher.dispatch(turn.effects)
        emit("effects", "dispatched side effects", {"results": [{"kind": r.kind, "ok": r.ok} for r in results]})
        for r in results:
            if not r.ok:
                logger.warning("Side effect %s for %s failed: %s", r.kind, message.address, r.error)

        debug: dict[str, Any] = {
            "effects": [{"kind": r.kind, "ok": r.ok, "error": r.error} for r in results],
            "session_deleted": turn.session is None,
            "trace": trace,
        }
        if turn.session is not None:
            debug["state"] = _label(turn.session.state)
            debug["step"] = _label(turn.session.step)

        return DeskOutput(reply=turn.reply, effects=results, trace=trace, debug=debug)

    def broadcast(self, message: str) -> int:
        return self.registry.broadcast(message, self.notifier.send_message)
