"""Chat handler: turn an inbound WhatsApp message into the desk's reply."""

from __future__ import annotations

from guest_desk.dialogue.core.models import InboundMessage
from guest_desk.dialogue.factory import build_default_desk


def handle_incoming_message(address: str, body: str, media_url: str = "", debug: bool = False):
    """Run one dialogue turn for ``address`` on the default desk.

    Public API:
    - If `debug` is False: returns `str`.
    - If `debug` is True: returns `(str, dict)`; the dict carries at least
      `effects` and `trace`.
    """

    desk = build_default_desk()
    output = desk.handle(
        InboundMessage(address=address or "", body=(body or "").strip(), media_url=(media_url or "").strip())
    )

    if debug:
        return output.reply, output.debug
    return output.reply


def broadcast_message(message: str) -> int:
    """Send ``message`` to every sender the desk has seen; returns deliveries."""

    return build_default_desk().broadcast(message)
