import logging
import os

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request

from guest_desk.dialogue.core.models import InboundMessage
from guest_desk.dialogue.factory import build_default_desk
from guest_desk.dialogue.front_desk import FrontDesk
from guest_desk.settings import get_int_env

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_CHARS = 1600


# maximum character limit
def _truncate(text: str, limit: int) -> str:
    if text is None:
        return ""
    text = str(text)
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 1)] + "…"


def _plain(text: str, status: int = 200) -> Response:
    return Response(text, status=status, mimetype="text/plain")


def create_app(desk: FrontDesk | None = None) -> Flask:
    app = Flask(__name__)

    def _desk() -> FrontDesk:
        return desk if desk is not None else build_default_desk()

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

# receives a Twilio webhook, runs one dialogue turn, returns the reply as plain text
    @app.post("/bot")
    @app.post("/whatsapp")
    def webhook():
        address = (request.form.get("From") or "").strip()
        body = request.form.get("Body") or ""
        media_url = (request.form.get("MediaUrl0") or "").strip()

        if not address:
            return _plain("Missing sender", 400)

        max_chars = get_int_env("CHAT_MAX_MESSAGE_CHARS", DEFAULT_MAX_MESSAGE_CHARS)
        body = _truncate(body, max_chars).strip()

        try:
            output = _desk().handle(InboundMessage(address=address, body=body, media_url=media_url))
        except Exception:
            logger.exception("Webhook turn failed for %s", address)
            return _plain("Server error", 500)

        return _plain(output.reply)

# fans a promotion out to every known sender
    @app.get("/broadcast")
    def broadcast():
        message = (request.args.get("msg") or "").strip()
        if not message:
            return _plain("Missing message", 400)

        delivered = _desk().broadcast(message)
        return _plain(f"Broadcast sent to {delivered} recipient(s)")

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()

    host = os.getenv("HOST", "127.0.0.1")
    port = get_int_env("PORT", 8080)
    debug = os.getenv("FLASK_DEBUG", "").strip() == "1"

    app.run(host=host, port=port, debug=debug)
