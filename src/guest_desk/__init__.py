from guest_desk.chat.handler import broadcast_message, handle_incoming_message

__all__ = ["broadcast_message", "handle_incoming_message"]
