from __future__ import annotations

from dataclasses import dataclass, field

from guest_desk.dialogue.core.models import State


_LANGUAGE_OPTIONS = "1️⃣ हिंदी\n2️⃣ English"
_MAIN_MENU_OPTIONS = "1️⃣ Registration\n2️⃣ Room Service\n3️⃣ Promotions\n4️⃣ Table Reservation\n5️⃣ Dining Menu"
_ROOM_SERVICE_OPTIONS = "1️⃣ Order Food\n2️⃣ Request Housekeeping\n3️⃣ Report an Issue / Complaint"


def _default_aliases() -> dict[State, dict[str, str]]:
    return {
        State.LANGUAGE_SELECTION: {
            "hindi": "1",
            "हिंदी": "1",
            "english": "2",
        },
        State.MAIN_MENU: {
            "registration": "1",
            "register": "1",
            "reservation": "4",
            "book a table": "4",
            "check-in": "1",
            "room service": "2",
            "promotion": "3",
            "promotions": "3",
            "dining menu": "5",
            "food menu": "5",
        },
        State.ROOM_SERVICE_MENU: {
            "food": "1",
            "order food": "1",
            "housekeeping": "2",
            "complaint": "3",
            "issue": "3",
        },
    }


@dataclass(frozen=True)
class DialogueConfig:
    """Texts and keyword aliases for one deployment of the guest dialogue."""

    property_name: str = "Kamdhenu Sadan"
    tagline: str = "A Sacred Stay in the Heart of Devbhoomi"
    promotion_text: str = "🔥 Special Offer: 20% off this week on all room service orders above ₹500!"
    aliases: dict[State, dict[str, str]] = field(default_factory=_default_aliases)

    # Free text with at least this many commas is taken as a structured reservation.
    reservation_comma_threshold: int = 3

    def resolve_choice(self, state: State, text: str) -> str:
        """Map a keyword alias to its numeric menu choice; numbers pass through."""

        table = self.aliases.get(state) or {}
        return table.get(text.strip().lower(), text)

    def looks_like_reservation(self, text: str) -> bool:
        return text.count(",") >= self.reservation_comma_threshold

    # Prompts

    @property
    def welcome(self) -> str:
        return (
            f"🙏 Welcome to {self.property_name} – {self.tagline}\n"
            "Your peace and comfort are our blessings to serve.\n"
            "Please select your preferred language to begin your journey with us:\n"
            f"{_LANGUAGE_OPTIONS}"
        )

    language_reprompt: str = f"Please select a valid language option:\n{_LANGUAGE_OPTIONS}"
    restart: str = f"Something went wrong. Restarting session. Please select language again:\n{_LANGUAGE_OPTIONS}"
    hindi_placeholder: str = "क्षमा करें, हिंदी संस्करण जल्द ही उपलब्ध होगा। कृपया English चुनें।"

    main_menu: str = f"How can I assist you today?\n{_MAIN_MENU_OPTIONS}"
    main_menu_reprompt: str = f"Please choose a valid option:\n{_MAIN_MENU_OPTIONS}"

    room_service_menu: str = f"🛎️ How can we help you in your room? Please choose an option:\n{_ROOM_SERVICE_OPTIONS}"
    room_service_reprompt: str = "Invalid option. Please choose 1-3."

    ask_room_number: str = "Please enter your room number:"
    ask_order: str = "What would you like to order?"
    ask_housekeeping_room: str = "Please enter your room number for housekeeping:"
    ask_complaint: str = "Please describe your complaint:"

    room_service_done: str = "Room service request sent."
    housekeeping_done: str = "Housekeeping request sent."
    complaint_done: str = "Complaint sent to hotel management."

    ask_name: str = "📝 Let’s get you checked in. Please provide the following details:\n* Full Name:"
    ask_checkin: str = "* Check-In Date (YYYY-MM-DD):"
    ask_checkout: str = "* Check-Out Date (YYYY-MM-DD):"
    ask_guest_count: str = "* Number of Guests:"
    ask_id_photo: str = "📎 Kindly upload a valid Government-issued ID (Aadhar, PAN, etc.):"
    missing_id_photo: str = "No photo received. Please resend your ID card image."
    registration_done: str = "Registration completed. Thank you!"

    dining_menu_text: str = "Here is the menu: https://your-menu-url.com/menu.pdf"
    reservation_instructions: str = "Please send your reservation in this format:\nName, Date, Time, Guests"
    reservation_received: str = (
        "✅ Reservation received! We'll get back to you shortly.\n\n"
        "You'll also receive a feedback form after your reservation."
    )


DEFAULT_CONFIG = DialogueConfig()
