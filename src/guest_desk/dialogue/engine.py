from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from guest_desk.dialogue.core.models import (
    EmailNotification,
    GuestRecord,
    InboundMessage,
    ManagerAlert,
    RecordGuest,
    Session,
    State,
    Step,
    Turn,
)
from guest_desk.dialogue.core.prompts import DEFAULT_CONFIG, DialogueConfig


RESET_KEYWORD = "menu"

# Field captured at each text step of the registration flow.
_FIELD_FOR_STEP = {
    Step.NAME: "name",
    Step.CHECKIN: "checkin",
    Step.CHECKOUT: "checkout",
    Step.GUESTCOUNT: "guest_count",
}


@dataclass
class DialogueEngine:
    """Computes the next session, reply and side effects for one message.

    The engine holds no per-sender state; everything it needs arrives in the
    session and the message, and everything it decides leaves in the Turn.
    """

    config: DialogueConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def __post_init__(self) -> None:
        self._handlers: dict[State, Callable[[Session, InboundMessage], Turn]] = {
            State.LANGUAGE_SELECTION: self._language_selection,
            State.MAIN_MENU: self._main_menu,
            State.ROOM_SERVICE_MENU: self._room_service_menu,
            State.ROOM_SERVICE: self._room_service,
            State.HOUSEKEEPING: self._housekeeping,
            State.COMPLAINT: self._complaint,
            State.REGISTERING: self._registering,
        }

    def welcome(self) -> Turn:
        return Turn(session=Session(), reply=self.config.welcome)

    def step(self, session: Session, message: InboundMessage) -> Turn:
        if message.body.strip().lower() == RESET_KEYWORD:
            return self.welcome()

        handler = self._handlers.get(session.state)
        if handler is None:
            # unsupported_language lands here too
            return Turn(session=Session(), reply=self.config.restart)
        return handler(session, message)

    # Menus

    def _language_selection(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        choice = cfg.resolve_choice(State.LANGUAGE_SELECTION, message.body)
        if choice == "1":
            return Turn(session=session.advance(State.UNSUPPORTED_LANGUAGE), reply=cfg.hindi_placeholder)
        if choice == "2":
            return Turn(session=session.advance(State.MAIN_MENU), reply=cfg.main_menu)
        if cfg.looks_like_reservation(message.body):
            return self._reservation(session, message)
        return Turn(session=session, reply=cfg.language_reprompt)

    def _main_menu(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        choice = cfg.resolve_choice(State.MAIN_MENU, message.body)
        if choice == "1":
            return Turn(session=session.advance(State.REGISTERING, Step.NAME), reply=cfg.ask_name)
        if choice == "2":
            return Turn(session=session.advance(State.ROOM_SERVICE_MENU), reply=cfg.room_service_menu)
        if choice == "3":
            return Turn(session=session, reply=cfg.promotion_text)
        if choice == "4":
            return Turn(session=session, reply=cfg.reservation_instructions)
        if choice == "5":
            return Turn(session=session, reply=cfg.dining_menu_text)
        if cfg.looks_like_reservation(message.body):
            return self._reservation(session, message)
        return Turn(session=session, reply=cfg.main_menu_reprompt)

    def _room_service_menu(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        choice = cfg.resolve_choice(State.ROOM_SERVICE_MENU, message.body)
        if choice == "1":
            return Turn(session=session.advance(State.ROOM_SERVICE), reply=cfg.ask_room_number)
        if choice == "2":
            return Turn(session=session.advance(State.HOUSEKEEPING), reply=cfg.ask_housekeeping_room)
        if choice == "3":
            return Turn(session=session.advance(State.COMPLAINT), reply=cfg.ask_complaint)
        return Turn(session=session, reply=cfg.room_service_reprompt)

    def _reservation(self, session: Session, message: InboundMessage) -> Turn:
        email = EmailNotification(
            subject="New Reservation Request",
            body=f"Customer: {message.address}\nDetails: {message.body}",
        )
        return Turn(session=session, reply=self.config.reservation_received, effects=(email,))

    # Service requests

    def _room_service(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        if not session.room_number:
            if not message.body:
                return Turn(session=session, reply=cfg.ask_room_number)
            return Turn(session=session.fill(room_number=message.body), reply=cfg.ask_order)

        if not message.body:
            return Turn(session=session, reply=cfg.ask_order)
        session = session.fill(request=message.body)
        alert = ManagerAlert(f"Room Service Request:\nRoom: {session.room_number}\nOrder: {session.request}")
        return Turn(session=None, reply=cfg.room_service_done, effects=(alert,))

    def _housekeeping(self, session: Session, message: InboundMessage) -> Turn:
        if not message.body:
            return Turn(session=session, reply=self.config.ask_housekeeping_room)
        session = session.fill(room_number=message.body)
        alert = ManagerAlert(f"Housekeeping Request:\nRoom: {session.room_number}")
        return Turn(session=None, reply=self.config.housekeeping_done, effects=(alert,))

    def _complaint(self, session: Session, message: InboundMessage) -> Turn:
        if not message.body:
            return Turn(session=session, reply=self.config.ask_complaint)
        session = session.fill(complaint=message.body)
        text = f"Guest Complaint:\n{session.complaint}"
        return Turn(
            session=None,
            reply=self.config.complaint_done,
            effects=(ManagerAlert(text), EmailNotification(subject="Guest Complaint", body=text)),
        )

    # Registration

    def _registering(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        step = session.step or Step.NAME

        if step is Step.IDPHOTO:
            return self._finish_registration(session, message)

        prompt_for_step = {
            Step.NAME: cfg.ask_name,
            Step.CHECKIN: cfg.ask_checkin,
            Step.CHECKOUT: cfg.ask_checkout,
            Step.GUESTCOUNT: cfg.ask_guest_count,
            Step.IDPHOTO: cfg.ask_id_photo,
        }
        if not message.body:
            return Turn(session=session, reply=prompt_for_step[step])

        next_step = step.next()
        session = session.fill(**{_FIELD_FOR_STEP[step]: message.body}).advance(State.REGISTERING, next_step)
        return Turn(session=session, reply=prompt_for_step[next_step])

    def _finish_registration(self, session: Session, message: InboundMessage) -> Turn:
        cfg = self.config
        if not message.media_url:
            return Turn(session=session, reply=cfg.missing_id_photo)

        session = session.fill(id_document_url=message.media_url)
        record = GuestRecord(
            name=session.name,
            checkin=session.checkin,
            checkout=session.checkout,
            guest_count=session.guest_count,
            completed_at=message.received_at,
        )
        summary = (
            "New Guest Registration:\n"
            f"Name: {session.name}\n"
            f"Check-in: {session.checkin}\n"
            f"Check-out: {session.checkout}\n"
            f"Guests: {session.guest_count}\n"
            f"ID: {session.id_document_url}"
        )
        return Turn(
            session=None,
            reply=cfg.registration_done,
            effects=(RecordGuest(record), EmailNotification(subject="Guest Registration", body=summary)),
        )
