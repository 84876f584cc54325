from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Union


class State(str, Enum):
    LANGUAGE_SELECTION = "language_selection"
    MAIN_MENU = "main_menu"
    ROOM_SERVICE_MENU = "room_service_menu"
    ROOM_SERVICE = "room_service"
    HOUSEKEEPING = "housekeeping"
    COMPLAINT = "complaint"
    REGISTERING = "registering"
    UNSUPPORTED_LANGUAGE = "unsupported_language"


INITIAL_STATE = State.LANGUAGE_SELECTION


class Step(str, Enum):
    NAME = "name"
    CHECKIN = "checkin"
    CHECKOUT = "checkout"
    GUESTCOUNT = "guestcount"
    IDPHOTO = "idphoto"

    def next(self) -> Step:
        order = list(Step)
        index = order.index(self)
        if index + 1 >= len(order):
            raise ValueError(f"{self.value} is the last registration step")
        return order[index + 1]


_ACCUMULATORS = (
    "room_number",
    "request",
    "complaint",
    "name",
    "checkin",
    "checkout",
    "guest_count",
    "id_document_url",
)


@dataclass(frozen=True)
class Session:
    state: State = INITIAL_STATE
    step: Step | None = None

    room_number: str = ""
    request: str = ""
    complaint: str = ""
    name: str = ""
    checkin: str = ""
    checkout: str = ""
    guest_count: str = ""
    id_document_url: str = ""

    def fill(self, **values: str) -> Session:
        """Return a copy with accumulator fields set.

        Accumulators are write-once for the lifetime of a session, so setting a
        field that already holds a value raises ``ValueError``.
        """

        for key, value in values.items():
            if key not in _ACCUMULATORS:
                raise ValueError(f"unknown session field: {key}")
            if getattr(self, key):
                raise ValueError(f"session field {key} is already set")
        return replace(self, **values)

    def advance(self, state: State, step: Step | None = None) -> Session:
        return replace(self, state=state, step=step)

    def accumulated(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in _ACCUMULATORS}


@dataclass(frozen=True)
class InboundMessage:
    address: str
    body: str = ""
    media_url: str = ""
    received_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class GuestRecord:
    name: str
    checkin: str
    checkout: str
    guest_count: str
    completed_at: datetime

    HEADER = ("Name", "Check-in", "Check-out", "Guests", "Time")

    def as_row(self) -> list[str]:
        return [
            self.name,
            self.checkin,
            self.checkout,
            self.guest_count,
            self.completed_at.strftime("%Y-%m-%d %H:%M"),
        ]


@dataclass(frozen=True)
class ManagerAlert:
    text: str


@dataclass(frozen=True)
class EmailNotification:
    subject: str
    body: str


@dataclass(frozen=True)
class RecordGuest:
    record: GuestRecord


SideEffect = Union[ManagerAlert, EmailNotification, RecordGuest]


@dataclass(frozen=True)
class Turn:
    """Outcome of one inbound message.

    ``session`` is the session to store next; ``None`` means the flow finished
    and the session should be deleted.
    """

    session: Session | None
    reply: str
    effects: tuple[SideEffect, ...] = ()


@dataclass(frozen=True)
class EffectResult:
    kind: str
    ok: bool
    error: str | None = None
