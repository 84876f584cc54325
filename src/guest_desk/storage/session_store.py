from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from guest_desk.dialogue.core.models import Session


class _TurnLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class SessionStore:
    """In-memory address -> Session mapping.

    A single lock guards the mapping itself. ``turn()`` additionally hands out
    one lock per address so that the read-modify-write of a sender's session
    is not interleaved with another message from the same sender, while
    different senders proceed independently. A turn lock is dropped as soon as
    no turn holds or waits on it.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._turn_locks: dict[str, _TurnLock] = {}
        self._lock = threading.Lock()

    def get(self, address: str) -> Session | None:
        with self._lock:
            return self._sessions.get(address)

    def get_or_create(self, address: str) -> Session:
        with self._lock:
            session = self._sessions.get(address)
            if session is None:
                session = Session()
                self._sessions[address] = session
            return session

    def replace(self, address: str, session: Session) -> None:
        with self._lock:
            self._sessions[address] = session

    def reset(self, address: str) -> None:
        with self._lock:
            self._sessions.pop(address, None)

    @contextmanager
    def turn(self, address: str) -> Iterator[None]:
        with self._lock:
            entry = self._turn_locks.setdefault(address, _TurnLock())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    self._turn_locks.pop(address, None)

    def active_turns(self) -> int:
        with self._lock:
            return len(self._turn_locks)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
