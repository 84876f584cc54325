from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable, Protocol

logger = logging.getLogger(__name__)


class SenderSnapshot(Protocol):
    def load(self) -> set[str]: ...

    def save(self, addresses: Iterable[str]) -> None: ...


class JsonFileSnapshot:
    """Stores known senders as a JSON object of ``{address: true}``."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> set[str]:
        if not self.path.exists():
            return set()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning("Could not read known senders from %s: %s", self.path, e)
            return set()
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed known-sender snapshot %s", self.path)
            return set()
        return {str(address) for address, seen in data.items() if seen}

    def save(self, addresses: Iterable[str]) -> None:
        payload = {address: True for address in sorted(addresses)}
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)


class MemorySnapshot:
    def __init__(self, addresses: Iterable[str] = ()) -> None:
        self.saved: set[str] = set(addresses)
        self.saves = 0

    def load(self) -> set[str]:
        return set(self.saved)

    def save(self, addresses: Iterable[str]) -> None:
        self.saved = set(addresses)
        self.saves += 1


class SenderRegistry:
    """Every address that has ever messaged in; used for broadcasts."""

    def __init__(self, snapshot: SenderSnapshot) -> None:
        self._snapshot = snapshot
        self._addresses: set[str] = snapshot.load()
        self._lock = threading.Lock()

    def mark_seen(self, address: str) -> None:
        if not address:
            return
        with self._lock:
            if address in self._addresses:
                return
            self._addresses.add(address)
            try:
                self._snapshot.save(self._addresses)
            except OSError as e:
                logger.error("Failed to persist known senders: %s", e)

    def addresses(self) -> list[str]:
        with self._lock:
            return sorted(self._addresses)

    def broadcast(self, message: str, send: Callable[[str, str], bool]) -> int:
        """Send ``message`` to every known address; returns the delivered count."""

        delivered = 0
        for address in self.addresses():
            try:
                ok = send(address, message)
            except Exception as e:
                logger.error("Error broadcasting to %s: %s", address, e)
                continue
            if ok:
                delivered += 1
            else:
                logger.error("Broadcast to %s was not delivered", address)
        logger.info("Broadcast delivered to %d of %d senders", delivered, len(self))
        return delivered

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._addresses

    def __len__(self) -> int:
        with self._lock:
            return len(self._addresses)
