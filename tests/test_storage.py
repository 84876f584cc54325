from __future__ import annotations

import json
import threading
from datetime import datetime

import pytest

from guest_desk.dialogue.core.models import GuestRecord, Session, State
from guest_desk.storage.guest_ledger import ExcelGuestLedger, LedgerError
from guest_desk.storage.sender_registry import JsonFileSnapshot, SenderRegistry
from guest_desk.storage.session_store import SessionStore


def _record(name: str) -> GuestRecord:
    return GuestRecord(
        name=name,
        checkin="2024-01-01",
        checkout="2024-01-05",
        guest_count="2",
        completed_at=datetime(2024, 1, 5, 9, 15),
    )


def test_session_store_lifecycle():
    store = SessionStore()

    created = store.get_or_create("a")
    assert created.state is State.LANGUAGE_SELECTION
    assert store.get_or_create("a") is created

    store.replace("a", Session(state=State.MAIN_MENU))
    assert store.get("a").state is State.MAIN_MENU

    store.reset("a")
    assert "a" not in store
    store.reset("a")  # missing address is a no-op
    assert len(store) == 0


def test_session_store_serializes_turns_per_address():
    store = SessionStore()
    store.replace("a", Session(room_number=""))
    counter = {"n": 0}

    def bump():
        for _ in range(200):
            with store.turn("a"):
                n = counter["n"]
                counter["n"] = n + 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter["n"] == 800


def test_registry_persists_json_snapshot(tmp_path):
    path = tmp_path / "users.json"
    registry = SenderRegistry(JsonFileSnapshot(path))

    registry.mark_seen("whatsapp:+1")
    registry.mark_seen("whatsapp:+2")
    registry.mark_seen("whatsapp:+1")
    registry.mark_seen("")

    assert json.loads(path.read_text(encoding="utf-8")) == {"whatsapp:+1": True, "whatsapp:+2": True}

    reloaded = SenderRegistry(JsonFileSnapshot(path))
    assert reloaded.addresses() == ["whatsapp:+1", "whatsapp:+2"]


def test_registry_starts_empty_on_corrupt_snapshot(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")

    registry = SenderRegistry(JsonFileSnapshot(path))
    assert len(registry) == 0


def test_registry_concurrent_inserts_are_not_lost(tmp_path):
    path = tmp_path / "users.json"
    registry = SenderRegistry(JsonFileSnapshot(path))

    threads = [threading.Thread(target=registry.mark_seen, args=(f"whatsapp:+{i}",)) for i in range(25)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(json.loads(path.read_text(encoding="utf-8"))) == 25


def test_ledger_writes_header_once(tmp_path):
    ledger = ExcelGuestLedger(tmp_path / "guests.xlsx")
    assert ledger.row_count() == 0

    ledger.append_record(_record("Asha"))
    ledger.append_record(_record("Ravi"))
    ledger.append_record(_record("Meera"))

    rows = ledger.rows()
    assert rows[0] == ["Name", "Check-in", "Check-out", "Guests", "Time"]
    assert [r[0] for r in rows[1:]] == ["Asha", "Ravi", "Meera"]
    assert rows[1][4] == "2024-01-05 09:15"
    assert ledger.row_count() == 3


def test_ledger_survives_reopen(tmp_path):
    path = tmp_path / "guests.xlsx"
    ExcelGuestLedger(path).append_record(_record("Asha"))
    ExcelGuestLedger(path).append_record(_record("Ravi"))

    assert ExcelGuestLedger(path).row_count() == 2


def test_ledger_unreadable_file_raises_ledger_error(tmp_path):
    path = tmp_path / "guests.xlsx"
    path.write_bytes(b"not a workbook")

    with pytest.raises(LedgerError):
        ExcelGuestLedger(path).append_record(_record("Asha"))


def test_ledger_rows_on_unreadable_file_raise_ledger_error(tmp_path):
    path = tmp_path / "guests.xlsx"
    path.write_bytes(b"not a workbook")

    with pytest.raises(LedgerError):
        ExcelGuestLedger(path).rows()


def test_ledger_rows_empty_when_sheet_missing(tmp_path):
    path = tmp_path / "guests.xlsx"
    ExcelGuestLedger(path, sheet_name="Other").append_record(_record("Asha"))

    assert ExcelGuestLedger(path).rows() == []


def test_ledger_concurrent_appends_keep_every_row(tmp_path):
    ledger = ExcelGuestLedger(tmp_path / "guests.xlsx")

    threads = [threading.Thread(target=ledger.append_record, args=(_record(f"Guest {i}"),)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    rows = ledger.rows()
    header = list(GuestRecord.HEADER)
    assert ledger.row_count() == 20
    assert rows[0] == header
    assert rows.count(header) == 1
    assert sorted(r[0] for r in rows[1:]) == sorted(f"Guest {i}" for i in range(20))


def test_session_store_drops_idle_turn_locks():
    store = SessionStore()

    with store.turn("a"):
        store.replace("a", Session(state=State.MAIN_MENU))
        assert store.active_turns() == 1
    with store.turn("b"):
        store.reset("b")

    assert store.active_turns() == 0
    assert store.get("a").state is State.MAIN_MENU


def test_session_store_keeps_lock_while_a_turn_waits():
    store = SessionStore()
    entered = threading.Event()
    release = threading.Event()
    order = []

    def first():
        with store.turn("a"):
            entered.set()
            release.wait(timeout=5)
            order.append("first")

    def second():
        entered.wait(timeout=5)
        with store.turn("a"):
            order.append("second")

    threads = [threading.Thread(target=first), threading.Thread(target=second)]
    for t in threads:
        t.start()
    entered.wait(timeout=5)
    release.set()
    for t in threads:
        t.join()

    assert order == ["first", "second"]
    assert store.active_turns() == 0
