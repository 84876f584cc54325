from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Protocol

from openpyxl import Workbook, load_workbook

from guest_desk.dialogue.core.models import GuestRecord

logger = logging.getLogger(__name__)

SHEET_NAME = "Sheet1"


class LedgerError(Exception):
    """Raised when the ledger file cannot be opened or saved."""


class GuestLedger(Protocol):
    def append_record(self, record: GuestRecord) -> None: ...

    def row_count(self) -> int: ...


class ExcelGuestLedger:
    """Append-only registration sheet stored as an .xlsx workbook.

    Opening, appending and saving happen under one lock; the workbook has no
    transactions of its own, so two registrations must never interleave their
    row-count read and row write.
    """

    def __init__(self, path: str | os.PathLike[str], sheet_name: str = SHEET_NAME) -> None:
        self.path = Path(path)
        self.sheet_name = sheet_name
        self._lock = threading.Lock()

    def _open(self):
        if not self.path.exists():
            wb = Workbook()
            ws = wb.active
            ws.title = self.sheet_name
            ws.append(list(GuestRecord.HEADER))
            return wb, ws

        try:
            wb = load_workbook(self.path)
        except Exception as e:
            raise LedgerError(f"cannot open {self.path}: {e}") from e
        if self.sheet_name in wb.sheetnames:
            ws = wb[self.sheet_name]
        else:
            ws = wb.create_sheet(self.sheet_name)
            ws.append(list(GuestRecord.HEADER))
        return wb, ws

    def append_record(self, record: GuestRecord) -> None:
        with self._lock:
            wb, ws = self._open()
            row_index = ws.max_row + 1
            for column, value in enumerate(record.as_row(), start=1):
                ws.cell(row=row_index, column=column, value=value)
            try:
                wb.save(self.path)
            except OSError as e:
                raise LedgerError(f"cannot save {self.path}: {e}") from e
        logger.info("Guest %s recorded in %s row %d", record.name, self.path, row_index)

    def row_count(self) -> int:
        """Number of registration rows, excluding the header."""

        with self._lock:
            if not self.path.exists():
                return 0
            try:
                wb = load_workbook(self.path, read_only=True)
            except Exception as e:
                raise LedgerError(f"cannot open {self.path}: {e}") from e
            try:
                if self.sheet_name not in wb.sheetnames:
                    return 0
                rows = sum(1 for _ in wb[self.sheet_name].iter_rows(values_only=True))
            finally:
                wb.close()
        return max(0, rows - 1)

    def rows(self) -> list[list[str]]:
        """All rows of the sheet, header included."""

        with self._lock:
            if not self.path.exists():
                return []
            try:
                wb = load_workbook(self.path, read_only=True)
            except Exception as e:
                raise LedgerError(f"cannot open {self.path}: {e}") from e
            try:
                if self.sheet_name not in wb.sheetnames:
                    return []
                return [list(r) for r in wb[self.sheet_name].iter_rows(values_only=True)]
            finally:
                wb.close()


class InMemoryGuestLedger:
    def __init__(self) -> None:
        self.records: list[GuestRecord] = []
        self._lock = threading.Lock()

    def append_record(self, record: GuestRecord) -> None:
        with self._lock:
            self.records.append(record)

    def row_count(self) -> int:
        with self._lock:
            return len(self.records)
