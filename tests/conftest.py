from datetime import date
from typing import Any, List, Optional, Tuple

import pytest

from reminder_worker.classifier import RunWindow
from reminder_worker.errors import TransportError
from reminder_worker.schemas import Notification, ReminderConfig


class MemoryStore:
    """In-memory spreadsheet: ``values`` and ``display`` grids include the header row."""

    def __init__(self, values: List[List[Any]], display: Optional[List[List[str]]] = None):
        self.values = [list(r) for r in values]
        self.display = [list(r) for r in display] if display is not None else [
            ["" if v is None else str(v) for v in r] for r in values
        ]
        self.writes: List[Tuple[int, int, str]] = []

    def read_header(self, header_row: int) -> List[str]:
        return list(self.values[header_row - 1])

    def read_rows(self, first_row: int, num_cols: int):
        values = [(r + [None] * num_cols)[:num_cols] for r in self.values[first_row - 1:]]
        display = [(r + [""] * num_cols)[:num_cols] for r in self.display[first_row - 1:]]
        return values, display

    def _set(self, grid, row: int, col: int, value):
        while len(grid[row - 1]) < col:
            grid[row - 1].append(None if grid is self.values else "")
        grid[row - 1][col - 1] = value

    def write_cell(self, row: int, col: int, value: str) -> None:
        self.writes.append((row, col, value))
        self._set(self.values, row, col, value)
        self._set(self.display, row, col, value)

    def append_column(self, header_row: int, header: str) -> int:
        col = max(len(r) for r in self.values) + 1
        self.write_cell(header_row, col, header)
        return col

    def cell(self, row: int, col: int) -> Any:
        line = self.values[row - 1]
        return line[col - 1] if col - 1 < len(line) else None


class RecordingTransport:
    def __init__(self):
        self.sent: List[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)


class FlakyTransport(RecordingTransport):
    """Fails for the calls whose 1-based positions are listed in ``fail_on``."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = set(fail_on)
        self.calls = 0

    def send(self, notification: Notification) -> None:
        self.calls += 1
        if self.calls in self.fail_on:
            raise TransportError("SMTP connection refused")
        super().send(notification)


@pytest.fixture
def window():
    return RunWindow(today=date(2024, 3, 10), tomorrow=date(2024, 3, 11))


@pytest.fixture
def config():
    return ReminderConfig(
        sheet_name="Events",
        timezone="America/Sao_Paulo",
        email_to="owner@example.com",
        email_bcc="team@example.com,\nops@example.com\n",
        status_header="Status",
        event_date_header="Event Date",
        message_fields=["Name", "Location"],
        time_fields=["Start Time"],
    )


@pytest.fixture
def transport():
    return RecordingTransport()
