"""
Tabular dataset access.

Rows and columns are 1-based spreadsheet coordinates. A store returns two
parallel grids: typed values, and the text exactly as displayed / typed by a
human (clock times lose fidelity once coerced to numbers).
"""
import csv
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .errors import ConfigurationError
from .schemas import ReminderConfig

logger = logging.getLogger(__name__)


class TabularStore(Protocol):
    def read_header(self, header_row: int) -> List[str]:
        ...

    def read_rows(self, first_row: int, num_cols: int) -> Tuple[List[List[Any]], List[List[str]]]:
        ...

    def write_cell(self, row: int, col: int, value: str) -> None:
        ...

    def append_column(self, header_row: int, header: str) -> int:
        ...


@dataclass
class Row:
    """One event record keyed by normalized header name."""

    number: int
    values: Dict[str, Any] = field(default_factory=dict)
    display: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        return self.values.get(normalize_header(name))

    def display_text(self, name: str) -> str:
        return str(self.display.get(normalize_header(name)) or "").strip()


@dataclass(frozen=True)
class ColumnMap:
    headers: Dict[str, int]
    status_col: int
    event_date_col: int

    @property
    def width(self) -> int:
        return max([self.status_col, *self.headers.values()])


# =========================================================
# HEADER DISCOVERY
# =========================================================
def normalize_header(name: Any) -> str:
    return str(name).strip().lower()


def build_header_map(headers: List[Any]) -> Dict[str, int]:
    """Map normalized header text to its 1-based column. Later duplicates win."""
    header_map: Dict[str, int] = {}
    for i, h in enumerate(headers):
        if h is None or not str(h).strip():
            continue
        header_map[normalize_header(h)] = i + 1
    return header_map


def resolve_columns(
    store: TabularStore,
    config: ReminderConfig,
    headers: Optional[List[Any]] = None
) -> ColumnMap:
    """
    Locate the control, event-date and message columns.

    Every column but the control column is required and checked first; the
    control column is then appended to the header row when missing.
    ``headers`` skips re-reading a header row the caller already has.
    """
    if headers is None:
        headers = store.read_header(config.header_row)
    header_map = build_header_map(headers)

    event_date_col = header_map.get(normalize_header(config.event_date_header))
    if not event_date_col:
        raise ConfigurationError(
            f"Couldn't find: \"{config.event_date_header}\". "
            f"Update the event date header with the correct name."
        )

    for name in [*config.message_fields, *config.time_fields]:
        if normalize_header(name) not in header_map:
            raise ConfigurationError(f"Header not found: \"{name}\"")

    status_key = normalize_header(config.status_header)
    status_col = header_map.get(status_key)
    if not status_col:
        status_col = store.append_column(config.header_row, config.status_header)
        header_map[status_key] = status_col
        logger.info(f"Control column '{config.status_header}' created at column {status_col}")

    return ColumnMap(headers=header_map, status_col=status_col, event_date_col=event_date_col)


def has_data(values: List[List[Any]]) -> bool:
    """True when any data row holds a non-blank cell."""
    return any(str(v).strip() for line in values for v in line if v is not None)


def build_rows(
    values: List[List[Any]],
    display_values: List[List[str]],
    columns: ColumnMap,
    first_row: int
) -> List[Row]:
    """Zip the value / display grids into keyed rows numbered from ``first_row``."""
    rows: List[Row] = []
    for i, raw in enumerate(values):
        shown = display_values[i] if i < len(display_values) else []
        row = Row(number=first_row + i)
        for key, col in columns.headers.items():
            row.values[key] = raw[col - 1] if col - 1 < len(raw) else None
            row.display[key] = shown[col - 1] if col - 1 < len(shown) else ""
        rows.append(row)
    return rows


# =========================================================
# CSV STORE
# =========================================================
class CsvStore:
    """
    Local CSV dataset. Values and display values are the same text grid;
    each write atomically replaces the file so progress survives a crash
    mid-pass.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise ConfigurationError(f"Dataset not found: {self.path}")
        self._grid = self._load()

    def _load(self) -> List[List[str]]:
        with open(self.path, newline="", encoding="utf-8") as handle:
            return [list(r) for r in csv.reader(handle)]

    def _save(self) -> None:
        # Readers see either the old or the new file, never a partial one
        handle = tempfile.NamedTemporaryFile(
            "w", dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            delete=False, newline="", encoding="utf-8"
        )
        try:
            with handle:
                csv.writer(handle).writerows(self._grid)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(handle.name, self.path)
        except Exception:
            Path(handle.name).unlink(missing_ok=True)
            raise

    def _ensure_cell(self, row: int, col: int) -> None:
        while len(self._grid) < row:
            self._grid.append([])
        line = self._grid[row - 1]
        while len(line) < col:
            line.append("")

    @property
    def last_column(self) -> int:
        return max((len(r) for r in self._grid), default=0)

    def read_header(self, header_row: int) -> List[str]:
        if header_row > len(self._grid):
            return []
        return list(self._grid[header_row - 1])

    def read_rows(self, first_row: int, num_cols: int) -> Tuple[List[List[Any]], List[List[str]]]:
        values: List[List[Any]] = []
        for line in self._grid[first_row - 1:]:
            padded = (line + [""] * num_cols)[:num_cols]
            values.append(padded)
        return values, [list(v) for v in values]

    def write_cell(self, row: int, col: int, value: str) -> None:
        self._ensure_cell(row, col)
        self._grid[row - 1][col - 1] = value
        self._save()

    def append_column(self, header_row: int, header: str) -> int:
        col = self.last_column + 1
        self.write_cell(header_row, col, header)
        return col


def open_store(config: ReminderConfig, credentials_path: Optional[str] = None) -> TabularStore:
    """Pick the dataset backend from the configuration."""
    if config.csv_path:
        return CsvStore(config.csv_path)
    if config.spreadsheet_id:
        from .sheets import GoogleSheetsStore

        return GoogleSheetsStore.from_service_account(
            config.spreadsheet_id, config.sheet_name, credentials_path
        )
    raise ConfigurationError("No dataset configured: set REMINDER_CSV_PATH or REMINDER_SPREADSHEET_ID")
