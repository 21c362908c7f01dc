"""
Google Sheets backed dataset.

Values are read unformatted so numbers stay numbers. Date and date-time cells
are recognised by comparing a serial-number read with a formatted-string read
and come back as ``date`` / naive ``datetime`` in the sheet's wall time, so
the sheet locale never decides the day. Display values are read exactly as
shown in the sheet.
"""
import logging
import os
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple, Union

import gspread
from google.oauth2.service_account import Credentials as ServiceCredentials
from gspread.utils import DateTimeOption, ValueRenderOption, rowcol_to_a1

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Day 0 of the Sheets serial date system
SERIAL_EPOCH = datetime(1899, 12, 30)


def serial_to_datetime(serial: Union[int, float]) -> Union[date, datetime]:
    """Whole serials are calendar dates, fractional ones carry a time of day."""
    moment = SERIAL_EPOCH + timedelta(seconds=round(serial * 86400))
    if float(serial).is_integer():
        return moment.date()
    return moment


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def merge_date_cells(serials: List[List[Any]], texts: List[List[Any]]) -> List[List[Any]]:
    """
    A cell that is a number in the serial read but text in the formatted
    read is a date cell: replace it with its ``date`` / ``datetime``.
    Time-only cells (serial below one day) keep their formatted text and
    every other cell keeps the unformatted value.
    """
    merged = []
    for serial_row, text_row in zip(serials, texts):
        row = list(serial_row)
        for i, value in enumerate(row):
            text = text_row[i] if i < len(text_row) else None
            if _is_number(value) and isinstance(text, str):
                row[i] = serial_to_datetime(value) if value >= 1 else text
        merged.append(row)
    return merged


class GoogleSheetsStore:
    def __init__(self, worksheet: "gspread.Worksheet") -> None:
        self.worksheet = worksheet

    @classmethod
    def from_service_account(
        cls,
        spreadsheet_id: str,
        sheet_name: str,
        credentials_path: Optional[str] = None
    ) -> "GoogleSheetsStore":
        path = credentials_path or os.getenv("GOOGLE_CREDENTIALS_PATH")
        if not path:
            raise ConfigurationError("GOOGLE_CREDENTIALS_PATH is not set")

        creds = ServiceCredentials.from_service_account_file(path, scopes=SCOPES)
        gc = gspread.authorize(creds)
        spreadsheet = gc.open_by_key(spreadsheet_id)
        try:
            worksheet = spreadsheet.worksheet(sheet_name)
        except gspread.exceptions.WorksheetNotFound:
            raise ConfigurationError(f"Tab \"{sheet_name}\" not found.")
        logger.info(f"Opened sheet '{sheet_name}' of spreadsheet {spreadsheet_id}")
        return cls(worksheet)

    def _range(self, first_row: int, num_cols: int) -> str:
        last_row = max(first_row, self.worksheet.row_count)
        return f"{rowcol_to_a1(first_row, 1)}:{rowcol_to_a1(last_row, num_cols)}"

    def read_header(self, header_row: int) -> List[str]:
        return self.worksheet.row_values(header_row)

    def read_rows(self, first_row: int, num_cols: int) -> Tuple[List[List[Any]], List[List[str]]]:
        if first_row > self.worksheet.row_count:
            return [], []
        range_name = self._range(first_row, num_cols)
        serials = self.worksheet.get(
            range_name,
            value_render_option=ValueRenderOption.unformatted,
            date_time_render_option=DateTimeOption.serial_number,
        )
        texts = self.worksheet.get(
            range_name,
            value_render_option=ValueRenderOption.unformatted,
            date_time_render_option=DateTimeOption.formatted_string,
        )
        display_values = self.worksheet.get(
            range_name,
            value_render_option=ValueRenderOption.formatted,
        )
        values = merge_date_cells([list(r) for r in serials], [list(r) for r in texts])
        return values, [list(r) for r in display_values]

    def write_cell(self, row: int, col: int, value: str) -> None:
        self.worksheet.update_cell(row, col, value)

    def append_column(self, header_row: int, header: str) -> int:
        grid = self.worksheet.get_all_values()
        col = max((len(r) for r in grid), default=0) + 1
        if col > self.worksheet.col_count:
            self.worksheet.add_cols(col - self.worksheet.col_count)
        self.worksheet.update_cell(header_row, col, header)
        return col
