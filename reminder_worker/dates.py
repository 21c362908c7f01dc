"""
Date and time normalization for spreadsheet cells.

Cells arrive either already typed (date / datetime) or as free text typed by a
human. Everything is reduced to a plain calendar day in the configured
timezone so that comparisons never depend on clock time or UTC offsets.
"""
import re
from datetime import date, datetime, tzinfo
from typing import Any, Optional, Tuple, Union

import pytz
from dateutil import parser as date_parser

from .scheduler_config import DISPLAY_DATE_FORMAT

_DASH_MONTH_FIRST = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_ISO_LIKE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_SLASHED = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM)$", re.IGNORECASE)
_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")

# Fallback parsing fills missing components from this date, so text without
# a year never lands inside a current run window.
_FALLBACK_DEFAULT = datetime(1900, 1, 1)


def get_timezone(timezone: Union[str, tzinfo]) -> tzinfo:
    if isinstance(timezone, str):
        return pytz.timezone(timezone)
    return timezone


def _local_day(value: datetime, tz: tzinfo) -> date:
    """Calendar day of ``value`` as seen in ``tz``. Naive values are wall time in ``tz``."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(tz).date()


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def slash_date_order(first: int, second: int) -> Tuple[int, int]:
    """
    Decide (month, day) for a slash-separated date.

    A first component above 12 can only be a day, so the text is read day-first;
    anything else is read month-first. Ambiguous inputs like 03/04/2024 are
    therefore always March 4th.
    """
    if first > 12:
        return second, first
    return first, second


def _parse_text(text: str, tz: tzinfo) -> Optional[date]:
    m = _DASH_MONTH_FIRST.match(text)
    if m:
        return _build_date(int(m.group(3)), int(m.group(1)), int(m.group(2)))

    m = _ISO_LIKE.match(text)
    if m:
        return _build_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _SLASHED.match(text)
    if m:
        month, day = slash_date_order(int(m.group(1)), int(m.group(2)))
        return _build_date(int(m.group(3)), month, day)

    try:
        parsed = date_parser.parse(text, default=_FALLBACK_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return _local_day(parsed, tz)


def to_canonical_date(raw: Any, timezone: Union[str, tzinfo]) -> Optional[date]:
    """
    Parse a raw cell value into a calendar day in ``timezone``.

    Accepts date / datetime values and text in M-D-YYYY, YYYY-M-D, D/M/YYYY or
    M/D/YYYY form, then anything python-dateutil understands. Returns None for
    empty or unrecognised values; never raises on bad input.
    """
    if raw is None or isinstance(raw, bool):
        return None

    tz = get_timezone(timezone)

    if isinstance(raw, datetime):
        return _local_day(raw, tz)
    if isinstance(raw, date):
        return raw
    if isinstance(raw, (int, float)):
        return None

    text = str(raw).strip()
    if not text:
        return None
    return _parse_text(text, tz)


def to_hour24(display_text: Optional[str]) -> str:
    """
    Converts clock text to zero-padded 24h "HH:MM":
    - "6:00:00 PM" -> "18:00"
    - "6:00 PM"    -> "18:00"
    - "18:00:00"   -> "18:00"
    - "18:00"      -> "18:00"
    Returns "" for anything else.
    """
    if not display_text:
        return ""
    text = display_text.strip()

    m = _TIME_12H.match(text)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2))
        if not 1 <= hour <= 12 or minute > 59:
            return ""
        meridiem = m.group(4).upper()
        if meridiem == "PM" and hour != 12:
            hour += 12
        if meridiem == "AM" and hour == 12:
            hour = 0
        return f"{hour:02d}:{minute:02d}"

    m = _TIME_24H.match(text)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2))
        if hour > 23 or minute > 59:
            return ""
        return f"{hour:02d}:{minute:02d}"

    return ""


def format_display(value: Union[date, datetime], timezone: Union[str, tzinfo]) -> str:
    """Render a day (or instant, seen in ``timezone``) as MM-DD-YYYY."""
    if isinstance(value, datetime):
        value = _local_day(value, get_timezone(timezone))
    return value.strftime(DISPLAY_DATE_FORMAT)
