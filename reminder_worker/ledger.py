"""
Per-row delivery status markers.

A marker is the free text of the control column, e.g. "D1SENT | D0SENT".
Tokens are only ever appended. Text already in the cell (manual notes,
unknown tokens) is kept, upper-cased along with the rest of the marker.
"""
from typing import Any

from .enums import Milestone
from .scheduler_config import STATUS_SEPARATOR


def read_marker(raw: Any) -> str:
    """Marker text of a raw cell value ("" for empty cells)."""
    if raw is None:
        return ""
    return str(raw).strip()


def append_status(existing: str, flag: str) -> str:
    """
    Append ``flag`` to ``existing`` unless it is already present. The
    result is always upper case.

    append_status("", "D0SENT")            -> "D0SENT"
    append_status("D1SENT", "D1SENT")      -> "D1SENT"
    append_status("manual note", "D1SENT") -> "MANUAL NOTE | D1SENT"
    """
    base = read_marker(existing).upper()
    flag = flag.upper()
    if not base:
        return flag
    if flag in base:
        return base
    return f"{base}{STATUS_SEPARATOR}{flag}"


def has_sent(marker: str, milestone: Milestone) -> bool:
    """Check if this milestone was already notified for the row."""
    return milestone.token in read_marker(marker).upper()


def mark_sent(marker: str, milestone: Milestone) -> str:
    """Marker recording ``milestone`` as delivered. Idempotent."""
    return append_status(marker, milestone.token)
