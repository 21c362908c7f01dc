"""
Reminder message composition.

Body text interpolates the configured row fields. Clock-time fields are read
from the display grid and converted to 24h form; when that fails the text is
used exactly as typed.
"""
from datetime import date, datetime
from typing import Any, Dict, List

from .classifier import RunWindow
from .dates import format_display, to_hour24
from .enums import Milestone
from .schemas import Notification, ReminderConfig
from .store import Row, normalize_header

SUBJECTS: Dict[Milestone, str] = {
    Milestone.day_before: "Reminder: event is tomorrow",
    Milestone.day_of: "Reminder: the event is today.",
}


def render_value(value: Any, timezone: str) -> str:
    """Cell value as message text; empty cells become ""."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return format_display(value, timezone)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _field_lines(row: Row, config: ReminderConfig) -> List[str]:
    time_keys = {normalize_header(name) for name in config.time_fields}
    message_keys = {normalize_header(name) for name in config.message_fields}
    # Time fields not listed among the message fields go last
    names = list(config.message_fields)
    names += [n for n in config.time_fields if normalize_header(n) not in message_keys]

    lines = []
    for name in names:
        if normalize_header(name) in time_keys:
            shown = row.display_text(name)
            text = to_hour24(shown) or shown
        else:
            text = render_value(row.get(name), config.timezone)
        lines.append(f"{name}: {text}")
    return lines


def compose(row: Row, milestone: Milestone, window: RunWindow, config: ReminderConfig) -> Notification:
    """
    Build the D-1 / D0 reminder for a row.

    Arguments:
        row (Row): The event row.
        milestone (Milestone): Which reminder variant to build.
        window (RunWindow): The pass window; the event day is derived from it.
        config (ReminderConfig): Recipients, fields and timezone.
    """
    event_day = window.tomorrow if milestone == Milestone.day_before else window.today

    body = "Hi,\n\n"
    body += f"This is a reminder ({format_display(event_day, config.timezone)}).\n\n"
    lines = _field_lines(row, config)
    if lines:
        body += "\n".join(lines) + "\n\n"
    body += "- Email sent automatically."

    return Notification(
        to=config.email_to,
        bcc=list(config.email_bcc),
        subject=SUBJECTS[milestone],
        body=body,
    )
