from datetime import date

from reminder_worker.enums import Milestone
from reminder_worker.messages import compose, render_value
from reminder_worker.store import Row


def _row(**display):
    row = Row(number=2)
    row.values = {"name": "Team offsite", "location": None, "start time": 0.75, "event date": "03-11-2024"}
    row.display = {"name": "Team offsite", "location": "", "start time": "6:00:00 PM", "event date": "03-11-2024"}
    row.display.update(display)
    return row


def test_day_before_message(config, window):
    notification = compose(_row(), Milestone.day_before, window, config)

    assert notification.subject == "Reminder: event is tomorrow"
    assert notification.to == "owner@example.com"
    assert notification.bcc == ["team@example.com", "ops@example.com"]
    assert "This is a reminder (03-11-2024)." in notification.body
    assert "Name: Team offsite" in notification.body
    assert "Start Time: 18:00" in notification.body


def test_day_of_message_uses_today(config, window):
    notification = compose(_row(), Milestone.day_of, window, config)
    assert notification.subject == "Reminder: the event is today."
    assert "(03-10-2024)" in notification.body


def test_missing_fields_render_empty(config, window):
    notification = compose(_row(), Milestone.day_of, window, config)
    assert "Location: \n" in notification.body


def test_unrecognised_time_falls_back_to_display_text(config, window):
    notification = compose(_row(**{"start time": "after lunch"}), Milestone.day_of, window, config)
    assert "Start Time: after lunch" in notification.body


def test_render_value():
    assert render_value(None, "UTC") == ""
    assert render_value(date(2024, 3, 1), "UTC") == "03-01-2024"
    assert render_value(3.0, "UTC") == "3"
    assert render_value(2.5, "UTC") == "2.5"
    assert render_value("  Room 4 ", "UTC") == "Room 4"
