"""
Scheduler Configuration for Event Reminders

Defines status tokens, text formats and trigger defaults.
"""

# Status marker tokens written to the control column
D1_SENT_TOKEN = "D1SENT"   # Day-before reminder delivered
D0_SENT_TOKEN = "D0SENT"   # Day-of reminder delivered
STATUS_SEPARATOR = " | "

# Date rendering used in message bodies (MM-DD-YYYY)
DISPLAY_DATE_FORMAT = "%m-%d-%Y"

# Daily trigger time (hour in 24h format, configured timezone)
DEFAULT_TRIGGER_HOUR = 6
DEFAULT_TRIGGER_MINUTE = 0
DAILY_JOB_ID = "daily_reminder_job"

DEFAULT_HEADER_ROW = 1
DEFAULT_TIMEZONE = "UTC"

# Network timeouts (seconds)
SMTP_TIMEOUT = 15
WHATSAPP_TIMEOUT = 15
