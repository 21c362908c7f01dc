from .classifier import RunWindow, classify, compute_run_window
from .dates import format_display, to_canonical_date, to_hour24
from .enums import Milestone, RowOutcome, TransportFailurePolicy
from .errors import ConfigurationError, ReminderError, TransportError
from .ledger import append_status, has_sent, mark_sent
from .messages import compose
from .reminders import ReminderScheduler, run_reminder_pass
from .schemas import Notification, ReminderConfig, RunReport
