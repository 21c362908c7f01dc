import enum

from .scheduler_config import D0_SENT_TOKEN, D1_SENT_TOKEN

# =========================================================
# ENUMS
# =========================================================
class Milestone(str, enum.Enum):
    day_before = "d-1"
    day_of = "d0"

    @property
    def token(self) -> str:
        """Status marker token recorded once this milestone was notified."""
        if self is Milestone.day_before:
            return D1_SENT_TOKEN
        return D0_SENT_TOKEN

class ClassificationOutcome(str, enum.Enum):
    classified = "classified"
    skipped_no_date = "skipped_no_date"
    skipped_no_match = "skipped_no_match"

class RowOutcome(str, enum.Enum):
    sent = "sent"
    skipped_no_date = "skipped_no_date"
    skipped_no_match = "skipped_no_match"
    skipped_already_sent = "skipped_already_sent"
    skipped_no_recipient = "skipped_no_recipient"
    failed = "failed"

class TransportFailurePolicy(str, enum.Enum):
    abort = "abort"
    continue_ = "continue"
