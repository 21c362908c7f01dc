from typing import List, Optional, Union

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Milestone, RowOutcome, TransportFailurePolicy
from .scheduler_config import DEFAULT_HEADER_ROW, DEFAULT_TIMEZONE, DEFAULT_TRIGGER_HOUR

# =========================================================
# PYDANTIC SCHEMAS
# =========================================================

def split_recipients(value: Union[str, List[str], None]) -> List[str]:
    """Split comma / newline separated addresses, trimming and dropping empties."""
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.replace("\r\n", "\n").replace("\n", ",").split(",")
    else:
        parts = [str(v) for v in value]
    return [p.strip() for p in parts if p.strip()]

def _split_names(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]

# Configuration
class ReminderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    spreadsheet_id: Optional[str] = None
    csv_path: Optional[str] = None
    sheet_name: str = ""
    header_row: int = Field(default=DEFAULT_HEADER_ROW, ge=1)
    timezone: str = DEFAULT_TIMEZONE

    # Primary and BCC recipients: e-mail addresses for the e-mail transport,
    # phone numbers in international format for WhatsApp
    email_to: str = ""
    email_bcc: List[str] = Field(default_factory=list)

    # "Control column"
    status_header: str
    event_date_header: str

    message_fields: List[str] = Field(default_factory=list)
    time_fields: List[str] = Field(default_factory=list)

    trigger_hour: int = Field(default=DEFAULT_TRIGGER_HOUR, ge=0, le=23)
    on_transport_error: TransportFailurePolicy = TransportFailurePolicy.abort

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v!r}")
        return v

    @field_validator("email_to", mode="before")
    @classmethod
    def _strip_to(cls, v):
        return str(v or "").strip()

    @field_validator("email_bcc", mode="before")
    @classmethod
    def _parse_bcc(cls, v):
        return split_recipients(v)

    @field_validator("message_fields", "time_fields", mode="before")
    @classmethod
    def _parse_names(cls, v):
        return _split_names(v)

    @field_validator("status_header", "event_date_header")
    @classmethod
    def _required_header(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("header name must not be empty")
        return v.strip()

# Transport payload
class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    to: str
    bcc: List[str] = Field(default_factory=list)
    subject: str
    body: str

# Run report
class LedgerUpdate(BaseModel):
    row_number: int
    marker: str

class RowResult(BaseModel):
    row_number: int
    outcome: RowOutcome
    milestone: Optional[Milestone] = None

class RunReport(BaseModel):
    sent_count: int = 0
    updates: List[LedgerUpdate] = Field(default_factory=list)
    results: List[RowResult] = Field(default_factory=list)

    @property
    def skipped_rows(self) -> List[int]:
        """Rows without a usable event date."""
        return [r.row_number for r in self.results if r.outcome == RowOutcome.skipped_no_date]

    @property
    def failed_rows(self) -> List[int]:
        return [r.row_number for r in self.results if r.outcome == RowOutcome.failed]
