import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .errors import ConfigurationError
from .scheduler_config import DEFAULT_HEADER_ROW, DEFAULT_TIMEZONE, DEFAULT_TRIGGER_HOUR
from .schemas import ReminderConfig

logger = logging.getLogger(__name__)

current_file_path = Path(__file__).resolve()
root_dir = current_file_path.parent.parent
env_path = root_dir / ".env"


def load_env(path: Optional[Path] = None) -> None:
    """Load a .env file into the process environment if it exists."""
    target = path or env_path
    if target.exists():
        load_dotenv(dotenv_path=target, override=True)
    else:
        logger.info(f".env file not found at {target}, using process environment")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def load_reminder_config() -> ReminderConfig:
    """Build the pass configuration from REMINDER_* environment variables."""
    values = {
        "spreadsheet_id": os.getenv("REMINDER_SPREADSHEET_ID") or None,
        "csv_path": os.getenv("REMINDER_CSV_PATH") or None,
        "sheet_name": os.getenv("REMINDER_SHEET_NAME", ""),
        "timezone": os.getenv("REMINDER_TIMEZONE", DEFAULT_TIMEZONE),
        "email_to": os.getenv("REMINDER_EMAIL_TO", ""),
        "email_bcc": os.getenv("REMINDER_EMAIL_BCC", ""),
        "status_header": os.getenv("REMINDER_STATUS_HEADER", ""),
        "event_date_header": os.getenv("REMINDER_EVENT_DATE_HEADER", ""),
        "message_fields": os.getenv("REMINDER_MESSAGE_FIELDS", ""),
        "time_fields": os.getenv("REMINDER_TIME_FIELDS", ""),
        "header_row": _env_int("REMINDER_HEADER_ROW", DEFAULT_HEADER_ROW),
        "trigger_hour": _env_int("REMINDER_TRIGGER_HOUR", DEFAULT_TRIGGER_HOUR),
        "on_transport_error": os.getenv("REMINDER_ON_TRANSPORT_ERROR", "abort"),
    }
    try:
        return ReminderConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid reminder configuration: {e}") from e


class SmtpConfig:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        use_tls: Optional[bool] = None,
    ) -> None:
        self.SMTP_HOST = host or os.getenv("SMTP_HOST")
        self.SMTP_PORT = port or _env_int("SMTP_PORT", 587)
        self.SMTP_USER = user or os.getenv("SMTP_USER")
        self.SMTP_PASSWORD = password or os.getenv("SMTP_PASSWORD")
        self.SMTP_FROM = sender or os.getenv("SMTP_FROM") or self.SMTP_USER
        self.SMTP_USE_TLS = use_tls if use_tls is not None else _env_bool("SMTP_USE_TLS", True)

    @property
    def configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_FROM)


class WhatsAppSendConfig:
    def __init__(
        self,
        access_token: Optional[str] = None,
        version: Optional[str] = None,
        phone_number_id: Optional[str] = None,
    ) -> None:
        self.ACCESS_TOKEN = access_token or os.getenv("ACCESS_TOKEN")
        self.VERSION = version or os.getenv("VERSION")
        self.PHONE_NUMBER_ID = phone_number_id or os.getenv("PHONE_NUMBER_ID")

    @property
    def configured(self) -> bool:
        return bool(self.ACCESS_TOKEN and self.VERSION and self.PHONE_NUMBER_ID)
