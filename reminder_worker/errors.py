class ReminderError(Exception):
    """Base class for reminder worker failures."""


class ConfigurationError(ReminderError):
    """Missing or invalid configuration; aborts the whole pass."""


class TransportError(ReminderError):
    """A notification could not be handed to the transport."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
