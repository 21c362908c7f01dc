"""
Milestone classification against a fixed run window.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from .dates import get_timezone
from .enums import ClassificationOutcome, Milestone


@dataclass(frozen=True)
class RunWindow:
    """The (today, tomorrow) pair every row of a pass is compared against."""

    today: date
    tomorrow: date

    @classmethod
    def for_day(cls, today: date) -> "RunWindow":
        return cls(today=today, tomorrow=today + timedelta(days=1))


@dataclass(frozen=True)
class Classification:
    outcome: ClassificationOutcome
    milestone: Optional[Milestone] = None
    event_date: Optional[date] = None

    @property
    def matched(self) -> bool:
        return self.outcome == ClassificationOutcome.classified


def compute_run_window(
    timezone: Union[str, tzinfo],
    now: Optional[datetime] = None
) -> RunWindow:
    """
    Build the run window from ``now`` (defaults to the current instant) seen
    in ``timezone``. Computed once per pass, before any row is read.
    """
    tz = get_timezone(timezone)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = tz.localize(now) if hasattr(tz, "localize") else now.replace(tzinfo=tz)
    return RunWindow.for_day(now.astimezone(tz).date())


def classify(event_date: Optional[date], window: RunWindow) -> Classification:
    """Match a row's event day to D-1 (tomorrow) or D0 (today)."""
    if event_date is None:
        return Classification(ClassificationOutcome.skipped_no_date)
    if event_date == window.tomorrow:
        return Classification(ClassificationOutcome.classified, Milestone.day_before, event_date)
    if event_date == window.today:
        return Classification(ClassificationOutcome.classified, Milestone.day_of, event_date)
    return Classification(ClassificationOutcome.skipped_no_match, event_date=event_date)
