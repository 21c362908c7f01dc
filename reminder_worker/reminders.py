"""
Event Reminder Pass

Scans every event row once and sends the D-1 / D0 reminder for rows whose
event falls tomorrow / today. The control column records what was sent, so
repeated passes never notify the same (row, milestone) twice.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from .classifier import RunWindow, classify, compute_run_window
from .dates import to_canonical_date
from .enums import ClassificationOutcome, RowOutcome, TransportFailurePolicy
from .errors import TransportError
from .ledger import has_sent, mark_sent, read_marker
from .messages import compose
from .schemas import LedgerUpdate, ReminderConfig, RowResult, RunReport
from .send import NotificationTransport
from .store import Row, TabularStore, build_rows, has_data, normalize_header, resolve_columns

logger = logging.getLogger(__name__)

WriteBack = Callable[[Row, str], None]


class ReminderScheduler:
    """
    Runs the classify -> check ledger -> compose -> send -> mark sequence
    over rows in order. ``write_back`` persists a row's new marker right
    after its send, before the next row is looked at.
    """

    def __init__(
        self,
        config: ReminderConfig,
        transport: NotificationTransport,
        write_back: Optional[WriteBack] = None
    ) -> None:
        self.config = config
        self.transport = transport
        self.write_back = write_back

    def _process_row(self, row: Row, window: RunWindow, report: RunReport) -> RowResult:
        config = self.config

        event_date = to_canonical_date(row.get(config.event_date_header), config.timezone)
        classification = classify(event_date, window)

        if classification.outcome == ClassificationOutcome.skipped_no_date:
            raw = row.get(config.event_date_header)
            if raw not in (None, ""):
                logger.warning(f"Row {row.number}: unparseable event date {raw!r}, skipped")
            return RowResult(row_number=row.number, outcome=RowOutcome.skipped_no_date)
        if classification.outcome == ClassificationOutcome.skipped_no_match:
            return RowResult(row_number=row.number, outcome=RowOutcome.skipped_no_match)

        milestone = classification.milestone
        marker = read_marker(row.get(config.status_header))

        if has_sent(marker, milestone):
            return RowResult(row_number=row.number, outcome=RowOutcome.skipped_already_sent, milestone=milestone)

        if not config.email_to:
            return RowResult(row_number=row.number, outcome=RowOutcome.skipped_no_recipient, milestone=milestone)

        notification = compose(row, milestone, window, config)
        try:
            self.transport.send(notification)
        except TransportError as e:
            logger.error(f"❌ Row {row.number}: failed to send {milestone.value} reminder: {e}")
            if config.on_transport_error == TransportFailurePolicy.abort:
                raise
            return RowResult(row_number=row.number, outcome=RowOutcome.failed, milestone=milestone)

        new_marker = mark_sent(marker, milestone)
        if self.write_back is not None:
            self.write_back(row, new_marker)
        row.values[normalize_header(config.status_header)] = new_marker
        report.updates.append(LedgerUpdate(row_number=row.number, marker=new_marker))
        report.sent_count += 1
        logger.info(f"✅ Row {row.number}: sent {milestone.value} reminder")
        return RowResult(row_number=row.number, outcome=RowOutcome.sent, milestone=milestone)

    def run(self, rows: List[Row], window: RunWindow) -> RunReport:
        """Process ``rows`` in order against a fixed ``window``."""
        report = RunReport()
        if not self.config.email_to:
            logger.warning("No primary recipient configured, no reminders will be sent")

        try:
            for row in rows:
                report.results.append(self._process_row(row, window, report))
        except TransportError:
            logger.error(f"Pass aborted after {report.sent_count} e-mails sent")
            raise

        if report.skipped_rows:
            logger.warning(f"Rows skipped without a usable event date: {report.skipped_rows}")
        return report


def run_reminder_pass(
    config: ReminderConfig,
    store: TabularStore,
    transport: NotificationTransport,
    now: Optional[datetime] = None
) -> RunReport:
    """
    Main job: one full reminder pass over the dataset.

    Arguments:
        config (ReminderConfig): Dataset, columns, recipients and timezone.
        store (TabularStore): Where rows are read from and markers written to.
        transport (NotificationTransport): Delivers the reminders.
        now (datetime, optional): Instant the run window is derived from.
    """
    logger.info("🔍 Checking event dates for reminders...")

    # Nothing is written to a dataset without event rows
    headers = store.read_header(config.header_row)
    first_row = config.header_row + 1
    values, display_values = store.read_rows(first_row, max(len(headers), 1))
    if not has_data(values):
        logger.info("No event rows found")
        return RunReport()

    columns = resolve_columns(store, config, headers)

    rows = build_rows(values, display_values, columns, first_row)
    window = compute_run_window(config.timezone, now)
    logger.info(f"Run window: today={window.today.isoformat()} tomorrow={window.tomorrow.isoformat()}")

    def write_back(row: Row, marker: str) -> None:
        store.write_cell(row.number, columns.status_col, marker)

    scheduler = ReminderScheduler(config, transport, write_back)
    report = scheduler.run(rows, window)

    logger.info(f"E-mails sent: {report.sent_count}")
    return report
