from datetime import date, datetime

import pytz

from reminder_worker.classifier import RunWindow, classify, compute_run_window
from reminder_worker.enums import ClassificationOutcome, Milestone


def test_classify_day_before(window):
    result = classify(date(2024, 3, 11), window)
    assert result.outcome == ClassificationOutcome.classified
    assert result.milestone == Milestone.day_before


def test_classify_day_of(window):
    result = classify(date(2024, 3, 10), window)
    assert result.matched
    assert result.milestone == Milestone.day_of


def test_classify_outside_window(window):
    for day in (date(2024, 3, 9), date(2024, 3, 12), date(2023, 3, 10)):
        result = classify(day, window)
        assert result.outcome == ClassificationOutcome.skipped_no_match
        assert result.milestone is None


def test_classify_missing_date(window):
    result = classify(None, window)
    assert result.outcome == ClassificationOutcome.skipped_no_date
    assert not result.matched


def test_window_is_anchored_to_timezone():
    # 01:30 UTC on the 11th is still the 10th in Sao Paulo
    now = datetime(2024, 3, 11, 1, 30, tzinfo=pytz.utc)
    window = compute_run_window("America/Sao_Paulo", now)
    assert window == RunWindow(today=date(2024, 3, 10), tomorrow=date(2024, 3, 11))


def test_window_naive_now_is_local_time():
    window = compute_run_window("Asia/Tokyo", datetime(2024, 12, 31, 23, 0))
    assert window.today == date(2024, 12, 31)
    assert window.tomorrow == date(2025, 1, 1)


def test_window_defaults_to_current_instant():
    window = compute_run_window("UTC")
    assert window.tomorrow > window.today
