from reminder_worker import main as entrypoint

from .conftest import RecordingTransport


def test_once_runs_a_single_pass(tmp_path, monkeypatch):
    path = tmp_path / "events.csv"
    path.write_text("Name,Event Date,Status\nOffsite,2999-01-01,\n", encoding="utf-8")
    for key, value in {
        "REMINDER_CSV_PATH": str(path),
        "REMINDER_EMAIL_TO": "owner@example.com",
        "REMINDER_STATUS_HEADER": "Status",
        "REMINDER_EVENT_DATE_HEADER": "Event Date",
        "REMINDER_MESSAGE_FIELDS": "Name",
    }.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr(entrypoint, "load_env", lambda: None)
    transport = RecordingTransport()
    monkeypatch.setattr(entrypoint, "build_transport", lambda kind: transport)

    assert entrypoint.main(["--once"]) == 0
    assert transport.sent == []


def test_once_reports_configuration_errors(monkeypatch):
    monkeypatch.setattr(entrypoint, "load_env", lambda: None)
    monkeypatch.setenv("REMINDER_STATUS_HEADER", "")
    assert entrypoint.main(["--once"]) == 1
