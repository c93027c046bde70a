"""Redaction, log file lines and dashboard counters."""

import pytest

import ui.log_utils as log_utils
from helpers import TOKEN
from ui.dashboard import Dashboard
from ui.log_utils import describe_update, redact_url, write_incoming_log


@pytest.fixture
def log_file(tmp_path, monkeypatch):
    path = tmp_path / "gateway.log"
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", path)
    return path


def test_redact_url_masks_bot_token():
    redacted = redact_url(f"https://api.telegram.org/file/bot{TOKEN}/photos/a.jpg")

    assert TOKEN not in redacted
    assert redacted.startswith("https://api.telegram.org/file/bot123456:")
    assert redacted.endswith("/photos/a.jpg")


def test_redact_url_leaves_other_urls_alone():
    assert redact_url("https://example.test/bottle/1") == "https://example.test/bottle/1"


@pytest.mark.parametrize(
    ("update", "expected"),
    [
        ({"update_id": 1, "message": {"chat": {"id": 5}}}, "message chat=5"),
        ({"update_id": 2, "callback_query": {"message": {"chat": {"id": 6}}}}, "callback_query chat=6"),
        ({"update_id": 3, "poll": {"id": "p"}}, "poll"),
        (None, "?"),
    ],
)
def test_describe_update(update, expected):
    assert describe_update(update) == expected


def test_write_incoming_log_redacts_headers(tmp_path):
    path = write_incoming_log(
        "POST",
        "/proxy",
        {"Authorization": "Bearer abcdefghijklmnop", "X-Trace": "t1"},
        {"url": "https://example.test"},
        log_root=tmp_path,
    )

    text = path.read_text()
    assert path.parent == tmp_path / "incoming" / "proxy"
    assert "abcdefghijklmnop" not in text
    assert '"X-Trace": "t1"' in text


def test_headless_dashboard_counts_and_logs(config, log_file, capsys):
    dashboard = Dashboard(config, live=False).start()

    dashboard.log_update({"update_id": 1, "message": {"chat": {"id": 5}}}, 200)
    dashboard.log_outbound("sendMessage", 5, 200)
    dashboard.log_outbound("sendPhoto", 5, 200)
    dashboard.log_relay("GET", "https://example.test/f", 200)
    dashboard.log_error("proxy", 500, "Upstream connection error")
    dashboard.stop()

    assert dashboard.counts == {"updates": 1, "messages": 1, "files": 1, "proxied": 1}
    assert dashboard.errors == ["proxy 500: Upstream connection error"]
    lines = log_file.read_text().splitlines()
    assert len(lines) == 5
    assert lines[0].endswith("UPDATE: message chat=5 status=200")
    assert "ERROR: Upstream connection error route=proxy status=500" in lines[-1]
    assert "RELAY: GET https://example.test/f" in capsys.readouterr().out
