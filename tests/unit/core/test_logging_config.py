"""Unit tests for structured logging configuration."""

from __future__ import annotations

import io
import json
import sys

import pytest

from core.logging_config import configure_logging, get_logger


def test_logger_writes_to_stderr_current_at_log_time(monkeypatch: pytest.MonkeyPatch) -> None:
    """A stderr stream replaced after configuration should receive events."""
    configured_stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", configured_stream)
    configure_logging("INFO")
    configured_stream.close()
    current_stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", current_stream)

    get_logger("tests.logging").info("stream_swapped", step=2)

    event = json.loads(current_stream.getvalue().strip())
    assert event["event"] == "stream_swapped" and event["step"] == 2


def test_logger_filters_below_configured_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Events under the configured level should not be rendered."""
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    configure_logging("WARNING")

    get_logger("tests.logging").info("quiet_event")

    configure_logging("INFO")
    assert stream.getvalue() == ""
