"""Unit tests for the logging utility."""

from __future__ import annotations

import io
import json
import logging
import sys

from flask import Flask
from travel_auth.core.logger import (
    JSONFormatter,
    RequestIdFilter,
    SecretsFilter,
    configure_logging,
    ensure_request_id,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="travel_auth.services.auth.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="auth.refresh.rotated",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_installs_single_json_handler() -> None:
    configure_logging("INFO")
    configure_logging("WARNING")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, JSONFormatter)


def test_json_formatter_copies_known_extras() -> None:
    record = _record(event="auth.refresh.rotated", user_id="u-1", revoked=3, ignored="x")

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "auth.refresh.rotated"
    assert payload["level"] == "INFO"
    assert payload["event"] == "auth.refresh.rotated"
    assert payload["user_id"] == "u-1"
    assert payload["revoked"] == 3
    assert "ignored" not in payload


def test_json_formatter_renders_exceptions() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in payload["exc_info"]


def test_request_id_filter_outside_request() -> None:
    record = _record()

    assert RequestIdFilter().filter(record) is True
    assert record.request_id is None


def test_request_id_prefers_incoming_header() -> None:
    app = Flask(__name__)

    with app.test_request_context(headers={"X-Correlation-ID": "corr-123"}):
        assert ensure_request_id() == "corr-123"
        # Stable for the rest of the request.
        assert ensure_request_id() == "corr-123"


def test_request_id_generated_when_absent() -> None:
    app = Flask(__name__)

    with app.test_request_context():
        first = ensure_request_id()
        assert first
        assert ensure_request_id() == first


def test_secrets_filter_drops_credentials() -> None:
    record = _record(user_id="u-1", refresh_token="r-secret", password="p-secret")

    assert SecretsFilter().filter(record) is True
    payload = JSONFormatter().format(record)

    assert not hasattr(record, "refresh_token")
    assert not hasattr(record, "password")
    assert "r-secret" not in payload
    assert "u-1" in payload


def test_configured_handler_emits_json_lines() -> None:
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)

    logging.getLogger("travel_auth.test").info(
        "auth.login.succeeded", extra={"event": "auth.login.succeeded", "token": "t-secret"}
    )

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["event"] == "auth.login.succeeded"
    assert line["request_id"] is None
    assert "t-secret" not in stream.getvalue()
