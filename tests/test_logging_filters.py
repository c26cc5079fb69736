"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO
from unittest.mock import MagicMock

import pytest

from app.core.config import LogSettings
from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_redacts_api_keys(capture) -> None:
    logger, stream = capture

    logger.info(
        "test_event",
        extra={"api_key": "sk-secret-123", "openai_api_key": "sk-other", "safe_field": "visible"},
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "sk-other" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_redacts_user_text_and_model_output(capture) -> None:
    logger, stream = capture

    logger.info(
        "summarize_event",
        extra={
            "text": "My private diary entry",
            "original_text": "My private diary entry",
            "summary": "A summary of the diary",
            "char_count": 22,
        },
    )

    output = stream.getvalue()
    assert "private diary" not in output
    assert "summary of the diary" not in output
    assert json.loads(output)["char_count"] == 22


def test_safe_fields_pass_through(capture) -> None:
    logger, stream = capture

    logger.info(
        "http.request",
        extra={"method": "POST", "path": "/api/summarize", "status_code": 200, "duration_ms": 12.5},
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "http.request"
    assert payload["path"] == "/api/summarize"
    assert payload["status_code"] == 200
    assert "[REDACTED]" not in stream.getvalue()


def test_redacts_nested_dicts(capture) -> None:
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {"authorization": "Bearer secret-token", "user-agent": "pytest"},
            "messages": [{"role": "user", "user_content": "hidden words"}],
        },
    )

    output = stream.getvalue()
    assert "secret-token" not in output
    assert "hidden words" not in output
    assert "pytest" in output


def test_request_id_is_attached_from_context(capture) -> None:
    logger, stream = capture

    set_request_id("req-abc")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-abc"


def test_configure_logging_closes_replaced_handlers() -> None:
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    for handler in saved_handlers:
        root_logger.removeHandler(handler)
    stale = MagicMock(spec=logging.Handler)
    stale.level = logging.NOTSET
    root_logger.addHandler(stale)

    try:
        configure_logging(LogSettings(format="plain"))

        stale.close.assert_called_once()
        assert stale not in root_logger.handlers
        assert len(root_logger.handlers) == 1
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)
