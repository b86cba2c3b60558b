"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest

from promptstudio.core.utils.logging import StructuredJSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_sets_level() -> None:
    configure_logging(level="debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.ERROR


def test_configure_logging_to_file(tmp_path) -> None:
    log_file = tmp_path / "studio.log"
    configure_logging(
        level="INFO", filename=str(log_file), format_string="%(levelname)s %(message)s"
    )
    logging.getLogger("promptstudio.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "INFO hello" in log_file.read_text()


def test_structured_formatter_includes_extra() -> None:
    record = logging.LogRecord(
        name="promptstudio.core.api.http",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=10,
        msg="HTTP response",
        args=(),
        exc_info=None,
    )
    record.status_code = 200
    record.elapsed_ms = 12

    entry = json.loads(StructuredJSONFormatter().format(record))

    assert entry["level"] == "DEBUG"
    assert entry["message"] == "HTTP response"
    assert entry["context"]["logger_name"] == "promptstudio.core.api.http"
    assert entry["context"]["status_code"] == 200
    assert entry["context"]["elapsed_ms"] == 12
