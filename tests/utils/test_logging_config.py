# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `sheetcli.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Can disable console logging when `log_to_console` is set to False.
- Attaches the in-memory `LogBuffer` used by the debug view.
- Enables key tracing only when `SHEETCLI_KEYTRACE` asks for it.

The tests run in a temporary working directory to avoid touching real files,
and restore the root logger afterwards.
"""

import logging
import logging.handlers
from typing import Generator

import pytest

from sheetcli.utils import logging_config
from sheetcli.utils.logging_config import LogBuffer


@pytest.fixture(autouse=True)
def restore_logging(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Run in `tmp_path` and put the root and key-event loggers back afterwards."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SHEETCLI_KEYTRACE", raising=False)
    root = logging.getLogger()
    key_logger = logging.getLogger("sheetcli.keyevents")
    root_level = root.level
    saved_key = (list(key_logger.handlers), key_logger.level, key_logger.propagate, key_logger.disabled)
    yield
    for handler in list(root.handlers):
        if isinstance(handler, (logging.handlers.RotatingFileHandler, LogBuffer)) or type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
            handler.close()
    for handler in key_logger.handlers:
        handler.close()
    root.setLevel(root_level)
    key_logger.handlers, key_logger.level, key_logger.propagate, key_logger.disabled = saved_key


def test_setup_logging_creates_handlers(tmp_path) -> None:
    """`setup_logging` should add rotating file handlers with proper levels.

    Scenario:
    - Console logging is disabled.
    - Separate error log is requested.
    - File handler level is INFO.
    - Error file handler level is ERROR.
    """
    logging_config.setup_logging(
        {
            "logging": {
                "log_file": "sheetcli.log",
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
            }
        }
    )

    root = logging.getLogger()
    assert all(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    # Exactly two handlers: main file + error file
    assert len(root.handlers) == 2
    assert root.handlers[0].level == logging.INFO
    assert root.handlers[1].level == logging.ERROR
    assert (tmp_path / "sheetcli.log").exists()
    assert (tmp_path / "error.log").exists()


def test_console_handler_level() -> None:
    logging_config.setup_logging({"logging": {"console_level": "error"}})
    root = logging.getLogger()
    consoles = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(consoles) == 1
    assert consoles[0].level == logging.ERROR


def test_log_file_in_new_directory(tmp_path) -> None:
    logging_config.setup_logging({"logging": {"log_file": "logs/app.log", "log_to_console": False}})
    logging.getLogger("sheetcli").info("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello file" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")


def test_repeated_setup_does_not_duplicate_handlers() -> None:
    cfg = {"logging": {"log_to_console": False}}
    logging_config.setup_logging(cfg)
    logging_config.setup_logging(cfg)
    assert len(logging.getLogger().handlers) == 1


def test_log_buffer_is_attached_at_file_level() -> None:
    buffer = LogBuffer(capacity=10)
    logging_config.setup_logging({"logging": {"file_level": "INFO", "log_to_console": False}}, log_buffer=buffer)
    assert buffer in logging.getLogger().handlers
    assert buffer.level == logging.INFO

    buffer.clear()
    logging.getLogger("sheetcli.test").debug("too quiet")
    logging.getLogger("sheetcli.test").warning("low on %s", "space")
    records = buffer.records()
    assert len(records) == 1
    assert records[0].message == "low on space"
    assert records[0].name == "sheetcli.test"
    assert records[0].level_name == "WARNING"
    assert records[0].elapsed >= 0


def test_log_buffer_drops_oldest_records() -> None:
    buffer = LogBuffer(capacity=3)
    log = logging.getLogger("sheetcli.buffer_test")
    log.addHandler(buffer)
    log.propagate = False
    try:
        for i in range(5):
            log.warning("message %d", i)
    finally:
        log.removeHandler(buffer)
        log.propagate = True
    assert len(buffer) == 3
    assert [r.message for r in buffer.records()] == ["message 2", "message 3", "message 4"]


def test_log_buffer_capacity_is_at_least_one() -> None:
    assert LogBuffer(capacity=0).capacity == 1


def test_key_trace_disabled_by_default(tmp_path) -> None:
    logging_config.setup_logging({"logging": {"log_to_console": False}})
    key_logger = logging.getLogger("sheetcli.keyevents")
    assert key_logger.disabled
    assert not key_logger.propagate
    assert not (tmp_path / "keytrace.log").exists()


@pytest.mark.parametrize("value", ["1", "true", "YES"])
def test_key_trace_enabled_by_environment(tmp_path, monkeypatch, value) -> None:
    monkeypatch.setenv("SHEETCLI_KEYTRACE", value)
    logging_config.setup_logging({"logging": {"log_to_console": False}})
    key_logger = logging.getLogger("sheetcli.keyevents")
    assert not key_logger.disabled
    key_logger.debug("key 'j' -> j")
    for handler in key_logger.handlers:
        handler.flush()
    assert "key 'j' -> j" in (tmp_path / "keytrace.log").read_text(encoding="utf-8")
