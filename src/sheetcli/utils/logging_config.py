# sheetcli/utils/logging_config.py
"""sheetcli.utils.logging_config
===============================

This module provides the logging configuration utility for the sheetcli application.
It defines global logger objects, the `LogBuffer` handler that feeds the in-app
debug view, and a single setup function, `setup_logging`, which configures
application-wide logging handlers and log levels based on a supplied
configuration dictionary.

Features:
    - Rotating file logging for general application events (sheetcli.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the SHEETCLI_KEYTRACE environment variable.
    - Optional in-memory `LogBuffer` (bounded, oldest records dropped first) owned by the caller.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs when called multiple times.
    - Never raises exceptions; all errors are reported to stderr and logging continues with best-effort.

Usage:
    >>> from sheetcli.utils import logging_config
    >>> buffer = logging_config.LogBuffer(capacity=100)
    >>> logging_config.setup_logging({"logging": {"file_level": "INFO"}}, log_buffer=buffer)

Globals:
    logger: Main application logger ("sheetcli").
    KEY_LOGGER: Logger for decoded key-press trace events ("sheetcli.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Optional


# ======================== Global loggers ========================
# These logger objects are created at import-time but remain unconfigured
# until ``setup_logging()`` attaches appropriate handlers.
logger = logging.getLogger("sheetcli")  # main application logger
KEY_LOGGER = logging.getLogger("sheetcli.keyevents")  # decoded key-press trace


@dataclass(frozen=True)
class BufferedRecord:
    elapsed: float  # seconds since the buffer was created
    level: int
    name: str
    message: str

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class LogBuffer(logging.Handler):
    """A logging handler keeping the newest `capacity` records in memory.

    The application creates one, hands it to `setup_logging()` and to the
    controller, whose debug view reads `records()`. When full, the oldest
    record is dropped.
    """

    def __init__(self, capacity: int = 100, level: int = logging.NOTSET):
        super().__init__(level)
        self.capacity = max(1, int(capacity))
        self._records: deque[BufferedRecord] = deque(maxlen=self.capacity)
        self._start = time.time()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._records.append(
                BufferedRecord(
                    elapsed=max(0.0, record.created - self._start),
                    level=record.levelno,
                    name=record.name,
                    message=record.getMessage(),
                )
            )
        except Exception:
            self.handleError(record)

    def records(self) -> list[BufferedRecord]:
        """Buffered records, oldest first."""
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


# --- Logging Setup Function ---
def setup_logging(config: Optional[dict[str, Any]] = None, log_buffer: Optional[LogBuffer] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to five independent handlers are attached:

    1. File handler – rotating sheetcli.log capturing everything from
       the configured `file_level` (default DEBUG) upward.
    2. Console handler – optional `stderr` output whose threshold is
       `console_level` (default WARNING). A full-screen curses UI usually
       runs with this disabled.
    3. Error-file handler – optional rotating error.log that stores
       only ERROR and CRITICAL events.
    4. Log buffer – the caller's `LogBuffer`, if given, at the file level.
    5. Key-event handler – optional rotating keytrace.log enabled
       when the environment variable ``SHEETCLI_KEYTRACE`` is set to
       ``1/true/yes``; attached to the ``sheetcli.keyevents`` logger.

    Existing handlers on the root logger are cleared to avoid duplicate
    records when the function is invoked multiple times (e.g. in unit
    tests).

    Args:
        config (dict | None): Optional application configuration blob.
            Only the ``["logging"]`` sub-section is consulted; recognised
            keys are ``log_file``, ``file_level``, ``console_level``,
            ``log_to_console`` and ``separate_error_log``.
        log_buffer (LogBuffer | None): In-memory handler for the debug view.

    Notes:
        The function never raises; all I/O or permission errors are
        reported to stderr and the logging subsystem continues with a
        best-effort configuration.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_filename = logging_config.get("log_file", "sheetcli.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    except OSError as e_fh:
        print(f"Error setting up file logger for '{log_filename}': {e_fh}", file=sys.stderr)
        log_filename = os.path.join(tempfile.gettempdir(), "sheetcli.log")
        print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)
        try:
            file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
        except OSError as e_tmp:
            print(f"File logging disabled: {e_tmp}", file=sys.stderr)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler("error.log", 1 * 1024 * 1024, 3)
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(f"Error setting up separate error log 'error.log': {e_efh}.", file=sys.stderr)

    if log_buffer is not None:
        log_buffer.setLevel(log_file_level)

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    for handler in (file_handler, console_handler, error_file_handler, log_buffer):
        if handler is not None:
            root_logger.addHandler(handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    key_event_logger = logging.getLogger("sheetcli.keyevents")
    key_event_logger.propagate = False
    key_event_logger.setLevel(logging.DEBUG)
    key_event_logger.handlers = []
    key_event_logger.disabled = False

    if os.environ.get("SHEETCLI_KEYTRACE", "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_handler = _rotating_handler("keytrace.log", 1 * 1024 * 1024, 3)
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            key_event_logger.addHandler(key_trace_handler)
            logging.info("Key event tracing enabled, logging to 'keytrace.log'.")
        except OSError as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            key_event_logger.disabled = True
    else:
        key_event_logger.addHandler(logging.NullHandler())
        key_event_logger.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
