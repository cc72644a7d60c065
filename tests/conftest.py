# tests/conftest.py
"""Pytest configuration with shared fixtures for the sheetcli tests."""

from __future__ import annotations

import copy
from typing import Any, Callable, Generator, Optional
from unittest.mock import MagicMock, patch

import pytest

from sheetcli.core.Grid import Grid
from sheetcli.core.Sheet import Sheet
from sheetcli.utils.logging_config import LogBuffer
from sheetcli.utils.utils import DEFAULT_CONFIG
from tests.stubs import RecordingWindow


# --- Automatic mocking of terminal-level curses functions ---
@pytest.fixture(autouse=True)
def mock_curses_functions() -> Generator[dict[str, MagicMock], None, None]:
    """Patch the curses calls that need an initialized terminal.

    `curs_set` and `doupdate` fail unless `initscr()` ran; everything else the
    code under test uses (key codes, attributes, `curses.error`) works as is.
    """
    with patch("curses.curs_set") as curs_set, patch("curses.doupdate") as doupdate:
        yield {"curs_set": curs_set, "doupdate": doupdate}


@pytest.fixture
def config() -> dict[str, Any]:
    """A private copy of the built-in configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def window() -> RecordingWindow:
    return RecordingWindow(24, 80)


@pytest.fixture
def log_buffer() -> LogBuffer:
    return LogBuffer(capacity=20)


@pytest.fixture
def make_sheet(
    config: dict[str, Any], window: RecordingWindow, log_buffer: LogBuffer
) -> Callable[..., Sheet]:
    """Factory building a `Sheet` over the given rows, drawn into `window`."""

    def _make(rows: Optional[list[list[str]]] = None, filename: Optional[str] = None) -> Sheet:
        grid = Grid(rows if rows is not None else [["a", "b", "c"], ["d", "e", "f"]])
        return Sheet(config, grid=grid, filename=filename, stdscr=window, log_buffer=log_buffer)

    return _make
