#!/usr/bin/env python3
# /sheetcli/main.py
"""
sheetcli Main Entry Point
=========================

This script is the primary entry point for launching the sheetcli grid editor. It performs:
1) Path Setup: ensures the sheetcli package is importable from a source checkout.
2) Configuration & Logging: loads config and initializes logging ASAP, including the
   in-memory log buffer shown by the debug view.
3) Binding Check: builds the key binding tree once before curses starts, so a broken
   binding table is reported on a normal terminal.
4) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
5) Application Run: opens the CSV file given on the command line and starts the main loop.

Usage:
    python main.py data.csv
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from typing import Any, Optional

# --- Step 1: Set up the Python Path ---
project_root = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(project_root, "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# --- Step 2: Immediate Logging and Configuration Setup ---
try:
    from sheetcli.utils.logging_config import LogBuffer, setup_logging
    from sheetcli.utils.utils import load_config

    config: dict[str, Any] = load_config()
    log_buffer = LogBuffer(config.get("logging", {}).get("buffer_size", 100))
    setup_logging(config, log_buffer=log_buffer)
    logger = logging.getLogger("sheetcli")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 3: Import the Core Application ---
try:
    from sheetcli.core.Bindings import BindingConfigError
    from sheetcli.core.Sheet import Sheet
    from sheetcli.ui.KeyBinder import build_bindings
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


# --- Step 4: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`. Initializes terminal input and runs the sheet.

    Behavior:
        - Sets a short ESC delay so Alt+key arrives as ESC followed by the key.
        - Switches to raw mode so Ctrl+C, Ctrl+S, Ctrl+Z and friends reach the key bindings.
        - Opens `file_to_open` (a missing file starts an empty grid with that name).
        - Starts the main loop (runs until the quit action).
    """
    try:
        curses.set_escdelay(25)
    except AttributeError:
        os.environ.setdefault("ESCDELAY", "25")

    curses.raw()
    stdscr.keypad(True)

    # Ignore terminal suspension (Ctrl+Z is bound to undo).
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    if file_to_open:
        sheet = Sheet.from_path(file_to_open, config, stdscr=stdscr, log_buffer=log_buffer)
    else:
        sheet = Sheet(config, stdscr=stdscr, log_buffer=log_buffer)
    sheet.run()


def start(argv: Optional[list[str]] = None) -> int:
    """
    Validates the binding table, initializes locale and runs the curses application.

    Returns:
        int: Process exit status.
    """
    argv = sys.argv if argv is None else argv
    logger.info("sheetcli starting up...")

    try:
        build_bindings(config)
    except BindingConfigError as e:
        logger.critical("Invalid key binding configuration: %s", e)
        print(f"sheetcli: invalid key binding configuration: {e}", file=sys.stderr)
        return 1

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = argv[1] if len(argv) > 1 and argv[1].strip() else None

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    except Exception as e:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        print(f"sheetcli: {e}", file=sys.stderr)
        return 1

    logger.info("sheetcli shut down gracefully.")
    return 0


if __name__ == "__main__":
    sys.exit(start())
