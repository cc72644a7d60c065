# sheetcli/utils/utils.py
"""
sheetcli.utils.utils.py
=======================

This module provides a collection of core utility functions for the sheetcli editor.

Key functionalities include:
- Automatic User Configuration: Creates `~/.config/sheetcli/config.toml` from the
  template shipped with the project on first run.
- Robust Configuration Loading: Loads a hardcoded, built-in default configuration,
  then recursively merges it with user-defined settings from
  `~/.config/sheetcli/config.toml`.
- Column Widths: Measures the display width of every grid column for the viewport.
- Helper Utilities: Deep-merging of dictionaries.

The application is always runnable, even if user configuration files are missing
or corrupted, by falling back to the embedded defaults.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List

import toml
from wcwidth import wcswidth

from sheetcli.core.Grid import Grid

logger = logging.getLogger("sheetcli")


# This dictionary is a direct, hardcoded representation of `config.toml`.
# It serves as the ultimate fallback, ensuring the application can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "keybindings": {
        "move_up": ["up", "k"], "move_down": ["down", "j"],
        "move_left": ["left", "h"], "move_right": ["right", "tab", "l"],
        "jump_up": ["pageup", "alt+k"], "jump_down": ["pagedown", "alt+j"],
        "jump_left": "alt+h", "jump_right": "alt+l",
        "home": "home", "end": "end",
        "home_row": "^", "end_row": "$",
        "home_col": "g g", "end_col": "G",
        "edit": "f2", "replace": "enter", "clear": ["backspace", "delete"],
        "delete_row": "alt+- r", "delete_col": "alt+- c",
        "insert_row": "alt++ r", "insert_col": "alt++ c",
        "undo": "ctrl+z", "redo": "ctrl+y",
        "write": "ctrl+s", "read": "ctrl+r",
        "quit": ["ctrl+c", "ctrl+q"],
        "toggle_debug": "f12", "toggle_palette": "f1",
    },
    "chords": {"alt+-": "Delete", "alt++": "Insert", "g": "Go to"},
    "grid": {"column_spacing": 1, "min_column_width": 1, "max_column_width": 40},
    "logging": {
        "log_file": "sheetcli.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "buffer_size": 100,
    },
}


# --- Helper Functions ---

def get_project_root() -> Path:
    """Determines the project's root directory for finding template files."""
    if getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS'):
        return Path(sys._MEIPASS)
    else:
        return Path(__file__).resolve().parents[3]


def get_user_config_dir() -> Path:
    return Path.home() / ".config" / "sheetcli"


def ensure_user_config_exists() -> None:
    """Checks for the user config file in `~/.config/sheetcli` and creates it if missing."""
    try:
        config_dir = get_user_config_dir()
        user_config_path = config_dir / "config.toml"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            source_config_path = get_project_root() / "config.toml"
            if source_config_path.exists():
                shutil.copy(source_config_path, user_config_path)
                logger.info(f"Created user config template at: {user_config_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_user_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def text_width(text: str) -> int:
    """Display width of `text` in terminal cells (falls back to len() for unprintables)."""
    width = wcswidth(text)
    return width if width >= 0 else len(text)


def printable(text: str) -> str:
    """`text` with control and other unprintable characters shown as "?"."""
    return "".join(ch if ch.isprintable() else "?" for ch in text)


def cell_text(cell: str) -> str:
    """What a table cell shows: its first line only, made printable."""
    lines = cell.splitlines()
    return printable(lines[0]) if lines else ""


def column_widths(grid: Grid, min_width: int = 1, max_width: int = 40) -> List[int]:
    """
    Returns the display width of the widest cell in each column, clamped to
    [min_width, max_width]. Only the first line of a cell counts (see `cell_text`).
    """
    widths = [0] * grid.size.x
    for row in grid.rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], text_width(cell_text(cell)))
    return [min(max(w, min_width), max_width) for w in widths]
