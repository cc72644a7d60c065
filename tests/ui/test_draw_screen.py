# tests/ui/test_draw_screen.py
"""DrawScreen Tests
==================

Frames are painted into a `RecordingWindow` and inspected cell by cell:
the table with its highlighted selection, the status bar, the chord hint
and the overlays of the edit, palette and debug modes.
"""

import curses
import logging
from unittest.mock import MagicMock

from sheetcli.core.Bindings import Input, Modifier
from sheetcli.core.Grid import XY
from sheetcli.core.Mode import Mode
from sheetcli.core.Sheet import Sheet
from sheetcli.ui.DrawScreen import COLUMN_SEPARATOR, fit, truncate_string
from sheetcli.utils.csv_codec import read_grid
from tests.stubs import RecordingWindow


def test_truncate_and_fit_count_wide_characters():
    assert truncate_string("表格abc", 3) == "表"
    assert truncate_string("abc", 10) == "abc"
    assert fit("ab", 4) == "ab  "
    assert fit("表格", 3) == "表 "


def test_table_cells_and_selection(make_sheet, window):
    sheet = make_sheet()
    sheet.drawer.draw()

    assert window.row_text(0).startswith(f"a{COLUMN_SEPARATOR}b{COLUMN_SEPARATOR}c")
    assert window.row_text(1).startswith(f"d{COLUMN_SEPARATOR}e{COLUMN_SEPARATOR}f")
    assert window.attr_at(0, 0) == curses.A_REVERSE
    assert window.attr_at(0, 2) == curses.A_NORMAL
    assert window.attr_at(0, 1) == curses.A_DIM
    assert window.refreshed == 1

    sheet.move(1, 1)
    sheet.drawer.draw()
    assert window.attr_at(1, 2) == curses.A_REVERSE
    assert window.attr_at(0, 0) == curses.A_NORMAL


def test_draw_reports_visible_cells_to_sheet(make_sheet):
    sheet = make_sheet()
    sheet.last_visible_cells = XY(0, 0)
    sheet.drawer.draw()
    assert sheet.last_visible_cells == XY(3, 2)
    assert sheet.drawer.last_layout.selected_area is not None


def test_status_bar_contents(make_sheet, window):
    sheet = make_sheet()
    sheet.drawer.draw()
    status = window.row_text(23)
    assert status.startswith(" VIEW ")
    assert "[No Name]" in status
    assert status.rstrip().endswith("Chord:  0,0 3x2")
    assert window.attr_at(23, 40) == curses.A_REVERSE
    assert window.attr_at(23, 1) == curses.A_REVERSE | curses.A_BOLD


def test_status_bar_prefers_message_over_filename(make_sheet, window):
    sheet = make_sheet(filename="data.csv")
    sheet.drawer.draw()
    assert "data.csv" in window.row_text(23)

    sheet.handle_action("undo")
    sheet.drawer.draw()
    assert "Nothing left to undo" in window.row_text(23)
    assert "data.csv" not in window.row_text(23)


def test_chord_hint_lists_next_keys(make_sheet, window):
    sheet = make_sheet()
    sheet.handle_input(Input("-", Modifier.ALT))
    sheet.drawer.draw()

    assert "Chord: alt+-" in window.row_text(23)
    assert "Delete" in window.row_text(20)
    assert "c  delete_col" in window.row_text(21)
    assert "r  delete_row" in window.row_text(22)
    assert window.row_text(22).rstrip().endswith("delete_row")

    sheet.handle_input(Input("x"))
    sheet.drawer.draw()
    assert "Delete" not in window.text()


def test_edit_overlay_places_cursor(make_sheet, window, mock_curses_functions):
    sheet = make_sheet([["hello", "x"]])
    sheet.handle_action("edit")
    assert sheet.mode is Mode.EDIT
    sheet.drawer.draw()

    # "hello" with the caret after it scrolls by one cell in a 5-wide column
    assert window.row_text(0).startswith("ello ")
    assert window.attr_at(0, 0) == curses.A_UNDERLINE
    assert window.cursor == (0, 4)
    mock_curses_functions["curs_set"].assert_called_with(1)
    assert " EDIT " in window.row_text(23)


def test_normal_mode_hides_cursor(make_sheet, mock_curses_functions):
    sheet = make_sheet()
    sheet.drawer.draw()
    mock_curses_functions["curs_set"].assert_called_with(0)


def test_palette_box(make_sheet, window):
    sheet = make_sheet()
    sheet.handle_action("toggle_palette")
    for ch in "undo the":
        sheet.handle_input(Input(ch))
    sheet.drawer.draw()

    # 64 cells wide, centered in 80 columns
    assert window.row_text(0)[8:].startswith("> undo the")
    assert " undo " in window.row_text(1)
    assert "ctrl+z" in window.row_text(1)
    assert window.row_text(2).strip() == ""
    assert window.attr_at(1, 8) == curses.A_REVERSE
    assert window.cursor == (0, 18)
    assert " CMDP " in window.row_text(23)


def test_debug_view_shows_buffered_records(make_sheet, window, log_buffer):
    sheet = make_sheet()
    sheet.handle_action("toggle_debug")
    sheet.drawer.draw()
    assert "No log records." in window.row_text(0)

    log_buffer.handle(
        logging.makeLogRecord(
            {"name": "sheetcli", "levelno": logging.WARNING, "levelname": "WARNING", "msg": "disk full"}
        )
    )
    sheet.drawer.draw()
    assert "WARNING" in window.row_text(0)
    assert "sheetcli: disk full" in window.row_text(0)
    assert window.attr_at(0, 0) == curses.A_BOLD
    assert " DBUG " in window.row_text(23)


def test_draw_without_window_is_noop(config):
    sheet = Sheet(config)
    sheet.drawer.draw()
    assert sheet.drawer.last_layout is None


def test_tiny_window_does_not_raise(config):
    for height, width in [(1, 5), (2, 3), (0, 0)]:
        window = RecordingWindow(height, width)
        sheet = Sheet(config, stdscr=window)
        sheet.drawer.draw()
        assert window.refreshed == 1


def test_refresh_error_is_logged(make_sheet, window, caplog):
    window.noutrefresh = MagicMock(side_effect=curses.error("boom"))
    sheet = make_sheet()
    with caplog.at_level(logging.ERROR):
        sheet.drawer.draw()
    assert "Curses doupdate error" in caplog.text


def test_multiline_cell_draws_first_line_only(make_sheet, window, tmp_path):
    path = tmp_path / "notes.csv"
    path.write_text('"line1\nline2",b\nc,d\n', encoding="utf-8")
    sheet = make_sheet(read_grid(str(path)).snapshot())
    assert sheet.grid[XY(0, 0)] == "line1\nline2"

    drawn = []
    paint = window.addstr

    def recording_addstr(y, x, text, attr=0):
        drawn.append(text)
        paint(y, x, text, attr)

    window.addstr = recording_addstr
    sheet.drawer.draw()

    assert not [text for text in drawn if "\n" in text]
    assert window.row_text(0).startswith(f"line1{COLUMN_SEPARATOR}b")
    assert window.row_text(1).startswith(f"c    {COLUMN_SEPARATOR}d")

    # the edit overlay shows the newline as a placeholder
    sheet.handle_action("edit")
    drawn.clear()
    sheet.drawer.draw()
    assert not [text for text in drawn if "\n" in text]
    assert sheet.editor.buffer == "line1\nline2"
