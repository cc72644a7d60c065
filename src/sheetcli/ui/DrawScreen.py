# sheetcli/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen paints the sheetcli interface with curses.

It is responsible for:
- the table of visible cells, with the selected cell highlighted,
- the status bar on the last line,
- the pending-chord hint in the bottom-right corner,
- the overlays of the current mode: cell editor, command palette or debug log,
- placing (or hiding) the terminal cursor.

Which rows and columns are visible is decided by `Viewport.layout`; this
module only turns that layout into characters. Cells show their first line
only, and control characters are drawn as "?" so that a newline inside a
cell cannot move the curses cursor. Writing past the edge of the window
raises `curses.error`, which is expected while the terminal is being resized
and is ignored.
"""

import curses
import logging
from typing import TYPE_CHECKING, Any, Optional

from wcwidth import wcwidth

from sheetcli.core.Grid import XY
from sheetcli.core.Mode import Mode
from sheetcli.ui.Viewport import Layout, Rect
from sheetcli.utils.utils import cell_text, column_widths, printable, text_width

if TYPE_CHECKING:
    from sheetcli.core.Sheet import Sheet


PALETTE_MAX_WIDTH = 64
PALETTE_MAX_HEIGHT = 32
COLUMN_SEPARATOR = "│"


def truncate_string(s: str, max_width: int) -> str:
    """Return `s` clipped to visual width `max_width` (wide glyphs count as two cells)."""
    result: list[str] = []
    consumed = 0
    for ch in s:
        w = wcwidth(ch)
        if w < 0:  # Non-printable → treat as single-cell
            w = 1
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w
    return "".join(result)


def fit(s: str, width: int) -> str:
    """`s` clipped and padded with spaces to exactly `width` cells."""
    clipped = truncate_string(s, width)
    return clipped + " " * max(0, width - text_width(clipped))


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders one frame of a `Sheet` into its curses window.

    Attributes:
        sheet (Sheet): The controller whose state is drawn.
        config (dict): Application configuration (`grid` section is used).
        stdscr (curses.window): The window painted into.
        last_layout (Optional[Layout]): Layout of the most recent frame.

    Methods:
        draw(): Paints a complete frame and updates the terminal.
    """

    def __init__(self, sheet: "Sheet") -> None:
        self.sheet = sheet
        self.config: dict[str, Any] = sheet.config
        self.last_layout: Optional[Layout] = None
        self._widths: list[int] = []

    @property
    def stdscr(self) -> Any:
        return self.sheet.stdscr

    def _put(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass  # drawing outside screen

    def draw(self) -> None:
        """The main screen drawing method."""
        if self.stdscr is None:
            return
        try:
            height, width = self.stdscr.getmaxyx()
            self.stdscr.erase()
            table_area = Rect(0, 0, width, max(0, height - 1))

            layout = self._compute_layout(table_area)
            if self.sheet.mode is Mode.DEBUG:
                self._draw_debug_view(table_area)
            else:
                self._draw_table(layout)
            self._draw_status_bar(height, width)
            self._draw_chord_hint(table_area)

            if self.sheet.mode is Mode.EDIT:
                self._draw_cell_editor(layout)
            elif self.sheet.mode is Mode.PALETTE:
                self._draw_palette(table_area)
            else:
                self._hide_cursor()

            self._update_display()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}")
        except Exception:
            logging.exception("Unexpected error in DrawScreen.draw()")

    def _compute_layout(self, area: Rect) -> Layout:
        grid_cfg = self.config.get("grid", {})
        widths = column_widths(
            self.sheet.grid,
            grid_cfg.get("min_column_width", 1),
            grid_cfg.get("max_column_width", 40),
        )
        layout = self.sheet.viewport.layout(self.sheet.grid.size, widths, area, self.sheet.state)
        self.sheet.last_visible_cells = layout.visible_cells
        self.last_layout = layout
        self._widths = widths
        return layout

    def _draw_table(self, layout: Layout) -> None:
        grid = self.sheet.grid
        selected = self.sheet.state.selected
        spacing = self.sheet.viewport.column_spacing
        for row in layout.rows:
            y = layout.row_y(row)
            for slot in layout.columns:
                pos = XY(slot.index, row)
                attr = curses.A_REVERSE if pos == selected else curses.A_NORMAL
                self._put(y, slot.x, fit(cell_text(grid[pos]), slot.width), attr)
                sep_x = slot.x + self._widths[slot.index]
                if spacing > 0 and sep_x < layout.area.right:
                    self._put(y, sep_x, COLUMN_SEPARATOR, curses.A_DIM)

    def _draw_status_bar(self, height: int, width: int) -> None:
        """Single-line status bar (bottom of the screen).

        ` VIEW  Wrote to data.csv            Chord: alt+- 2,7 5x40 `
        """
        if height < 1:
            return
        sheet = self.sheet
        left = f" {sheet.mode.value} "
        message = sheet.status_message or sheet.filename or "[No Name]"
        sel = str(sheet.state.selected) if sheet.state.selected is not None else "-"
        right = f" Chord: {sheet.input_path} {sel} {sheet.grid.size.x}x{sheet.grid.size.y} "

        middle_w = max(0, width - text_width(left) - text_width(right))
        line = left + fit(" " + printable(message), middle_w) + right
        self._put(height - 1, 0, fit(line, width), curses.A_REVERSE)
        if width > 0:
            self._put(height - 1, 0, left, curses.A_REVERSE | curses.A_BOLD)

    def _draw_chord_hint(self, area: Rect) -> None:
        chord = self.sheet.pending_chord
        if chord is None:
            return
        lines = [f" {chord.name or self.sheet.input_path} "]
        singles = sorted(chord.bindings.singles(), key=lambda kv: str(kv[0]))
        lines.extend(f" {key}  {action} " for key, action in singles)
        box_w = min(max(text_width(line) for line in lines), area.width)
        box_h = min(len(lines), area.height)
        x, y = area.right - box_w, area.bottom - box_h
        for i, line in enumerate(lines[:box_h]):
            attr = curses.A_REVERSE | (curses.A_BOLD if i == 0 else curses.A_NORMAL)
            self._put(y + i, x, fit(line, box_w), attr)

    def _draw_cell_editor(self, layout: Layout) -> None:
        editor = self.sheet.editor
        rect = layout.selected_area
        if editor is None or rect is None or rect.width <= 0:
            self._hide_cursor()
            return
        shown, _ = editor.visible_text(rect.width)
        self._put(rect.y, rect.x, fit(printable(shown), rect.width), curses.A_UNDERLINE)
        self._show_cursor(*editor.cursor_position(rect))

    def _draw_palette(self, area: Rect) -> None:
        palette = self.sheet.palette
        if palette is None:
            return
        w = min(PALETTE_MAX_WIDTH, area.width)
        h = min(PALETTE_MAX_HEIGHT, area.height)
        if w <= 0 or h <= 0:
            return
        box = Rect(area.x + (area.width - w) // 2, area.y + (area.height - h) // 2, w, h)

        prompt = f"> {palette.query}"
        self._put(box.y, box.x, fit(prompt, w), curses.A_BOLD)

        matches = palette.filtered
        rows = h - 1
        first = max(0, palette.selected - rows + 1) if rows > 0 else 0
        for i in range(rows):
            index = first + i
            text = ""
            attr = curses.A_NORMAL
            if index < len(matches):
                entry = matches[index]
                text = f" {entry.action:<16} {entry.keys:<10} {entry.description}"
                if index == palette.selected:
                    attr = curses.A_REVERSE
            self._put(box.y + 1 + i, box.x, fit(text, w), attr)

        self._show_cursor(box.x + min(text_width(prompt), w - 1), box.y)

    def _draw_debug_view(self, area: Rect) -> None:
        buffer = self.sheet.log_buffer
        records = buffer.records() if buffer is not None else []
        if area.height <= 0:
            return
        newest = records[-area.height :]
        for i, record in enumerate(newest):
            line = f"{record.elapsed:9.3f} {record.level_name:<8} {record.name}: {record.message}"
            attr = curses.A_BOLD if record.level >= logging.WARNING else curses.A_NORMAL
            self._put(area.y + i, area.x, fit(printable(line), area.width), attr)
        if not newest:
            self._put(area.y, area.x, fit("No log records.", area.width), curses.A_DIM)

    def _show_cursor(self, x: int, y: int) -> None:
        try:
            curses.curs_set(1)
            self.stdscr.move(y, x)
        except curses.error:
            pass

    def _hide_cursor(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass

    def _update_display(self) -> None:
        """Applies all pending drawing to the terminal at once."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
