# sheetcli/core/Sheet.py
"""Sheet Module for the sheetcli Editor
======================================
The `Sheet` class is the controller of the application. It owns one of each
core component and wires them together:

- the `Grid` being edited and the `ChangeTracker` recording its history,
- the binding tree (built by `KeyBinder`) and the `InputPath` of a pending chord,
- the selection and scroll offset (`ViewportState`),
- the current `Mode` and the overlay state belonging to it (cell editor,
  command palette),
- the status message and the file the grid was read from.

Every key press goes through `handle_input`, which dispatches on the current
mode. In normal mode the key is added to the input path and resolved against
the binding tree; a resolved action name is dispatched through
`handle_action` and the action map built once in `_setup_action_map`.
"""

import csv
import curses
import logging
from typing import Any, Callable, Optional

from sheetcli.core.Bindings import ActionNode, ChordNode, Input, InputPath
from sheetcli.core.Grid import XY, Change, Grid
from sheetcli.core.History import ChangeTracker
from sheetcli.core.Mode import Mode
from sheetcli.ui.CellEditor import CellEditor
from sheetcli.ui.CommandPalette import CommandPalette
from sheetcli.ui.DrawScreen import DrawScreen
from sheetcli.ui.KeyBinder import KeyBinder
from sheetcli.ui.Viewport import Viewport, ViewportState
from sheetcli.utils.csv_codec import read_grid, write_grid
from sheetcli.utils.logging_config import LogBuffer

logger = logging.getLogger("sheetcli")


# Every action the sheet can perform, in palette order for unbound actions.
ACTION_DESCRIPTIONS: dict[str, str] = {
    "move_up": "Move selection up",
    "move_down": "Move selection down",
    "move_left": "Move selection left",
    "move_right": "Move selection right",
    "jump_up": "Page up",
    "jump_down": "Page down",
    "jump_left": "Page left",
    "jump_right": "Page right",
    "home": "Go to the first cell",
    "end": "Go to the last cell",
    "home_row": "Go to the start of the row",
    "end_row": "Go to the end of the row",
    "home_col": "Go to the top of the column",
    "end_col": "Go to the bottom of the column",
    "edit": "Edit the selected cell",
    "replace": "Replace the selected cell",
    "clear": "Clear the selected cell",
    "insert_row": "Insert a row above the selection",
    "insert_col": "Insert a column left of the selection",
    "delete_row": "Delete the selected row",
    "delete_col": "Delete the selected column",
    "undo": "Undo the last change",
    "redo": "Redo the last undone change",
    "write": "Write the grid to its file",
    "read": "Read the grid from its file",
    "quit": "Quit sheetcli",
    "toggle_debug": "Show or hide the debug log",
    "toggle_palette": "Show or hide the command palette",
}


# ==================== Sheet Class ====================
class Sheet:
    """Class Sheet
    ===================
    Controller for one grid editing session.

    Attributes:
        config (dict): Application configuration.
        grid (Grid): The grid being edited.
        history (ChangeTracker): Undo/redo log for `grid`.
        keybinder (KeyBinder): Reads keys and owns the binding tree.
        bindings (Bindings): The binding tree resolved in normal mode.
        input_path (InputPath): Inputs of a chord still waiting for more keys.
        state (ViewportState): Selection and scroll offset.
        mode (Mode): Which view receives input.
        status_message (str): Result of the latest action, shown in the status bar.
        filename (Optional[str]): File used by the read and write actions.
        log_buffer (Optional[LogBuffer]): Records shown by the debug view.
        running (bool): False once the quit action ran.
    """

    def __init__(
        self,
        config: dict[str, Any],
        grid: Optional[Grid] = None,
        filename: Optional[str] = None,
        stdscr: Optional["curses.window"] = None,
        log_buffer: Optional[LogBuffer] = None,
    ):
        self.config = config
        self.grid = grid if grid is not None else Grid([[""]])
        self.history = ChangeTracker(self.grid)
        self.keybinder = KeyBinder(config, stdscr)
        self.bindings = self.keybinder.bindings
        self.input_path = InputPath()
        self.state = ViewportState()
        self.viewport = Viewport(config.get("grid", {}).get("column_spacing", 1))
        self.last_visible_cells = XY(1, 1)
        self.mode = Mode.NORMAL
        self.status_message = ""
        self.filename = filename
        self.stdscr = stdscr
        self.log_buffer = log_buffer
        self.running = True
        self.editor: Optional[CellEditor] = None
        self.palette: Optional[CommandPalette] = None
        self.drawer = DrawScreen(self)
        self.action_map = self._setup_action_map()
        self._clamp_selection()

    @classmethod
    def from_path(cls, path: str, config: dict[str, Any], **kwargs: Any) -> "Sheet":
        """Creates a sheet for `path`, reading it if it exists.

        The initial read is not recorded in the history.
        """
        sheet = cls(config, filename=path, **kwargs)
        try:
            sheet.grid.replace_whole_grid(read_grid(path))
        except FileNotFoundError:
            logger.info(f"'{path}' does not exist yet, starting with an empty grid.")
        sheet.history.clear()
        sheet._clamp_selection()
        return sheet

    @property
    def selection(self) -> Optional[XY]:
        return self.state.selected

    def _setup_action_map(self) -> dict[str, Callable[[], Any]]:
        action_to_method_map: dict[str, Callable[[], Any]] = {
            "move_up": lambda: self.move(0, -1),
            "move_down": lambda: self.move(0, 1),
            "move_left": lambda: self.move(-1, 0),
            "move_right": lambda: self.move(1, 0),
            "jump_up": lambda: self.jump(0, -1),
            "jump_down": lambda: self.jump(0, 1),
            "jump_left": lambda: self.jump(-1, 0),
            "jump_right": lambda: self.jump(1, 0),
            "home": self.go_home,
            "end": self.go_end,
            "home_row": self.go_home_row,
            "end_row": self.go_end_row,
            "home_col": self.go_home_col,
            "end_col": self.go_end_col,
            "edit": self.edit_cell,
            "replace": self.replace_cell,
            "clear": self.clear_cell,
            "insert_row": self.insert_row,
            "insert_col": self.insert_col,
            "delete_row": self.delete_row,
            "delete_col": self.delete_col,
            "undo": self.undo,
            "redo": self.redo,
            "write": self.write,
            "read": self.read,
            "quit": self.quit,
            "toggle_debug": self.toggle_debug,
            "toggle_palette": self.toggle_palette,
        }
        missing = set(ACTION_DESCRIPTIONS) - set(action_to_method_map)
        if missing:
            logging.warning(f"Actions without a handler: {sorted(missing)}")
        return action_to_method_map

    # --- Status message ---
    def _set_status_message(self, message: str, is_error: bool = False) -> None:
        if is_error:
            logger.error(message)
        else:
            logger.info(message)
        self.status_message = message

    def clear_status(self) -> None:
        self.status_message = ""

    # --- Input dispatch ---
    def handle_input(self, inp: Input) -> bool:
        """Routes one key press to the view of the current mode.

        Returns:
            bool: True if the screen needs to be redrawn.
        """
        if self.mode is Mode.EDIT and self.editor is not None:
            if self.editor.handle_input(inp):
                if self.editor.result is not None:
                    self._track(self.grid.replace_cell(self.selection, self.editor.result))
                self.editor = None
                self.mode = Mode.NORMAL
            return True

        if self.mode is Mode.PALETTE and self.palette is not None:
            if self.palette.handle_input(inp):
                chosen = self.palette.chosen
                self.palette = None
                self.mode = Mode.NORMAL
                if chosen is not None:
                    self.handle_action(chosen)
            return True

        if self.mode is Mode.DEBUG:
            self.mode = Mode.NORMAL
            return True

        return self._handle_input_normal(inp)

    def _handle_input_normal(self, inp: Input) -> bool:
        self.input_path.push(inp)
        node = self.bindings.lookup(self.input_path)
        if node is None:
            logging.debug(f"Unhandled input: {self.input_path}")
            self.input_path.clear()
            return True
        if isinstance(node, ChordNode):
            logging.debug(f"Waiting for more input after {self.input_path} ({node.name or 'chord'})")
            return True
        logging.debug(f"{self.input_path} -> {node.action}")
        self.input_path.clear()
        return self.handle_action(node.action)

    @property
    def pending_chord(self) -> Optional[ChordNode]:
        """The chord node the input path currently ends in, if any."""
        if not self.input_path:
            return None
        node = self.bindings.lookup(self.input_path)
        return node if isinstance(node, ChordNode) else None

    def handle_action(self, action: str) -> bool:
        method = self.action_map.get(action)
        if method is None:
            logging.warning(f"Unknown action: {action!r}")
            return False
        method()
        return True

    # --- Selection ---
    def _clamp_selection(self) -> None:
        size = self.grid.size
        if size.x == 0 or size.y == 0:
            self.state.select(None)
            return
        sel = self.state.selected or XY()
        self.state.select(XY(min(max(sel.x, 0), size.x - 1), min(max(sel.y, 0), size.y - 1)))

    def _select(self, x: int, y: int) -> None:
        self.state.select(XY(x, y))
        self._clamp_selection()

    def move(self, dx: int, dy: int) -> None:
        if self.selection is None:
            return
        self._select(self.selection.x + dx, self.selection.y + dy)

    def jump(self, dx: int, dy: int) -> None:
        """Moves the selection and the scroll offset by one screen together."""
        if self.selection is None:
            return
        step_x = max(1, self.last_visible_cells.x) * dx
        step_y = max(1, self.last_visible_cells.y) * dy
        offset = self.state.offset
        self.state.offset = XY(
            min(max(offset.x + step_x, 0), self.grid.size.x),
            min(max(offset.y + step_y, 0), self.grid.size.y),
        )
        self._select(self.selection.x + step_x, self.selection.y + step_y)

    def go_home(self) -> None:
        self._select(0, 0)

    def go_end(self) -> None:
        self._select(self.grid.size.x - 1, self.grid.size.y - 1)

    def go_home_row(self) -> None:
        if self.selection is not None:
            self._select(0, self.selection.y)

    def go_end_row(self) -> None:
        if self.selection is not None:
            self._select(self.grid.size.x - 1, self.selection.y)

    def go_home_col(self) -> None:
        if self.selection is not None:
            self._select(self.selection.x, 0)

    def go_end_col(self) -> None:
        if self.selection is not None:
            self._select(self.selection.x, self.grid.size.y - 1)

    # --- Edits ---
    def _track(self, change: Change) -> None:
        self.history.push(change)
        self._clamp_selection()

    def edit_cell(self) -> None:
        if self.selection is None:
            return
        self.editor = CellEditor(self.grid[self.selection])
        self.mode = Mode.EDIT
        self.clear_status()

    def replace_cell(self) -> None:
        if self.selection is None:
            return
        self.editor = CellEditor("")
        self.mode = Mode.EDIT
        self.clear_status()

    def clear_cell(self) -> None:
        if self.selection is not None:
            self._track(self.grid.replace_cell(self.selection, ""))

    def insert_row(self) -> None:
        index = self.selection.y if self.selection is not None else self.grid.size.y
        if self.grid.size.x == 0:
            # a row of an empty grid has no cells; start with a 1x1 grid instead
            self._track(self.grid.insert_col(0))
            index = 0
        self._track(self.grid.insert_row(index))

    def insert_col(self) -> None:
        index = self.selection.x if self.selection is not None else self.grid.size.x
        if self.grid.size.y == 0:
            self._track(self.grid.insert_row(0))
            index = 0
        self._track(self.grid.insert_col(index))

    def delete_row(self) -> None:
        if self.selection is not None:
            self._track(self.grid.delete_row(self.selection.y))

    def delete_col(self) -> None:
        if self.selection is not None:
            self._track(self.grid.delete_col(self.selection.x))

    def undo(self) -> None:
        if self.history.undo():
            self._clamp_selection()
        else:
            self._set_status_message("Nothing left to undo")

    def redo(self) -> None:
        if self.history.redo():
            self._clamp_selection()
        else:
            self._set_status_message("Nothing left to redo")

    # --- Files ---
    def write(self) -> None:
        if not self.filename:
            self._set_status_message("No file name to write to", is_error=True)
            return
        try:
            write_grid(self.grid, self.filename)
        except (OSError, csv.Error) as e:
            self._set_status_message(f"Error writing to {self.filename}: {e}", is_error=True)
            return
        self._set_status_message(f"Wrote to {self.filename}")

    def read(self) -> None:
        if not self.filename:
            self._set_status_message("No file name to read from", is_error=True)
            return
        try:
            new_grid = read_grid(self.filename)
        except (OSError, csv.Error) as e:
            self._set_status_message(f"Error reading from {self.filename}: {e}", is_error=True)
            return
        self._track(self.grid.replace_whole_grid(new_grid))
        self._set_status_message(f"Read from {self.filename}")

    # --- Modes ---
    def quit(self) -> None:
        logger.info("Quit requested.")
        self.running = False

    def toggle_debug(self) -> None:
        self.mode = Mode.NORMAL if self.mode is Mode.DEBUG else Mode.DEBUG

    def toggle_palette(self) -> None:
        if self.mode is Mode.PALETTE:
            self.palette = None
            self.mode = Mode.NORMAL
        else:
            self.palette = CommandPalette(self.bindings, ACTION_DESCRIPTIONS)
            self.mode = Mode.PALETTE

    # ------------------  Main loop  ------------------------
    def run(self) -> None:
        """Reads keys and redraws until the quit action runs.

        `KeyboardInterrupt` ends the loop quietly; any other exception is
        logged as critical and re-raised to the entry point.
        """
        logger.info("Sheet main loop started.")
        self.drawer.draw()
        while self.running:
            try:
                inp = self.keybinder.get_key_input()
                # None means a resize or a key with no meaning; redraw either way
                if inp is None or self.handle_input(inp):
                    self.drawer.draw()
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.running = False
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                raise
        logger.info("Sheet main loop finished.")
