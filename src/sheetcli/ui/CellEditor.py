# sheetcli/ui/CellEditor.py
"""Single-line text editor used to change the contents of one cell.

The editor is drawn as an overlay exactly over the selected cell. It has its
own small binding table; every other printable key is typed into the buffer.
"""

import logging
from typing import Optional

from sheetcli.core.Bindings import Bindings, Input, Modifier
from sheetcli.ui.Viewport import Rect
from sheetcli.utils.utils import text_width


def _editor_bindings() -> Bindings:
    bindings = Bindings()
    for key, action in (
        ("esc", "cancel"),
        ("enter", "submit"),
        ("backspace", "backspace"),
        ("delete", "delete"),
        ("left", "left"),
        ("right", "right"),
        ("up", "start"),
        ("home", "start"),
        ("down", "end"),
        ("end", "end"),
    ):
        bindings.insert(Input.parse(key), action)
    return bindings


EDITOR_BINDINGS = _editor_bindings()


class CellEditor:
    """Edits a copy of one cell's text.

    Attributes:
        buffer (str): Current text.
        cursor (int): Caret position, `0 <= cursor <= len(buffer)`.
        finished (bool): True once submitted or cancelled.
        result (Optional[str]): Submitted text, or None if cancelled or still editing.
    """

    def __init__(self, text: str = ""):
        self.buffer = text
        self.cursor = len(text)
        self.finished = False
        self.result: Optional[str] = None

    def handle_input(self, inp: Input) -> bool:
        """Applies one key press. Returns True once editing is finished."""
        if self.finished:
            return True

        action = EDITOR_BINDINGS.get_single(inp)
        if action is not None:
            getattr(self, f"_{action}")()
        elif inp.modifiers in (Modifier.NONE, Modifier.SHIFT) and len(inp.key) == 1 and inp.key.isprintable():
            self.buffer = self.buffer[: self.cursor] + inp.key + self.buffer[self.cursor :]
            self.cursor += 1
        else:
            logging.debug("CellEditor: ignoring %s", inp)
        return self.finished

    def _cancel(self) -> None:
        self.finished = True
        self.result = None

    def _submit(self) -> None:
        self.finished = True
        self.result = self.buffer

    def _backspace(self) -> None:
        if self.cursor > 0:
            self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
            self.cursor -= 1

    def _delete(self) -> None:
        self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]

    def _left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def _right(self) -> None:
        self.cursor = min(len(self.buffer), self.cursor + 1)

    def _start(self) -> None:
        self.cursor = 0

    def _end(self) -> None:
        self.cursor = len(self.buffer)

    def visible_text(self, width: int) -> tuple[str, int]:
        """The slice of the buffer shown in `width` cells and the caret column in it.

        The text scrolls left so the caret always stays inside the box.
        """
        if width <= 0:
            return "", 0
        start = 0
        while start < self.cursor and text_width(self.buffer[start : self.cursor]) >= width:
            start += 1
        shown = ""
        for ch in self.buffer[start:]:
            if text_width(shown + ch) > width:
                break
            shown += ch
        return shown, text_width(self.buffer[start : self.cursor])

    def cursor_position(self, rect: Rect) -> tuple[int, int]:
        """Screen (x, y) of the caret inside the overlay `rect`, clamped to it."""
        _, column = self.visible_text(rect.width)
        x = rect.x + min(column, max(rect.width - 1, 0))
        return x, rect.y
