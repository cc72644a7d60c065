# tests/stubs.py
"""Test stubs for sheetcli tests.

`RecordingWindow` stands in for a curses window: it keeps a character grid
of everything painted into it, remembers attributes and cursor moves, and
replays a scripted list of keys from `get_wch()`. Writes outside the window
raise `curses.error`, like the real thing.
"""

import curses
from typing import Iterable, Union


class RecordingWindow:
    """Minimal curses window recording what is drawn."""

    def __init__(self, height: int = 24, width: int = 80, keys: Iterable[Union[str, int]] = ()) -> None:
        self.height = height
        self.width = width
        self.keys: list[Union[str, int]] = list(keys)
        self.cells: list[list[str]] = []
        self.attrs: dict[tuple[int, int], int] = {}
        self.cursor: tuple[int, int] = (0, 0)
        self.nodelay_calls: list[bool] = []
        self.refreshed = 0
        self.erase()

    # ---- painting ----
    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def erase(self) -> None:
        self.cells = [[" "] * self.width for _ in range(self.height)]
        self.attrs = {}

    def addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise curses.error("addwstr() returned ERR")
        for i, ch in enumerate(text):
            if x + i >= self.width:
                raise curses.error("addwstr() returned ERR")
            self.cells[y][x + i] = ch
            self.attrs[(y, x + i)] = attr

    def move(self, y: int, x: int) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise curses.error("wmove() returned ERR")
        self.cursor = (y, x)

    def noutrefresh(self) -> None:
        self.refreshed += 1

    def refresh(self) -> None:
        self.refreshed += 1

    def keypad(self, flag: bool) -> None:
        pass

    def nodelay(self, flag: bool) -> None:
        self.nodelay_calls.append(flag)

    # ---- input ----
    def get_wch(self) -> Union[str, int]:
        if not self.keys:
            raise curses.error("no input")
        return self.keys.pop(0)

    # ---- inspection ----
    def row_text(self, y: int) -> str:
        return "".join(self.cells[y])

    def text(self) -> str:
        return "\n".join(self.row_text(y) for y in range(self.height))

    def attr_at(self, y: int, x: int) -> int:
        return self.attrs.get((y, x), 0)
