# sheetcli/core/Grid.py
"""Grid Module for the sheetcli Editor
=====================================
The `Grid` class is the rectangular store of text cells edited by sheetcli.

Every mutating operation returns a `Change` value holding exactly the data
needed to reverse it, and `Grid.revert()` applies that reversal while returning
the `Change` that reverses *it*. The undo/redo log in `sheetcli.core.History`
is built entirely on that round trip:

    change = grid.delete_row(1)      # RowDeleted(1, [...])
    redo = grid.revert(change)       # RowInserted(1, [...]), row restored
    grid.revert(redo) == change      # True, row deleted again

Invariant: there are always exactly `size.y` rows and every row has exactly
`size.x` cells.

Indices outside the grid are programmer errors and raise `IndexError`; the
controller always derives them from `Grid.size`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union


@dataclass(frozen=True, order=True)
class XY:
    """A (column, row) pair; also used for sizes and screen positions."""

    x: int = 0
    y: int = 0

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


Cells = tuple[tuple[str, ...], ...]


# ---------------------- Change variants ----------------------
@dataclass(frozen=True)
class CellReplaced:
    pos: XY
    text: str  # text before the replacement


@dataclass(frozen=True)
class GridReplaced:
    cells: Cells  # whole contents before the replacement


@dataclass(frozen=True)
class RowInserted:
    index: int
    contents: tuple[str, ...]


@dataclass(frozen=True)
class RowDeleted:
    index: int
    contents: tuple[str, ...]


@dataclass(frozen=True)
class ColInserted:
    index: int
    contents: tuple[str, ...]


@dataclass(frozen=True)
class ColDeleted:
    index: int
    contents: tuple[str, ...]


Change = Union[CellReplaced, GridReplaced, RowInserted, RowDeleted, ColInserted, ColDeleted]


def _pad(contents: Iterable[str], length: int, what: str) -> list[str]:
    padded = [str(c) for c in contents]
    if len(padded) > length:
        raise ValueError(f"{what} has {len(padded)} cells, grid allows at most {length}")
    padded.extend("" for _ in range(length - len(padded)))
    return padded


# ==================== Grid Class ====================
class Grid:
    """Class Grid
    ===================
    A rectangular table of strings addressed by `XY(x=column, y=row)`.

    Attributes:
        size (XY): Number of columns (`x`) and rows (`y`).

    Methods:
        replace_cell(pos, text) -> CellReplaced
        replace_whole_grid(new) -> GridReplaced
        insert_row(index, contents) -> RowInserted
        delete_row(index) -> RowDeleted
        insert_col(index, contents) -> ColInserted
        delete_col(index) -> ColDeleted
        revert(change) -> Change
    """

    def __init__(self, rows: Optional[Iterable[Iterable[str]]] = None):
        """Builds a grid from row data.

        Ragged input is padded with empty cells up to the widest row, so the
        rectangular invariant holds from the start.
        """
        cells = [[str(c) for c in row] for row in (rows or [])]
        width = max((len(r) for r in cells), default=0)
        ragged = sum(1 for r in cells if len(r) != width)
        if ragged:
            logging.warning("Grid: padded %d short row(s) to width %d", ragged, width)
            for r in cells:
                r.extend("" for _ in range(width - len(r)))
        self._cells: list[list[str]] = cells
        self.size = XY(width, len(cells))

    def __repr__(self) -> str:
        return f"Grid(size={self.size.x}x{self.size.y})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __getitem__(self, pos: XY) -> str:
        self._check_pos(pos)
        return self._cells[pos.y][pos.x]

    def get(self, pos: XY) -> Optional[str]:
        if 0 <= pos.x < self.size.x and 0 <= pos.y < self.size.y:
            return self._cells[pos.y][pos.x]
        return None

    @property
    def rows(self) -> Sequence[Sequence[str]]:
        """Read-only view of the rows (callers must not mutate them)."""
        return self._cells

    def snapshot(self) -> Cells:
        return tuple(tuple(row) for row in self._cells)

    def copy(self) -> "Grid":
        return Grid(self.snapshot())

    def column(self, index: int) -> list[str]:
        if not 0 <= index < self.size.x:
            raise IndexError(f"Column {index} out of bounds for width {self.size.x}")
        return [row[index] for row in self._cells]

    def _check_pos(self, pos: XY) -> None:
        if not (0 <= pos.x < self.size.x and 0 <= pos.y < self.size.y):
            raise IndexError(f"Cell {pos} out of bounds for grid {self.size.x}x{self.size.y}")

    # ---------------------- Mutations ----------------------
    def replace_cell(self, pos: XY, text: str) -> CellReplaced:
        self._check_pos(pos)
        old = self._cells[pos.y][pos.x]
        self._cells[pos.y][pos.x] = text
        return CellReplaced(pos, old)

    def replace_whole_grid(self, new: Union["Grid", Iterable[Iterable[str]]]) -> GridReplaced:
        """Replaces every cell (and the size) with the contents of `new`."""
        old = self.snapshot()
        source = new if isinstance(new, Grid) else Grid(new)
        self._cells = [list(row) for row in source.rows]
        self.size = source.size
        return GridReplaced(old)

    def insert_row(self, index: int, contents: Iterable[str] = ()) -> RowInserted:
        if not 0 <= index <= self.size.y:
            raise IndexError(f"Row insert index {index} out of bounds for height {self.size.y}")
        row = _pad(contents, self.size.x, "Inserted row")
        self._cells.insert(index, row)
        self.size = XY(self.size.x, self.size.y + 1)
        return RowInserted(index, tuple(row))

    def delete_row(self, index: int) -> RowDeleted:
        if not 0 <= index < self.size.y:
            raise IndexError(f"Row delete index {index} out of bounds for height {self.size.y}")
        removed = self._cells.pop(index)
        self.size = XY(self.size.x, self.size.y - 1)
        return RowDeleted(index, tuple(removed))

    def insert_col(self, index: int, contents: Iterable[str] = ()) -> ColInserted:
        if not 0 <= index <= self.size.x:
            raise IndexError(f"Column insert index {index} out of bounds for width {self.size.x}")
        col = _pad(contents, self.size.y, "Inserted column")
        for row, text in zip(self._cells, col):
            row.insert(index, text)
        self.size = XY(self.size.x + 1, self.size.y)
        return ColInserted(index, tuple(col))

    def delete_col(self, index: int) -> ColDeleted:
        if not 0 <= index < self.size.x:
            raise IndexError(f"Column delete index {index} out of bounds for width {self.size.x}")
        removed = tuple(row.pop(index) for row in self._cells)
        self.size = XY(self.size.x - 1, self.size.y)
        return ColDeleted(index, removed)

    def revert(self, change: Change) -> Change:
        """Applies the inverse of `change` and returns the change that undoes the inverse."""
        if isinstance(change, CellReplaced):
            return self.replace_cell(change.pos, change.text)
        elif isinstance(change, GridReplaced):
            return self.replace_whole_grid(change.cells)
        elif isinstance(change, RowInserted):
            return self.delete_row(change.index)
        elif isinstance(change, RowDeleted):
            return self.insert_row(change.index, change.contents)
        elif isinstance(change, ColInserted):
            return self.delete_col(change.index)
        elif isinstance(change, ColDeleted):
            return self.insert_col(change.index, change.contents)
        raise TypeError(f"Unknown change type: {type(change).__name__}")
