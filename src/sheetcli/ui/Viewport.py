# sheetcli/ui/Viewport.py
"""Viewport.py
==================
Description:
-----------------------
Works out which rows and columns of the grid fit in the table area of the
screen, keeping the selected cell in view while moving the scroll offset as
little as possible, and where on screen the selected cell ends up.

Rows are one terminal line each and never drawn partially. Columns have a
per-column width plus a fixed spacing (the separator), and the last visible
column may be cut off by the right edge so no trailing space is wasted.

Main Functions:
1. row_bounds: visible [start, end) rows for a height budget.
2. col_bounds: visible [start, end) columns for a width budget.
3. Viewport.layout: both ranges, on-screen column positions and the selected
   cell rectangle for one frame.

All functions are pure apart from `Viewport.layout` writing the corrected
offset and selected area back into the `ViewportState` it is given, so they
can be run again on every redraw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from sheetcli.core.Grid import XY


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def intersection(self, other: "Rect") -> "Rect":
        x, y = max(self.x, other.x), max(self.y, other.y)
        right, bottom = min(self.right, other.right), min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))


def _clamp_inputs(count: int, selected: Optional[int], offset: int) -> tuple[Optional[int], int]:
    offset = min(max(offset, 0), count)
    if selected is not None:
        selected = min(max(selected, 0), count - 1)
    return selected, offset


def row_bounds(count: int, selected: Optional[int], offset: int, budget: int) -> tuple[int, int]:
    """[start, end) indices of visible rows.

    Args:
        count: Number of rows in the grid.
        selected: Selected row, or None.
        offset: Previous first visible row.
        budget: Available height in lines.
    """
    if count <= 0 or budget <= 0:
        empty = min(max(offset, 0), max(count, 0))
        return empty, empty
    selected, offset = _clamp_inputs(count, selected, offset)

    start = end = offset
    height = 0
    while end < count and height + 1 <= budget:
        height += 1
        end += 1

    if selected is None:
        return start, end

    while selected >= end:
        end += 1
        height += 1
        while height > budget:
            height -= 1
            start += 1
    while selected < start:
        start -= 1
        height += 1
        while height > budget:
            height -= 1
            end -= 1

    return start, end


def col_bounds(
    widths: Sequence[int],
    spacing: int,
    selected: Optional[int],
    offset: int,
    budget: int,
) -> tuple[int, int]:
    """[start, end) indices of visible columns.

    The final column may only be partially visible. The selected column is
    kept fully visible unless it is wider than the whole budget on its own.

    Args:
        widths: Cell width of every column (excluding spacing).
        spacing: Width of the separator after each column.
        selected: Selected column, or None.
        offset: Previous first visible column.
        budget: Available width in terminal cells.
    """
    count = len(widths)
    if count == 0 or budget <= 0:
        empty = min(max(offset, 0), count)
        return empty, empty
    selected, offset = _clamp_inputs(count, selected, offset)

    def size(i: int) -> int:
        return max(widths[i], 0) + spacing

    start = end = offset
    width = 0
    while end < count and width < budget:
        width += size(end)
        end += 1

    if selected is None:
        logging.debug("col_bounds: no selection; using %s", (start, end))
        return start, end

    if selected < start:
        while selected < start:
            logging.debug("col_bounds: correcting undershot selection")
            start -= 1
            width += size(start)
        # drop trailing columns that would start beyond the right edge
        while end - 1 > selected and width - size(end - 1) >= budget:
            width -= size(end - 1)
            end -= 1
    elif selected >= end - 1:
        while selected >= end:
            logging.debug("col_bounds: correcting overshot selection")
            width += size(end)
            end += 1
        # selection is now the final column; make all of it visible
        while width > budget and start < selected:
            width -= size(start)
            start += 1
        # then fill any remaining space to the right, maybe partially
        while width < budget and end < count:
            width += size(end)
            end += 1

    logging.debug("col_bounds: using %s", (start, end))
    return start, end


@dataclass
class ViewportState:
    """Scroll offset and selection carried between frames."""

    offset: XY = field(default_factory=XY)
    selected: Optional[XY] = None
    selected_area: Optional[Rect] = None

    def select(self, index: Optional[XY]) -> None:
        self.selected = index
        if index is None:
            self.offset = XY()
            self.selected_area = None


@dataclass(frozen=True)
class ColumnSlot:
    """Where one visible column is painted: index, screen x, and visible width."""

    index: int
    x: int
    width: int


@dataclass(frozen=True)
class Layout:
    area: Rect
    rows: range
    columns: tuple[ColumnSlot, ...]
    selected_area: Optional[Rect]

    @property
    def visible_cells(self) -> XY:
        return XY(len(self.columns), len(self.rows))

    def row_y(self, row: int) -> int:
        return self.area.y + (row - self.rows.start)


class Viewport:
    """Computes a `Layout` for a grid drawn into a screen rectangle."""

    def __init__(self, column_spacing: int = 1):
        self.column_spacing = column_spacing

    def layout(self, grid_size: XY, widths: Sequence[int], area: Rect, state: ViewportState) -> Layout:
        """Lays out one frame and stores the corrected offset and selected cell area in `state`."""
        if len(widths) != grid_size.x:
            raise ValueError(f"Expected {grid_size.x} column widths, got {len(widths)}")

        sel = state.selected
        row_start, row_end = row_bounds(
            grid_size.y, sel.y if sel else None, state.offset.y, area.height
        )
        col_start, col_end = col_bounds(
            widths, self.column_spacing, sel.x if sel else None, state.offset.x, area.width
        )
        state.offset = XY(col_start, row_start)

        slots = []
        x = area.x
        for col in range(col_start, col_end):
            visible = max(0, min(widths[col], area.right - x))
            slots.append(ColumnSlot(col, x, visible))
            x += widths[col] + self.column_spacing

        layout_rows = range(row_start, row_end)
        selected_area = None
        if sel is not None and sel.y in layout_rows:
            for slot in slots:
                if slot.index == sel.x:
                    selected_area = Rect(slot.x, area.y + (sel.y - row_start), slot.width, 1)
                    break
        state.selected_area = selected_area

        return Layout(area, layout_rows, tuple(slots), selected_area)
