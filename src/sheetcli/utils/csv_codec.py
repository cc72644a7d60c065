# sheetcli/utils/csv_codec.py
"""Reading and writing grids as CSV files.

Files are plain `csv.excel` dialect, UTF-8, without header handling. Short
rows are padded by `Grid` itself. Writing goes through a temporary file in
the target directory which then replaces the target, so a failed write never
leaves a truncated file behind.

Both functions raise `OSError` or `csv.Error`; the caller decides how to
report them.
"""

import csv
import logging
import os
import tempfile
from typing import Any

from sheetcli.core.Grid import Grid

logger = logging.getLogger("sheetcli")


def read_grid(path: str, dialect: Any = csv.excel) -> Grid:
    with open(path, newline="", encoding="utf-8") as f:
        rows = [list(r) for r in csv.reader(f, dialect=dialect)]
    grid = Grid(rows)
    logger.debug(f"Read {grid.size.x}x{grid.size.y} grid from '{path}'")
    return grid


def write_grid(grid: Grid, path: str, dialect: Any = csv.excel) -> None:
    target_dir = os.path.dirname(os.path.abspath(path))
    fd, tmp = tempfile.mkstemp(prefix=".sheetcli_", suffix=".csv", dir=target_dir)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, dialect=dialect)
            writer.writerows(grid.rows)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
    logger.debug(f"Wrote {grid.size.x}x{grid.size.y} grid to '{path}'")
