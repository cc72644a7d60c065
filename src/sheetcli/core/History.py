# sheetcli/core/History.py
"""History Module for the sheetcli Editor
========================================
This module provides the `ChangeTracker` class, which manages the undo and redo
history of grid edits.

Every grid mutation returns a `Change` describing how to reverse it. The tracker
keeps those values on an undo stack; undoing one asks the grid to revert it,
and the grid hands back a new `Change` that reverses the undo, which goes onto
the redo stack (and vice versa). History is linear: recording a new change
discards anything that could have been redone.

Classes:
--------
- ChangeTracker: The undo and redo stacks plus the grid they apply to.
"""

import logging

from sheetcli.core.Grid import Change, Grid


## ==================== ChangeTracker Class (Undo/Redo) ====================
class ChangeTracker:
    """Class ChangeTracker
    ===================
    Manages the undo and redo history for one grid.

    Attributes:
        grid (Grid): The grid that undo and redo are applied to.
        _undo_stack (list[Change]): Changes that can be undone, newest last.
        _redo_stack (list[Change]): Changes produced by undo, newest last.

    Methods:
        push(change): Records a change made to the grid and clears the redo stack.
        undo() -> bool: Reverts the newest change. False if there is nothing to undo.
        redo() -> bool: Reverts the newest undo. False if there is nothing to redo.
        clear(): Drops both stacks.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self._undo_stack: list[Change] = []
        self._redo_stack: list[Change] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def push(self, change: Change) -> None:
        """Adds a change that was just applied to the grid."""
        self._undo_stack.append(change)
        self._redo_stack.clear()
        logging.debug(
            "History: %s recorded. Undo stack size: %d", type(change).__name__, len(self._undo_stack)
        )

    def clear(self) -> None:
        """Clears both undo and redo stacks."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        logging.debug("History: Undo/Redo stacks cleared.")

    def undo(self) -> bool:
        """Undoes the newest change.

        Returns:
            bool: True if a change was undone, False if the undo stack was empty.
        """
        if not self._undo_stack:
            logging.debug("History: Nothing to undo.")
            return False

        change = self._undo_stack[-1]
        logging.debug("Undo: reverting %r", change)
        inverse = self.grid.revert(change)
        self._undo_stack.pop()
        self._redo_stack.append(inverse)
        logging.debug(
            "Undo done. Undo stack: %d, redo stack: %d", len(self._undo_stack), len(self._redo_stack)
        )
        return True

    def redo(self) -> bool:
        """Redoes the newest undone change.

        Returns:
            bool: True if a change was redone, False if the redo stack was empty.
        """
        if not self._redo_stack:
            logging.debug("History: Nothing to redo.")
            return False

        change = self._redo_stack[-1]
        logging.debug("Redo: reverting %r", change)
        inverse = self.grid.revert(change)
        self._redo_stack.pop()
        self._undo_stack.append(inverse)
        logging.debug(
            "Redo done. Undo stack: %d, redo stack: %d", len(self._undo_stack), len(self._redo_stack)
        )
        return True
