# src/sheetcli/core/__init__.py
"""Public facade for sheetcli.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (Bindings.py, Grid.py, History.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Bindings import BindingConfigError, Bindings, Input, InputPath  # noqa: F401
from .Grid import XY, Grid  # noqa: F401
from .History import ChangeTracker  # noqa: F401
from .Mode import Mode  # noqa: F401


__all__ = [
    "BindingConfigError",
    "Bindings",
    "ChangeTracker",
    "Grid",
    "Input",
    "InputPath",
    "Mode",
    "XY",
]
