# sheetcli/ui/CommandPalette.py
"""Command palette: a filterable list of every action the sheet knows.

Bound actions are listed first with the key path that triggers them, followed
by the actions that have no binding. Typing narrows the list to entries whose
action name or description contains the typed text (case-insensitive).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sheetcli.core.Bindings import Bindings, Input, Modifier, format_key_path


@dataclass(frozen=True)
class PaletteEntry:
    action: str
    keys: str  # rendered key path, empty when unbound
    description: str

    def matches(self, query: str) -> bool:
        q = query.lower()
        return q in self.action.lower() or q in self.description.lower()


def build_entries(bindings: Bindings, descriptions: dict[str, str]) -> list[PaletteEntry]:
    entries = []
    seen = set()
    for path, action in sorted(bindings.iterate(), key=lambda item: (len(item[0]), str(item[1]))):
        if action in seen:
            continue
        seen.add(action)
        entries.append(PaletteEntry(action, format_key_path(path), descriptions.get(action, "")))
    for action, description in descriptions.items():
        if action not in seen:
            entries.append(PaletteEntry(action, "", description))
    return entries


class CommandPalette:
    """State of the open palette: query text, filtered entries and highlight."""

    def __init__(self, bindings: Bindings, descriptions: dict[str, str]):
        self.entries = build_entries(bindings, descriptions)
        self.query = ""
        self.selected = 0
        self.closed = False
        self.chosen: Optional[str] = None

    @property
    def filtered(self) -> list[PaletteEntry]:
        return [e for e in self.entries if e.matches(self.query)]

    def handle_input(self, inp: Input) -> bool:
        """Applies one key press. Returns True once the palette should close.

        On `enter`, `chosen` holds the highlighted action (None if the filter
        matches nothing).
        """
        matches = self.filtered
        if inp == Input("esc"):
            self.closed = True
        elif inp == Input("enter"):
            if matches:
                self.chosen = matches[min(self.selected, len(matches) - 1)].action
            self.closed = True
        elif inp == Input("up"):
            self.selected = max(0, self.selected - 1)
        elif inp == Input("down"):
            self.selected = min(max(len(matches) - 1, 0), self.selected + 1)
        elif inp == Input("backspace"):
            self.query = self.query[:-1]
            self.selected = 0
        elif inp.modifiers in (Modifier.NONE, Modifier.SHIFT) and len(inp.key) == 1 and inp.key.isprintable():
            self.query += inp.key
            self.selected = 0
        else:
            logging.debug("CommandPalette: ignoring %s", inp)
        return self.closed
