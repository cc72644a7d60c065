# sheetcli/core/Bindings.py
"""Bindings Module for the sheetcli Editor
=========================================
This module implements the chorded key-binding tree that turns key presses into
editor actions.

Key Features:
-------------
- `Input`: an immutable key + modifier value, parsed from and rendered to the
  same "ctrl+s" / "alt+-" notation used by the configuration file.
- `InputPath`: the accumulator of keys awaiting resolution (a pending chord).
- `Bindings`: a tree keyed by `Input` at each level, whose nodes are either
  `ActionNode` leaves or `ChordNode` interior nodes owning a nested tree.

A key can be bound only once per level. Any conflict is a mistake in the static
binding table and raises `BindingConfigError` while the tree is being built;
resolving keys at runtime never raises.

Classes:
--------
- Modifier, Input, InputPath, ActionNode, ChordNode, Bindings, BindingConfigError
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Union


class BindingConfigError(Exception):
    """Raised when the binding table binds a key twice or layers a chord over an action."""


class Modifier(enum.IntFlag):
    NONE = 0
    CTRL = enum.auto()
    ALT = enum.auto()
    SHIFT = enum.auto()


# Render order for modifiers, also the set of names accepted by Input.parse().
_MODIFIER_NAMES: dict[str, Modifier] = {
    "ctrl": Modifier.CTRL,
    "alt": Modifier.ALT,
    "shift": Modifier.SHIFT,
}

NAMED_KEYS = frozenset(
    {
        "up", "down", "left", "right",
        "home", "end", "pageup", "pagedown",
        "insert", "delete", "backspace",
        "tab", "enter", "esc", "space",
        *(f"f{i}" for i in range(1, 13)),
    }
)


@dataclass(frozen=True)
class Input:
    """A single key press: a key name or character plus a modifier set."""

    key: str
    modifiers: Modifier = Modifier.NONE

    def __str__(self) -> str:
        parts = [name for name, flag in _MODIFIER_NAMES.items() if flag in self.modifiers]
        parts.append("space" if self.key == " " else self.key)
        return "+".join(parts)

    @classmethod
    def parse(cls, spec: str) -> "Input":
        """Parses a key specification such as "ctrl+s", "f2", "alt++" or "G".

        Modifier names and named keys are case-insensitive; a single character
        key keeps its case.

        Raises:
            ValueError: If the spec is empty, names an unknown modifier or an
                unknown multi-character key, or applies shift to a non-letter
                character. Shift on a letter is folded into the upper-case letter.
        """
        s = spec.strip()
        if not s:
            raise ValueError("Key specification cannot be empty.")

        # "+" is both the separator and a valid key ("alt++", "+").
        if s == "+":
            mod_part, key = "", "+"
        elif s.endswith("++"):
            mod_part, key = s[:-2], "+"
        elif "+" in s:
            mod_part, key = s.rsplit("+", 1)
        else:
            mod_part, key = "", s

        modifiers = Modifier.NONE
        for name in filter(None, (p.strip().lower() for p in mod_part.split("+"))):
            if name not in _MODIFIER_NAMES:
                raise ValueError(f"Unknown modifier {name!r} in key spec {spec!r}")
            modifiers |= _MODIFIER_NAMES[name]

        if len(key) != 1:
            key = key.lower()
            if key == "space":
                key = " "
            elif key not in NAMED_KEYS:
                raise ValueError(f"Unknown key {key!r} in key spec {spec!r}")
        if Modifier.SHIFT in modifiers and len(key) == 1:
            # terminals report shifted characters as the character itself
            if not key.isalpha():
                raise ValueError(f"Use the shifted character instead of shift+{key!r} in key spec {spec!r}")
            key = key.upper()
            modifiers ^= Modifier.SHIFT
        return cls(key, modifiers)


def parse_key_path(spec: str) -> tuple[Input, ...]:
    """Parses a whitespace separated chord specification ("alt+- r") into Inputs."""
    path = tuple(Input.parse(part) for part in spec.split())
    if not path:
        raise ValueError(f"Empty key path: {spec!r}")
    return path


def format_key_path(path: Iterable[Input]) -> str:
    return " ".join(str(i) for i in path)


class InputPath:
    """Inputs typed so far for a chord that has not resolved yet."""

    def __init__(self) -> None:
        self._inputs: list[Input] = []

    def push(self, inp: Input) -> None:
        self._inputs.append(inp)

    def clear(self) -> None:
        self._inputs.clear()

    def __iter__(self) -> Iterator[Input]:
        return iter(self._inputs)

    def __len__(self) -> int:
        return len(self._inputs)

    def __bool__(self) -> bool:
        return bool(self._inputs)

    def __str__(self) -> str:
        return format_key_path(self._inputs)

    def __repr__(self) -> str:
        return f"InputPath({str(self)!r})"


@dataclass(frozen=True)
class ActionNode:
    action: Any


@dataclass
class ChordNode:
    name: str
    bindings: "Bindings" = field(default_factory=lambda: Bindings())


BindingNode = Union[ActionNode, ChordNode]


# ==================== Bindings Class ====================
class Bindings:
    """Class Bindings
    ===================
    One level of the binding tree: a mapping from `Input` to `ActionNode` or
    `ChordNode`. Chord nodes own a nested `Bindings`, so the whole tree is a
    plain recursive structure with no cycles.

    Methods:
        insert(key, action): Binds a single key at this level.
        create_chord(name, key_path): Creates or descends chord nodes and returns the terminal subtree.
        insert_chord(key_path, action, name): Binds a multi-key chord to an action.
        lookup(path): Resolves a sequence of Inputs to a node, or None.
        iterate(): Yields every (key path, action) leaf of the tree.
    """

    def __init__(self) -> None:
        self._map: dict[Input, BindingNode] = {}

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: Input) -> bool:
        return key in self._map

    def __repr__(self) -> str:
        return f"Bindings({self._map!r})"

    def insert(self, key: Input, action: Any) -> None:
        """Binds `key` to `action` at this level.

        Raises:
            BindingConfigError: If `key` is already bound to an action or a chord.
        """
        existing = self._map.get(key)
        if existing is not None:
            raise BindingConfigError(f"Input already bound: {key} => {existing!r}")
        self._map[key] = ActionNode(action)

    def create_chord(self, name: str, key_path: Iterable[Input]) -> "Bindings":
        """Creates (or descends into) chord nodes along `key_path`.

        Only the terminal chord node is named; intermediate nodes created on the
        way get an empty name, and nodes that already exist keep theirs.

        Returns:
            Bindings: The subtree owned by the terminal chord node.

        Raises:
            BindingConfigError: If any key on the path is bound to an action.
            ValueError: If `key_path` is empty.
        """
        path = tuple(key_path)
        if not path:
            raise ValueError("create_chord() needs at least one Input")

        level = self
        for depth, key in enumerate(path):
            is_terminal = depth == len(path) - 1
            node = level._map.get(key)
            if node is None:
                node = ChordNode(name if is_terminal else "")
                level._map[key] = node
            elif isinstance(node, ActionNode):
                raise BindingConfigError(
                    f"Chord {format_key_path(path)!r} conflicts with existing binding {key} => {node.action!r}"
                )
            elif is_terminal and name and not node.name:
                node.name = name
            level = node.bindings
        return level

    def insert_chord(self, key_path: Iterable[Input], action: Any, name: str = "") -> None:
        """Binds a sequence of two or more Inputs to `action`.

        Raises:
            BindingConfigError: If the final key is already bound or a prefix key is an action.
            ValueError: If the path has fewer than two Inputs.
        """
        path = tuple(key_path)
        if len(path) < 2:
            raise ValueError(f"A chord needs at least two Inputs, got {format_key_path(path)!r}")
        subtree = self.create_chord(name, path[:-1])
        try:
            subtree.insert(path[-1], action)
        except BindingConfigError as e:
            raise BindingConfigError(f"Chord already bound: {format_key_path(path)} ({e})") from e

    def lookup(self, path: Iterable[Input]) -> Optional[BindingNode]:
        """Resolves `path` one Input at a time.

        Returns:
            - None if the path is empty or leaves the tree (not found),
            - a `ChordNode` if the path ends inside a chord (waiting for more keys),
            - an `ActionNode` once an action is reached. Inputs left over after an
              action are ignored.
        """
        level: Bindings = self
        node: Optional[BindingNode] = None
        for key in path:
            if isinstance(node, ActionNode):
                logging.debug("Bindings.lookup: ignoring input %s after action %r", key, node.action)
                return node
            node = level._map.get(key)
            if node is None:
                return None
            if isinstance(node, ChordNode):
                level = node.bindings
        return node

    def get_single(self, key: Input) -> Optional[Any]:
        node = self._map.get(key)
        return node.action if isinstance(node, ActionNode) else None

    def singles(self) -> Iterator[tuple[Input, Any]]:
        """Yields the (Input, action) pairs bound directly at this level."""
        for key, node in self._map.items():
            if isinstance(node, ActionNode):
                yield key, node.action

    def iterate(self, prefix: tuple[Input, ...] = ()) -> Iterator[tuple[tuple[Input, ...], Any]]:
        """Yields (key path, action) for every leaf below this level.

        A level's own actions come before anything inside its chords. The order
        of siblings is not guaranteed.
        """
        chords: list[tuple[Input, ChordNode]] = []
        for key, node in self._map.items():
            if isinstance(node, ActionNode):
                yield prefix + (key,), node.action
            else:
                chords.append((key, node))
        for key, chord in chords:
            yield from chord.bindings.iterate(prefix + (key,))

    __iter__ = iterate

    def actions(self) -> Iterator[Any]:
        return (action for _path, action in self.iterate())
