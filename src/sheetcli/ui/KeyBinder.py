# sheetcli/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates between the outside world and the binding tree in
`sheetcli.core.Bindings`:

- the configuration side: the `keybindings` and `chords` sections of the
  configuration are parsed into a `Bindings` tree once at startup;
- the terminal side: raw curses key codes and characters are decoded into
  `Input` values, one per key press.

Main Functions:
1. build_bindings: Builds the binding tree from the configuration.
2. decode_key: Maps a curses key code or character to an `Input`.
3. KeyBinder.get_key_input: Reads one key press, folding ESC + key into Alt.
4. KeyBinder.lookup: Finds the action bound to a key path spec (for help and tests).

Key specs that cannot be parsed are logged and skipped, so a typo in the user's
config file costs one binding. Conflicting bindings are not recoverable and
raise `BindingConfigError` to the caller.
"""

import curses
import logging
from typing import Any, Optional, Union

from sheetcli.core.Bindings import (
    ActionNode,
    BindingConfigError,
    Bindings,
    Input,
    Modifier,
    parse_key_path,
)

KEY_LOGGER = logging.getLogger("sheetcli.keyevents")

ESC = 27


def _curses_key_names() -> dict[int, Input]:
    names = {
        curses.KEY_UP: Input("up"),
        curses.KEY_DOWN: Input("down"),
        curses.KEY_LEFT: Input("left"),
        curses.KEY_RIGHT: Input("right"),
        curses.KEY_HOME: Input("home"),
        curses.KEY_END: Input("end"),
        curses.KEY_PPAGE: Input("pageup"),
        curses.KEY_NPAGE: Input("pagedown"),
        curses.KEY_IC: Input("insert"),
        curses.KEY_DC: Input("delete"),
        curses.KEY_BACKSPACE: Input("backspace"),
        curses.KEY_ENTER: Input("enter"),
        curses.KEY_BTAB: Input("tab", Modifier.SHIFT),
        curses.KEY_SLEFT: Input("left", Modifier.SHIFT),
        curses.KEY_SRIGHT: Input("right", Modifier.SHIFT),
        curses.KEY_SHOME: Input("home", Modifier.SHIFT),
        curses.KEY_SEND: Input("end", Modifier.SHIFT),
    }
    for n in range(1, 13):
        names[curses.KEY_F0 + n] = Input(f"f{n}")
    return names


CURSES_KEY_NAMES = _curses_key_names()


def _decode_char(ch: str) -> Optional[Input]:
    code = ord(ch)
    if code == ESC:
        return Input("esc")
    if code == 9:
        return Input("tab")
    if code in (10, 13):
        return Input("enter")
    if code in (8, 127):
        return Input("backspace")
    if 1 <= code <= 26:
        return Input(chr(code + 96), Modifier.CTRL)
    if ch == " ":
        return Input(" ")
    if not ch.isprintable():
        logging.debug("decode_key: ignoring unprintable character %r", ch)
        return None
    return Input(ch)


def decode_key(key: Union[int, str]) -> Optional[Input]:
    """Maps one value returned by `get_wch()`/`getch()` to an `Input`.

    Returns:
        Optional[Input]: The decoded input, or None for keys with no meaning
        to the editor (terminal resize, unknown codes).
    """
    if isinstance(key, str):
        if len(key) != 1:
            logging.debug("decode_key: ignoring multi-character key %r", key)
            return None
        return _decode_char(key)

    if key == curses.KEY_RESIZE:
        return None
    if key in CURSES_KEY_NAMES:
        return CURSES_KEY_NAMES[key]
    if 0 <= key < 256:
        return _decode_char(chr(key))
    logging.debug("decode_key: unknown key code %d", key)
    return None


def _spec_list(spec: Any) -> list[str]:
    if isinstance(spec, (list, tuple)):
        return [str(s) for s in spec if s]
    return [str(spec)]


def build_bindings(config: dict[str, Any]) -> Bindings:
    """Builds the binding tree from the `chords` and `keybindings` config sections.

    Named chord prefixes are created first so their display names stick, then
    every key spec of every action is bound. Actions with an empty spec are
    disabled.

    Raises:
        BindingConfigError: If two specs bind the same key path, or a chord is
            layered over a single-key binding.
    """
    bindings = Bindings()

    for prefix_spec, name in config.get("chords", {}).items():
        try:
            path = parse_key_path(prefix_spec)
        except ValueError as e:
            logging.error("Ignoring chord name for %r: %s", prefix_spec, e)
            continue
        bindings.create_chord(str(name), path)

    for action, spec in config.get("keybindings", {}).items():
        if not spec:
            logging.debug("Keybinding for action %r is disabled or empty.", action)
            continue
        for key_spec in _spec_list(spec):
            try:
                path = parse_key_path(key_spec)
            except ValueError as e:
                logging.error(
                    "Error parsing keybinding %r for action %r: %s. "
                    "This specific binding for the action will be ignored.",
                    key_spec, action, e,
                )
                continue
            try:
                if len(path) == 1:
                    bindings.insert(path[0], action)
                else:
                    bindings.insert_chord(path, action)
            except BindingConfigError as e:
                raise BindingConfigError(f"Cannot bind {key_spec!r} to {action!r}: {e}") from e

    logging.debug("Built binding tree with %d bound key paths.", sum(1 for _ in bindings.iterate()))
    return bindings


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Owns the binding tree built from the configuration and reads decoded key
    presses from a curses window.

    Attributes:
        config (dict): Application configuration.
        stdscr: The curses window keys are read from.
        bindings (Bindings): The binding tree built by `build_bindings`.
    """

    def __init__(self, config: dict[str, Any], stdscr: Optional["curses.window"] = None):
        self.config = config
        self.stdscr = stdscr
        self.bindings = build_bindings(config)

    def get_key_input(self, window: Optional["curses.window"] = None) -> Optional[Input]:
        """Reads a single key press from the terminal.

        Special keys arrive already decoded by keypad mode. ESC followed
        immediately by another key is reported as Alt+that key; a lone ESC is
        `esc`.

        Returns:
            Optional[Input]: The decoded input, or None if nothing usable was read.
        """
        target = window or self.stdscr
        try:
            key = target.get_wch()
        except curses.error:
            return None

        if key not in ("\x1b", ESC):
            inp = decode_key(key)
            KEY_LOGGER.debug("key %r -> %s", key, inp)
            return inp

        target.nodelay(True)
        try:
            nxt = self._read_pending(target)
            if nxt is None:
                inp = Input("esc")
            elif not isinstance(nxt, str):
                # keypad already translated the key after ESC
                inp = decode_key(nxt)
                if inp is not None:
                    inp = Input(inp.key, inp.modifiers | Modifier.ALT)
            else:
                decoded = _decode_char(nxt)
                inp = Input(decoded.key, decoded.modifiers | Modifier.ALT) if decoded else Input("esc")
        finally:
            target.nodelay(False)
        KEY_LOGGER.debug("key ESC + %r -> %s", nxt, inp)
        return inp

    @staticmethod
    def _read_pending(target: Any) -> Optional[Union[int, str]]:
        try:
            return target.get_wch()
        except curses.error:
            return None

    def lookup(self, key_spec: str) -> Optional[Any]:
        """Finds the action bound to a key path spec such as "ctrl+s" or "alt+- r".

        Returns:
            The action, or None if the spec is invalid or not bound to an action.
        """
        try:
            path = parse_key_path(key_spec)
        except ValueError:
            return None
        node = self.bindings.lookup(path)
        return node.action if isinstance(node, ActionNode) else None
