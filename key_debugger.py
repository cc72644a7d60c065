# key_debugger.py
"""Shows what sheetcli makes of each key press.

Run it in the terminal you edit in to find out which key specs to put in
`config.toml`: every key is shown raw, as decoded by `KeyBinder`, and with the
action it is bound to in the current configuration. Press `q` to quit.
"""

import curses
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from sheetcli.ui.KeyBinder import KeyBinder  # noqa: E402
from sheetcli.utils.utils import load_config  # noqa: E402


def main(stdscr: "curses.window") -> None:
    curses.curs_set(0)
    curses.raw()
    stdscr.keypad(True)
    binder = KeyBinder(load_config(), stdscr)

    last_key_info: list[str] = []
    while True:
        stdscr.erase()
        height, width = stdscr.getmaxyx()

        title = "sheetcli Key Debugger"
        instructions = "Press any key to see how it is decoded. Press 'q' to quit."
        try:
            stdscr.addstr(1, max(0, (width - len(title)) // 2), title, curses.A_BOLD)
            stdscr.addstr(2, max(0, (width - len(instructions)) // 2), instructions, curses.A_DIM)
            for i, line in enumerate(last_key_info[: max(0, height - 5)]):
                stdscr.addstr(5 + i, 4, line[: max(0, width - 5)])
        except curses.error:
            pass
        stdscr.refresh()

        inp = binder.get_key_input()
        if inp is None:
            continue
        if str(inp) == "q":
            break

        action = binder.bindings.lookup([inp])
        last_key_info = [
            f"{'Input:':<20} {inp}",
            f"{'Key:':<20} {inp.key!r}",
            f"{'Modifiers:':<20} {inp.modifiers!r}",
            f"{'Binding:':<20} {action!r}",
        ]


if __name__ == "__main__":
    curses.wrapper(main)
