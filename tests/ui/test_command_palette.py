# tests/ui/test_command_palette.py
"""Tests for the command palette: entry list, filtering and selection."""

from sheetcli.core.Bindings import Bindings, Input, Modifier, parse_key_path
from sheetcli.ui.CommandPalette import CommandPalette, PaletteEntry, build_entries

DESCRIPTIONS = {
    "write": "Write the grid to its file",
    "delete_row": "Delete the selected row",
    "undo": "Undo the last change",
    "quit": "Quit sheetcli",
}


def make_bindings() -> Bindings:
    b = Bindings()
    b.insert(Input("s", Modifier.CTRL), "write")
    b.insert_chord(parse_key_path("alt+- r"), "delete_row")
    b.insert_chord(parse_key_path("d d"), "delete_row")
    b.insert(Input("z", Modifier.CTRL), "undo")
    return b


def type_query(palette: CommandPalette, text: str) -> None:
    for ch in text:
        palette.handle_input(Input(ch))


def test_entries_list_bound_actions_then_unbound():
    entries = build_entries(make_bindings(), DESCRIPTIONS)
    actions = [e.action for e in entries]
    assert actions[-1] == "quit"
    assert set(actions[:-1]) == {"write", "delete_row", "undo"}
    assert len(actions) == len(set(actions))

    by_action = {e.action: e for e in entries}
    assert by_action["write"] == PaletteEntry("write", "ctrl+s", "Write the grid to its file")
    assert by_action["quit"].keys == ""
    assert by_action["delete_row"].keys in ("alt+- r", "d d")


def test_filter_matches_name_or_description_case_insensitively():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    type_query(palette, "FILE")
    assert [e.action for e in palette.filtered] == ["write"]

    palette.handle_input(Input("backspace"))
    palette.handle_input(Input("backspace"))
    palette.handle_input(Input("backspace"))
    palette.handle_input(Input("backspace"))
    type_query(palette, "del")
    assert [e.action for e in palette.filtered] == ["delete_row"]


def test_no_fuzzy_matching():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    type_query(palette, "dlrw")
    assert palette.filtered == []
    assert palette.handle_input(Input("enter")) is True
    assert palette.chosen is None


def test_up_down_and_enter_choose_highlighted_action():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    expected = [e.action for e in palette.filtered]
    palette.handle_input(Input("down"))
    palette.handle_input(Input("down"))
    palette.handle_input(Input("up"))
    assert palette.selected == 1
    assert palette.handle_input(Input("enter")) is True
    assert palette.chosen == expected[1]


def test_highlight_is_clamped():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    palette.handle_input(Input("up"))
    assert palette.selected == 0
    for _ in range(10):
        palette.handle_input(Input("down"))
    assert palette.selected == len(palette.entries) - 1


def test_typing_resets_highlight():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    palette.handle_input(Input("down"))
    type_query(palette, "u")
    assert palette.selected == 0


def test_escape_closes_without_choice():
    palette = CommandPalette(make_bindings(), DESCRIPTIONS)
    assert palette.handle_input(Input("q")) is False
    assert palette.handle_input(Input("esc")) is True
    assert palette.closed
    assert palette.chosen is None
