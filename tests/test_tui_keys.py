import logging

import pytest
from prompt_toolkit.keys import Keys

from core.desktop.devtools.interface.tui_keys import (
    DEFAULT_KEYMAP,
    ChordState,
    Command,
    Prefix,
    build_keymap,
    handle_key,
    key_name,
)


def _feed(keys, keymap=DEFAULT_KEYMAP):
    chord = ChordState()
    commands = []
    for key in keys:
        result = handle_key(key, chord, keymap)
        chord = result.chord
        if result.command is not None:
            commands.append(result.command)
    return commands, chord


@pytest.mark.parametrize(
    "keys, expected",
    [
        ("gg", [Command.TOP]),
        ("dd", [Command.DELETE]),
        ("yy", [Command.COPY]),
        ("G", [Command.BOTTOM]),
        ("ddd", [Command.DELETE]),
        ("dddd", [Command.DELETE, Command.DELETE]),
    ],
)
def test_chords_resolve(keys, expected):
    commands, _ = _feed(keys)
    assert commands == expected


def test_prefix_is_consumed_without_command():
    result = handle_key("d", ChordState())
    assert result.command is None
    assert result.consumed
    assert result.chord.waiting_prefix is Prefix.D
    assert result.chord.pending


def test_non_matching_key_after_prefix_is_processed_fresh():
    commands, chord = _feed("dx")
    assert commands == [Command.COMPLETE]
    assert not chord.pending


def test_other_prefix_after_prefix_starts_new_chord():
    commands, chord = _feed("gd")
    assert commands == []
    assert chord.waiting_prefix is Prefix.D

    commands, chord = _feed("gdd")
    assert commands == [Command.DELETE]
    assert not chord.pending


def test_unknown_key_is_not_consumed_and_clears_chord():
    result = handle_key("Z", ChordState(Prefix.G))
    assert result.command is None
    assert not result.consumed
    assert not result.chord.pending


def test_default_keymap_entries():
    assert DEFAULT_KEYMAP["x"] is Command.COMPLETE
    assert DEFAULT_KEYMAP["!"] is Command.PRIORITY1
    assert DEFAULT_KEYMAP["$"] is Command.PRIORITY4
    assert DEFAULT_KEYMAP["<"] is Command.DUE_TODAY
    assert DEFAULT_KEYMAP["L"] is Command.MOVE_TASK_NEXT_DAY
    assert DEFAULT_KEYMAP["ctrl+u"] is Command.HALF_UP
    assert DEFAULT_KEYMAP["C"] is Command.TAB_CALENDAR
    assert DEFAULT_KEYMAP["b"] is Command.TAB_LABELS
    for prefix in Prefix:
        assert prefix.value not in DEFAULT_KEYMAP


def test_build_keymap_overrides(caplog):
    with caplog.at_level(logging.WARNING, logger="todo_tui.keys"):
        keymap = build_keymap({"z": "complete", "x": "none", "d": "top", "w": "fly", 5: "priority1"})

    assert keymap["z"] is Command.COMPLETE
    assert "x" not in keymap
    assert "d" not in keymap
    assert "w" not in keymap
    assert keymap["5"] is Command.PRIORITY1
    assert "reserved" in caplog.text
    assert "fly" in caplog.text
    assert DEFAULT_KEYMAP["x"] is Command.COMPLETE


def test_build_keymap_without_overrides_copies_defaults():
    keymap = build_keymap(None)
    assert keymap == DEFAULT_KEYMAP
    assert keymap is not DEFAULT_KEYMAP


@pytest.mark.parametrize(
    "key, expected",
    [
        (Keys.ControlM, "enter"),
        (Keys.Escape, "esc"),
        (Keys.ControlI, "tab"),
        (Keys.BackTab, "shift+tab"),
        (Keys.ControlD, "ctrl+d"),
        (Keys.ControlZ, "ctrl+z"),
        (Keys.Up, "up"),
        (Keys.F1, "f1"),
        (" ", "space"),
        ("x", "x"),
        ("G", "G"),
    ],
)
def test_key_name(key, expected):
    assert key_name(key) == expected
