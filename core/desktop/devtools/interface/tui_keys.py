"""Key decoding, the command keymap and the `gg` / `dd` / `yy` chord machine."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger("todo_tui.keys")


class Command(str, Enum):
    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
    HALF_UP = "half_up"
    HALF_DOWN = "half_down"
    LEFT = "left"
    RIGHT = "right"
    SELECT = "select"
    BACK = "back"
    QUIT = "quit"
    HELP = "help"
    REFRESH = "refresh"
    ADD = "add"
    EDIT = "edit"
    ADD_SUBTASK = "add_subtask"
    MANAGE_SECTIONS = "manage_sections"
    COMPLETE = "complete"
    DELETE = "delete"
    COPY = "copy"
    UNDO = "undo"
    MOVE_TASK = "move_task"
    MOVE_SECTION = "move_section"
    ADD_COMMENT = "add_comment"
    TOGGLE_SELECT = "toggle_select"
    PRIORITY1 = "priority1"
    PRIORITY2 = "priority2"
    PRIORITY3 = "priority3"
    PRIORITY4 = "priority4"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    SWITCH_PANE = "switch_pane"
    SEARCH = "search"
    CALENDAR_VIEW = "calendar_view"
    NEW_PROJECT = "new_project"
    TAB_INBOX = "tab_inbox"
    TAB_TODAY = "tab_today"
    TAB_UPCOMING = "tab_upcoming"
    TAB_LABELS = "tab_labels"
    TAB_PROJECTS = "tab_projects"
    TAB_CALENDAR = "tab_calendar"
    MOVE_TASK_NEXT_DAY = "move_task_next_day"
    MOVE_TASK_PREV_DAY = "move_task_prev_day"
    PREV_MONTH = "prev_month"
    NEXT_MONTH = "next_month"
    TOGGLE_HINTS = "toggle_hints"


class Prefix(str, Enum):
    G = "g"
    D = "d"
    Y = "y"


CHORD_COMMANDS: Dict[Prefix, Command] = {
    Prefix.G: Command.TOP,
    Prefix.D: Command.DELETE,
    Prefix.Y: Command.COPY,
}


@dataclass(frozen=True)
class ChordState:
    waiting_prefix: Optional[Prefix] = None

    @property
    def pending(self) -> bool:
        return self.waiting_prefix is not None


@dataclass(frozen=True)
class ChordResult:
    command: Optional[Command]
    consumed: bool
    chord: ChordState


DEFAULT_KEYMAP: Dict[str, Command] = {
    "k": Command.UP,
    "up": Command.UP,
    "j": Command.DOWN,
    "down": Command.DOWN,
    "G": Command.BOTTOM,
    "ctrl+u": Command.HALF_UP,
    "ctrl+d": Command.HALF_DOWN,
    "h": Command.LEFT,
    "left": Command.LEFT,
    "l": Command.RIGHT,
    "right": Command.RIGHT,
    "enter": Command.SELECT,
    "esc": Command.BACK,
    "q": Command.QUIT,
    "?": Command.HELP,
    "r": Command.REFRESH,
    "a": Command.ADD,
    "e": Command.EDIT,
    "s": Command.ADD_SUBTASK,
    "S": Command.MANAGE_SECTIONS,
    "x": Command.COMPLETE,
    "ctrl+z": Command.UNDO,
    "m": Command.MOVE_TASK,
    "M": Command.MOVE_SECTION,
    "A": Command.ADD_COMMENT,
    "space": Command.TOGGLE_SELECT,
    "1": Command.PRIORITY1,
    "2": Command.PRIORITY2,
    "3": Command.PRIORITY3,
    "4": Command.PRIORITY4,
    "!": Command.PRIORITY1,
    "@": Command.PRIORITY2,
    "#": Command.PRIORITY3,
    "$": Command.PRIORITY4,
    "<": Command.DUE_TODAY,
    ">": Command.DUE_TOMORROW,
    "tab": Command.SWITCH_PANE,
    "/": Command.SEARCH,
    "v": Command.CALENDAR_VIEW,
    "n": Command.NEW_PROJECT,
    "i": Command.TAB_INBOX,
    "I": Command.TAB_INBOX,
    "t": Command.TAB_TODAY,
    "T": Command.TAB_TODAY,
    "u": Command.TAB_UPCOMING,
    "U": Command.TAB_UPCOMING,
    "b": Command.TAB_LABELS,
    "B": Command.TAB_LABELS,
    "p": Command.TAB_PROJECTS,
    "P": Command.TAB_PROJECTS,
    "c": Command.TAB_CALENDAR,
    "C": Command.TAB_CALENDAR,
    "L": Command.MOVE_TASK_NEXT_DAY,
    "H": Command.MOVE_TASK_PREV_DAY,
    "[": Command.PREV_MONTH,
    "]": Command.NEXT_MONTH,
    "f1": Command.TOGGLE_HINTS,
}

_UNBIND = {"", "none", "unbound"}


def build_keymap(overrides: Optional[Mapping[str, str]] = None) -> Dict[str, Command]:
    """Defaults merged with user overrides; `none` unbinds a key, unknown names are skipped."""
    keymap = dict(DEFAULT_KEYMAP)
    for key, name in (overrides or {}).items():
        key = str(key)
        if key in Prefix._value2member_map_:
            logger.warning("Key %r is reserved for chords; override ignored", key)
            continue
        normalized = str(name or "").strip().lower()
        if normalized in _UNBIND:
            keymap.pop(key, None)
            continue
        try:
            keymap[key] = Command(normalized)
        except ValueError:
            logger.warning("Unknown command %r for key %r; override ignored", name, key)
    return keymap


def handle_key(key: str, chord: ChordState, keymap: Mapping[str, Command] = DEFAULT_KEYMAP) -> ChordResult:
    """Resolve one logical key against the pending chord and the keymap.

    A pending prefix is always cleared. Repeating it resolves the chord; any
    other key is then processed as if no prefix had been pending, so `d` `x`
    completes the task instead of deleting it.
    """
    if chord.waiting_prefix is not None:
        prefix = chord.waiting_prefix
        chord = ChordState()
        if key == prefix.value:
            return ChordResult(CHORD_COMMANDS[prefix], True, chord)

    if key in Prefix._value2member_map_:
        return ChordResult(None, True, ChordState(Prefix(key)))

    command = keymap.get(key)
    return ChordResult(command, command is not None, chord)


_SPECIAL_NAMES: Dict[str, str] = {
    "c-m": "enter",
    "c-j": "enter",
    "enter": "enter",
    "escape": "esc",
    "c-i": "tab",
    "tab": "tab",
    "s-tab": "shift+tab",
    " ": "space",
    "space": "space",
    "c-h": "backspace",
    "backspace": "backspace",
    "c-@": "ctrl+space",
}


def key_name(key) -> str:
    """Logical name for a prompt_toolkit key (`Keys` member or typed character)."""
    raw = getattr(key, "value", key)
    raw = str(raw)
    if raw in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[raw]
    if len(raw) > 2 and raw.startswith("c-"):
        return "ctrl+" + raw[2:]
    if len(raw) > 2 and raw.startswith("s-"):
        return "shift+" + raw[2:]
    return raw


HELP_SECTIONS: List[Tuple[str, List[Tuple[str, str]]]] = [
    (
        "Navigation",
        [
            ("j / k", "move down / up"),
            ("gg / G", "first / last row"),
            ("ctrl+d / ctrl+u", "half page down / up"),
            ("enter", "open"),
            ("esc", "back"),
        ],
    ),
    (
        "Tasks",
        [
            ("x", "complete / reopen"),
            ("dd", "delete"),
            ("yy", "copy"),
            ("space", "toggle selection"),
            ("1-4", "priority"),
            ("< / >", "due today / tomorrow"),
            ("H / L", "due one day earlier / later"),
        ],
    ),
    (
        "Views",
        [
            ("i t u b c p", "inbox, today, upcoming, labels, calendar, projects"),
            ("h / l", "previous / next project, calendar day"),
            ("[ / ]", "previous / next month"),
            ("v", "compact / expanded calendar"),
            ("r", "reload"),
            ("f1", "toggle hints"),
            ("q", "quit"),
        ],
    ),
]


__all__ = [
    "Command",
    "Prefix",
    "CHORD_COMMANDS",
    "ChordState",
    "ChordResult",
    "DEFAULT_KEYMAP",
    "build_keymap",
    "handle_key",
    "key_name",
    "HELP_SECTIONS",
]
