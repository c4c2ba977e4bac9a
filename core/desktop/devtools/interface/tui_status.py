"""Tab bar, status bar, key hints and help overlay builders for TodoTUI."""

from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.mouse_events import MouseButton, MouseEventType

from core.desktop.devtools.interface.tui_display import fragments_width
from core.desktop.devtools.interface.tui_keys import HELP_SECTIONS
from core.desktop.devtools.interface.tui_state import TAB_ORDER, VIEW_TITLES, View

LIST_HINTS: List[Tuple[str, str]] = [
    ("j/k", "move"),
    ("x", "done"),
    ("dd", "delete"),
    ("yy", "copy"),
    ("space", "select"),
    ("1-4", "priority"),
    ("?", "help"),
]
PROJECT_HINTS: List[Tuple[str, str]] = [("h/l", "project")] + LIST_HINTS
CALENDAR_HINTS: List[Tuple[str, str]] = [
    ("h/j/k/l", "day/week"),
    ("[ ]", "month"),
    ("t", "today"),
    ("v", "view"),
    ("enter", "open day"),
    ("?", "help"),
]
DAY_HINTS: List[Tuple[str, str]] = LIST_HINTS + [("esc", "back")]
LABEL_HINTS: List[Tuple[str, str]] = [("j/k", "move"), ("enter", "show tasks"), ("?", "help")]


_DRILL_DOWN_TABS = {View.CALENDAR_DAY: View.CALENDAR, View.LABEL_TASKS: View.LABELS}


def _tab_view(view: View) -> View:
    return _DRILL_DOWN_TABS.get(view, view)


def build_tab_bar(tui) -> FormattedText:
    current = _tab_view(tui.state.view)
    parts: List[tuple] = []

    def make_handler(view: View):
        def handler(event):
            if event.event_type == MouseEventType.MOUSE_UP and event.button == MouseButton.LEFT:
                tui.switch_view(view)
                return None
            return NotImplemented

        return handler

    for view in TAB_ORDER:
        style = "class:tab.active" if view == current else "class:tab"
        parts.append((style, f" {VIEW_TITLES[view]} ", make_handler(view)))
        parts.append(("class:text.dim", " "))
    return FormattedText(parts)


def build_status_text(tui) -> FormattedText:
    state = tui.state
    parts: List[Tuple[str, str]] = [("class:status", f" {tui.view_title()} ")]
    parts.append(("class:text.dim", f"| {tui.count_text()}"))
    if state.selected_ids:
        parts.append(("class:text.dim", " | "))
        parts.append(("class:mark", f"{len(state.selected_ids)} selected"))
    if state.chord.pending:
        parts.append(("class:text.dim", " | "))
        parts.append(("class:status.key", f"{state.chord.waiting_prefix.value}-"))
    message = state.current_status()
    if message:
        style = "class:status.fail" if message.startswith("Error") else "class:status.ok"
        parts.append(("class:text.dim", " | "))
        parts.append((style, message[:80]))
    right = "F1 hints "
    used = fragments_width(parts)
    parts.append(("class:status", " " * max(1, tui.get_terminal_width() - used - len(right))))
    parts.append(("class:text.dim", right))
    return FormattedText(parts)


def hints_for(view: View) -> List[Tuple[str, str]]:
    if view == View.CALENDAR:
        return CALENDAR_HINTS
    if view == View.LABELS:
        return LABEL_HINTS
    if view in (View.CALENDAR_DAY, View.LABEL_TASKS):
        return DAY_HINTS
    if view == View.PROJECTS:
        return PROJECT_HINTS
    return LIST_HINTS


def build_hints_text(tui) -> FormattedText:
    parts: List[Tuple[str, str]] = []
    for key, description in hints_for(tui.state.view):
        parts.append(("class:status.key", f" {key}"))
        parts.append(("class:text.dim", f":{description}"))
    return FormattedText(parts)


def build_help_text() -> FormattedText:
    parts: List[Tuple[str, str]] = [("class:title", "Keys"), ("", "\n\n")]
    for title, items in HELP_SECTIONS:
        parts.append(("class:header", title + "\n"))
        for keys, description in items:
            parts.append(("class:status.key", f"  {keys:<18}"))
            parts.append(("class:text", description + "\n"))
        parts.append(("", "\n"))
    parts.append(("class:text.dim", "esc or ? to close"))
    return FormattedText(parts)


__all__ = ["build_tab_bar", "build_status_text", "build_hints_text", "build_help_text", "hints_for"]
