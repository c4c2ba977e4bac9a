from types import SimpleNamespace

from prompt_toolkit.mouse_events import MouseButton, MouseEventType

from core.desktop.devtools.interface import tui_mouse
from core.desktop.devtools.interface.tui_keys import ChordState, Prefix
from core.desktop.devtools.interface.tui_state import View


def _mouse(event_type, button=MouseButton.LEFT, y=0):
    return SimpleNamespace(event_type=event_type, button=button, position=SimpleNamespace(y=y))


class FakeViewport:
    def __init__(self, offset=0, rows=None):
        self.offset = offset
        self.rows = rows or {}

    def slot_at_row(self, row, ordered_index):
        return self.rows.get(row)


class TUI:
    def __init__(self, view=View.TODAY, cursor=0, offset=0, rows=None, show_help=False):
        self.state = SimpleNamespace(
            view=view,
            cursor=cursor,
            viewport=FakeViewport(offset, rows),
            chord=ChordState(Prefix.D),
            show_help=show_help,
        )
        self.actions = []

    def current_model(self):
        return SimpleNamespace(ordered_index=[])

    def move_vertical_selection(self, delta):
        self.actions.append(("move", delta))

    def activate_current(self):
        self.actions.append(("activate", self.state.cursor))

    def open_calendar_day(self, slot):
        self.actions.append(("day", slot))


def test_scroll_moves_cursor():
    tui = TUI()
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.SCROLL_DOWN)) is None
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.SCROLL_UP)) is None
    assert tui.actions == [("move", 1), ("move", -1)]


def test_click_moves_cursor_relative_to_offset():
    tui = TUI(offset=20, rows={3: 7})
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_UP, y=23)) is None
    assert tui.state.cursor == 7
    assert not tui.state.chord.pending
    assert tui.actions == []


def test_click_on_cursor_activates():
    tui = TUI(cursor=2, rows={2: 2})
    tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_UP, y=2))
    assert tui.actions == [("activate", 2)]


def test_click_on_spacer_is_ignored():
    tui = TUI(cursor=1, rows={0: 0})
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_UP, y=5)) is None
    assert tui.state.cursor == 1
    assert tui.actions == []


def test_click_in_calendar_opens_day_list():
    tui = TUI(view=View.CALENDAR, rows={0: 0, 1: 1})
    tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_UP, y=1))
    assert tui.actions == [("day", 1)]


def test_help_overlay_and_other_events_pass_through():
    tui = TUI(show_help=True, rows={0: 0})
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.SCROLL_DOWN)) is NotImplemented
    tui = TUI(rows={0: 0})
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_DOWN)) is NotImplemented
    assert tui_mouse.handle_body_mouse(tui, _mouse(MouseEventType.MOUSE_UP, MouseButton.RIGHT)) is NotImplemented
    assert tui.actions == []
