from core.desktop.devtools.interface.tui_keys import ChordState, Prefix
from core.desktop.devtools.interface.tui_state import CALENDAR_EXPANDED, View, ViewState


def test_create_configures_viewport_buffer_and_mode():
    state = ViewState.create(buffer=2, calendar_mode=CALENDAR_EXPANDED, view=View.INBOX)
    assert state.viewport.buffer == 2
    assert state.calendar_mode == CALENDAR_EXPANDED
    assert state.view == View.INBOX


def test_switch_view_resets_cursor_scroll_and_chord():
    state = ViewState.create()
    state.cursor = 5
    state.viewport.offset = 12
    state.chord = ChordState(Prefix.G)
    state.show_help = True

    state.switch_view(View.UPCOMING)
    assert state.view == View.UPCOMING
    assert state.cursor == 0
    assert state.viewport.offset == 0
    assert not state.chord.pending
    assert not state.show_help
    assert state.previous_view is None


def test_go_back_returns_to_remembered_view():
    state = ViewState.create(view=View.CALENDAR)
    state.switch_view(View.CALENDAR_DAY, remember=True)
    assert state.go_back()
    assert state.view == View.CALENDAR
    assert not state.go_back()


def test_status_message_expires():
    state = ViewState.create()
    state.set_status("Saved", ttl=2, now=100.0)
    assert state.current_status(now=101.0) == "Saved"
    assert state.current_status(now=102.0) == ""
    assert state.status_message == ""
