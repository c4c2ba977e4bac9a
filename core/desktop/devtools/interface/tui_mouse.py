"""Mouse event handling helpers for TodoTUI."""

from prompt_toolkit.mouse_events import MouseButton, MouseEventType

from core.desktop.devtools.interface.tui_keys import ChordState
from core.desktop.devtools.interface.tui_state import View


def _handle_scroll(tui, mouse_event):
    if mouse_event.event_type == MouseEventType.SCROLL_DOWN:
        tui.move_vertical_selection(1)
        return True
    if mouse_event.event_type == MouseEventType.SCROLL_UP:
        tui.move_vertical_selection(-1)
        return True
    return False


def _handle_list_click(tui, mouse_event):
    # position.y is a document line; the viewport row map is relative to its offset
    viewport = tui.state.viewport
    row = mouse_event.position.y - viewport.offset
    slot = viewport.slot_at_row(row, tui.current_model().ordered_index)
    if slot is None:
        return True
    if tui.state.view == View.CALENDAR:
        tui.open_calendar_day(slot)
    elif tui.state.cursor == slot:
        tui.activate_current()
    else:
        tui.state.cursor = slot
        tui.state.chord = ChordState()
    return True


def handle_body_mouse(tui, mouse_event):
    """Route mouse events for the TodoTUI task list."""
    if getattr(tui.state, "show_help", False):
        return NotImplemented
    if _handle_scroll(tui, mouse_event):
        return None
    if mouse_event.event_type == MouseEventType.MOUSE_UP and mouse_event.button == MouseButton.LEFT:
        if _handle_list_click(tui, mouse_event):
            return None
    return NotImplemented


__all__ = ["handle_body_mouse"]
