"""Cursor movement helpers operating on a ViewState and the slot count of the current list."""

from core.desktop.devtools.interface.tui_state import ViewState


def move_vertical_selection(state: ViewState, delta: int, total: int) -> None:
    """
    Move the cursor by `delta` slots, clamping to the available items.

    An empty list pins the cursor to 0.
    """
    if total <= 0:
        state.cursor = 0
        return
    state.cursor = max(0, min(state.cursor + delta, total - 1))


def move_to_top(state: ViewState, total: int) -> None:
    state.cursor = 0


def move_to_bottom(state: ViewState, total: int) -> None:
    state.cursor = max(0, total - 1)


def half_page(state: ViewState, direction: int, total: int) -> None:
    step = max(1, state.viewport.height // 2)
    move_vertical_selection(state, step if direction > 0 else -step, total)


def clamp_cursor(state: ViewState, total: int) -> None:
    move_vertical_selection(state, 0, total)


__all__ = ["move_vertical_selection", "move_to_top", "move_to_bottom", "half_page", "clamp_cursor"]
