#!/usr/bin/env python3
"""TUI application - TodoTUI class."""

import logging
import os
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.containers import ConditionalContainer, DynamicContainer
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

import config
from application.ports import TaskRepository, TaskSnapshot
from core import Section, Task
from infrastructure.file_repository import RepositoryError
from core.desktop.devtools.interface import tui_actions
from core.desktop.devtools.interface.tui_calendar import (
    DEFAULT_WEEKEND_DAYS,
    build_month_cells,
    compute_layout,
    month_geometry,
    render_compact,
    render_expanded,
    shift_day,
    shift_month,
)
from core.desktop.devtools.interface.tui_clipboard import ClipboardMixin
from core.desktop.devtools.interface.tui_keys import DEFAULT_KEYMAP, ChordState, Command, handle_key, key_name
from core.desktop.devtools.interface.tui_lines import build_label_list, build_line_model
from core.desktop.devtools.interface.tui_models import LineModel, RowContext, InteractiveFormattedTextControl
from core.desktop.devtools.interface.tui_mouse import handle_body_mouse
from core.desktop.devtools.interface.tui_navigation import clamp_cursor, half_page, move_to_bottom, move_to_top, move_vertical_selection
from core.desktop.devtools.interface.tui_state import CALENDAR_COMPACT, CALENDAR_EXPANDED, View, ViewState
from core.desktop.devtools.interface.tui_status import build_help_text, build_hints_text, build_status_text, build_tab_bar
from core.desktop.devtools.interface.tui_themes import DEFAULT_THEME, build_style
from core.desktop.devtools.interface.tui_views import ViewListing, browsable_projects, build_listing
from core.desktop.devtools.interface.tui_window import DEFAULT_BUFFER

logger = logging.getLogger("todo_tui.app")

# tab bar, title, key hints, status bar
CHROME_ROWS = 4

UNAVAILABLE_COMMANDS = frozenset(
    {
        Command.ADD,
        Command.EDIT,
        Command.ADD_SUBTASK,
        Command.MANAGE_SECTIONS,
        Command.MOVE_TASK,
        Command.MOVE_SECTION,
        Command.ADD_COMMENT,
        Command.SEARCH,
        Command.NEW_PROJECT,
        Command.SWITCH_PANE,
    }
)

TAB_COMMANDS: Dict[Command, View] = {
    Command.TAB_INBOX: View.INBOX,
    Command.TAB_TODAY: View.TODAY,
    Command.TAB_UPCOMING: View.UPCOMING,
    Command.TAB_LABELS: View.LABELS,
    Command.TAB_PROJECTS: View.PROJECTS,
    Command.TAB_CALENDAR: View.CALENDAR,
}

PRIORITY_COMMANDS: Dict[Command, int] = {
    Command.PRIORITY1: 4,
    Command.PRIORITY2: 3,
    Command.PRIORITY3: 2,
    Command.PRIORITY4: 1,
}

LABEL_LIST_COMMANDS = frozenset(
    {
        Command.UP,
        Command.DOWN,
        Command.TOP,
        Command.BOTTOM,
        Command.HALF_UP,
        Command.HALF_DOWN,
        Command.SELECT,
    }
)

CALENDAR_MOVES: Dict[Command, int] = {
    Command.LEFT: -1,
    Command.RIGHT: 1,
    Command.UP: -7,
    Command.DOWN: 7,
}


class TodoTUI(ClipboardMixin):
    @classmethod
    def build_style(cls, theme: str) -> Style:
        return build_style(theme)

    def __init__(
        self,
        repository: TaskRepository,
        theme: str = DEFAULT_THEME,
        keymap: Optional[Dict[str, Command]] = None,
        render_buffer: int = DEFAULT_BUFFER,
        calendar_mode: str = CALENDAR_COMPACT,
        weekend_days: Sequence[int] = DEFAULT_WEEKEND_DAYS,
        upcoming_days: int = config.DEFAULT_UPCOMING_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.snapshot = TaskSnapshot()
        self.keymap = dict(keymap or DEFAULT_KEYMAP)
        self.weekend_days = tuple(weekend_days)
        self.upcoming_days = upcoming_days
        self.clock = clock or datetime.now
        self.state = ViewState.create(buffer=render_buffer, calendar_mode=calendar_mode)
        self.state.calendar_date = self.clock().date()
        self.undo_stack: List[Tuple[str, List[Task]]] = []
        self.clipboard = self._build_clipboard()
        self.reload()

        self.style = self.build_style(theme)

        kb = KeyBindings()
        kb.timeout = 0

        @kb.add(Keys.Any, eager=True)
        def _(event):
            for press in event.key_sequence:
                self.handle_key_press(key_name(press.key))

        self.tab_bar = Window(
            content=FormattedTextControl(self.get_tab_bar_text),
            height=1,
            always_hide_cursor=True,
        )
        self.title_bar = Window(content=FormattedTextControl(self.get_title_text), height=1, always_hide_cursor=True)
        self.list_control = InteractiveFormattedTextControl(
            self.get_list_text,
            show_cursor=False,
            focusable=False,
            get_cursor_position=self._list_cursor_position,
            mouse_handler=self._handle_body_mouse,
        )
        self.list_window = Window(
            content=self.list_control,
            always_hide_cursor=True,
            wrap_lines=False,
            get_vertical_scroll=lambda window: self.state.viewport.offset,
        )
        self.calendar_window = Window(
            content=FormattedTextControl(self.get_calendar_text),
            always_hide_cursor=True,
            wrap_lines=False,
            height=self._calendar_height,
        )
        self.help_window = Window(content=FormattedTextControl(build_help_text), always_hide_cursor=True)
        self.compact_body = HSplit([self.calendar_window, Window(height=1, char=" "), self.list_window])
        self.body_container = DynamicContainer(self._resolve_body_container)
        self.hints_bar = ConditionalContainer(
            Window(content=FormattedTextControl(self.get_hints_text), height=1, always_hide_cursor=True),
            filter=Condition(lambda: self.state.show_hints),
        )
        self.status_bar = Window(content=FormattedTextControl(self.get_status_text), height=1, always_hide_cursor=True)

        root = HSplit([self.tab_bar, self.title_bar, self.body_container, self.hints_bar, self.status_bar])
        self.app = Application(
            layout=Layout(root),
            key_bindings=kb,
            style=self.style,
            full_screen=True,
            mouse_support=True,
            refresh_interval=1.0,
            clipboard=self.clipboard,
        )
        try:
            self.app.ttimeoutlen = max(0.0, float(os.getenv("TODO_TUI_TTIMEOUTLEN", "0.05")))
        except ValueError:
            self.app.ttimeoutlen = 0.05

    @staticmethod
    def get_terminal_width() -> int:
        """Get current terminal width, default to 100 if unavailable."""
        try:
            return os.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            return 100

    @staticmethod
    def get_terminal_height() -> int:
        try:
            return os.get_terminal_size().lines
        except (AttributeError, ValueError, OSError):
            return 40

    # -------- data --------
    def reload(self) -> bool:
        try:
            self.snapshot = self.repository.load()
        except RepositoryError as exc:
            logger.warning("Load failed: %s", exc)
            self.state.set_status(f"Error: {exc}", ttl=8)
            return False
        self.undo_stack.clear()
        known = {task.id for task in self.snapshot.tasks}
        self.state.selected_ids &= known
        self.clamp_cursor()
        return True

    def persist(self) -> bool:
        try:
            self.repository.save(self.snapshot)
        except RepositoryError as exc:
            logger.warning("Save failed: %s", exc)
            self.state.set_status(f"Error: {exc}", ttl=8)
            return False
        return True

    # -------- current screen --------
    def listing(self) -> ViewListing:
        return build_listing(self.state.view, self.snapshot, self.state, self.clock(), self.upcoming_days)

    def visible_tasks(self) -> List[Task]:
        return self.listing().tasks

    def count_text(self) -> str:
        listing = self.listing()
        if listing.labels is not None:
            return f"{len(listing.labels)} labels"
        return f"{len(listing.tasks)} tasks"

    def view_title(self) -> str:
        if self.state.view == View.CALENDAR:
            selected = self.state.calendar_date
            return f"{selected.strftime('%B')} {selected.year}"
        return self.listing().title

    def row_context(self, focused: bool = True) -> RowContext:
        return RowContext(
            cursor_slot=self.state.cursor,
            focused=focused,
            selected_ids=frozenset(self.state.selected_ids),
            now=self.clock(),
        )

    def current_model(self) -> LineModel:
        """Line model of the list on screen; in the calendar this is the selected day's list."""
        listing = self.listing()
        focused = self.state.view != View.CALENDAR
        if listing.labels is not None:
            return build_label_list(listing.labels, self.row_context(focused))
        return build_line_model(
            listing.policy,
            listing.tasks,
            sections=listing.sections,
            ctx=self.row_context(focused),
            today=self.clock().date(),
        )

    def clamp_cursor(self) -> None:
        """Pull the cursor back inside the list after input or a data change."""
        clamp_cursor(self.state, self.current_model().slot_count)

    def current_task(self) -> Optional[Task]:
        if self.state.view in (View.CALENDAR, View.LABELS):
            return None
        listing = self.listing()
        ref = self.current_model().ref_at_slot(self.state.cursor)
        if ref is None or ref < 0:
            return None
        return listing.tasks[ref]

    def current_label(self) -> Optional[str]:
        listing = self.listing()
        if listing.labels is None:
            return None
        ref = self.current_model().ref_at_slot(self.state.cursor)
        if ref is None or ref < 0:
            return None
        return listing.labels[ref][0]

    def current_section(self) -> Optional[Section]:
        if self.state.view in (View.CALENDAR, View.LABELS):
            return None
        group = self.current_model().group_at_slot(self.state.cursor)
        if not group:
            return None
        for section in self.listing().sections:
            if section.id == group:
                return section
        return None

    # -------- rendering --------
    def list_height(self) -> int:
        info = self.list_window.render_info
        if info is not None and info.window_height > 0:
            return info.window_height
        rows = self.get_terminal_height() - CHROME_ROWS
        if self.state.view == View.CALENDAR:
            rows -= self._calendar_height() + 1
        return max(1, rows)

    def _list_cursor_position(self) -> Point:
        return Point(x=0, y=self.state.viewport.cursor_line)

    def empty_text(self) -> str:
        if self.state.view == View.LABELS:
            return "No labels found"
        if self.state.view == View.LABEL_TASKS:
            return "No tasks with this label"
        return "No tasks"

    def get_list_text(self) -> FormattedText:
        model = self.current_model()
        if not model.lines:
            self.state.viewport.reset()
            return FormattedText([("class:text.dim", "  " + self.empty_text())])
        return self.state.viewport.render(
            model.lines,
            model.ordered_index,
            self.state.cursor,
            self.list_height(),
            self.get_terminal_width(),
        )

    def _month_cells(self):
        selected = self.state.calendar_date
        return build_month_cells(
            selected.year,
            selected.month,
            self.snapshot.tasks,
            today=self.clock().date(),
            selected_day=selected.day,
            weekend_days=self.weekend_days,
        )

    def _calendar_height(self) -> int:
        selected = self.state.calendar_date
        first_weekday, days = month_geometry(selected.year, selected.month)
        layout = compute_layout(first_weekday, days, self.get_terminal_width(), self.get_terminal_height())
        if self.state.calendar_mode == CALENDAR_EXPANDED:
            return 2 + layout.weeks_needed * (2 + layout.max_preview_rows) - 1 + 1
        return layout.weeks_needed + 1

    def get_calendar_text(self) -> FormattedText:
        selected = self.state.calendar_date
        cells = self._month_cells()
        if self.state.calendar_mode == CALENDAR_EXPANDED:
            first_weekday, days = month_geometry(selected.year, selected.month)
            layout = compute_layout(first_weekday, days, self.get_terminal_width(), self.get_terminal_height())
            return render_expanded(cells, layout)
        return render_compact(cells)

    def _resolve_body_container(self):
        if self.state.show_help:
            return self.help_window
        if self.state.view == View.CALENDAR:
            if self.state.calendar_mode == CALENDAR_EXPANDED:
                return self.calendar_window
            return self.compact_body
        return self.list_window

    def get_tab_bar_text(self) -> FormattedText:
        return build_tab_bar(self)

    def get_title_text(self) -> FormattedText:
        title = self.view_title()
        if self.state.view == View.PROJECTS:
            count = len(browsable_projects(self.snapshot.projects))
            if count > 1:
                index = self.state.project_index % count + 1
                return FormattedText([("class:title", title), ("class:text.dim", f"  ({index}/{count}, h/l)")])
        return FormattedText([("class:title", title)])

    def get_hints_text(self) -> FormattedText:
        return build_hints_text(self)

    def get_status_text(self) -> FormattedText:
        return build_status_text(self)

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app:
            app.invalidate()

    # -------- input --------
    def _handle_body_mouse(self, mouse_event):
        result = handle_body_mouse(self, mouse_event)
        self.clamp_cursor()
        self.force_render()
        return result

    def move_vertical_selection(self, delta: int) -> None:
        move_vertical_selection(self.state, delta, self.current_model().slot_count)
        self.force_render()

    def switch_view(self, view: View) -> None:
        self.state.switch_view(view)
        self.force_render()

    def handle_key_press(self, name: str) -> None:
        state = self.state
        if state.show_help:
            if name in ("esc", "?", "q"):
                state.show_help = False
                self.force_render()
            return
        result = handle_key(name, state.chord, self.keymap)
        state.chord = result.chord
        if result.command is not None:
            self.dispatch(result.command)
            self.clamp_cursor()
        self.force_render()

    def dispatch(self, command: Command) -> None:
        state = self.state
        if command == Command.QUIT:
            self.exit()
            return
        if command == Command.HELP:
            state.show_help = True
            return
        if command == Command.TOGGLE_HINTS:
            state.show_hints = not state.show_hints
            return
        if command == Command.REFRESH:
            tui_actions.refresh(self)
            return
        if command == Command.UNDO:
            tui_actions.undo(self)
            return
        if command in UNAVAILABLE_COMMANDS:
            state.set_status(f"{command.value.replace('_', ' ').capitalize()} is not available")
            return
        if state.view == View.CALENDAR and self._dispatch_calendar(command):
            return
        if command in TAB_COMMANDS:
            state.switch_view(TAB_COMMANDS[command])
            return
        if command == Command.BACK:
            self.go_back()
            return
        if state.view == View.CALENDAR:
            return
        if state.view == View.LABELS and command not in LABEL_LIST_COMMANDS:
            return
        self._dispatch_list(command)

    def _dispatch_calendar(self, command: Command) -> bool:
        state = self.state
        if command in CALENDAR_MOVES:
            state.calendar_date = shift_day(state.calendar_date, CALENDAR_MOVES[command])
        elif command == Command.PREV_MONTH:
            state.calendar_date = shift_month(state.calendar_date, -1)
        elif command == Command.NEXT_MONTH:
            state.calendar_date = shift_month(state.calendar_date, 1)
        elif command == Command.TAB_TODAY:
            state.calendar_date = self.clock().date()
        elif command == Command.CALENDAR_VIEW:
            self.toggle_calendar_mode()
        elif command == Command.SELECT:
            self.open_calendar_day()
        else:
            return False
        state.cursor = 0
        state.viewport.reset()
        return True

    def _dispatch_list(self, command: Command) -> None:
        state = self.state
        total = self.current_model().slot_count
        if command == Command.UP:
            move_vertical_selection(state, -1, total)
        elif command == Command.DOWN:
            move_vertical_selection(state, 1, total)
        elif command == Command.TOP:
            move_to_top(state, total)
        elif command == Command.BOTTOM:
            move_to_bottom(state, total)
        elif command == Command.HALF_UP:
            half_page(state, -1, total)
        elif command == Command.HALF_DOWN:
            half_page(state, 1, total)
        elif command in (Command.LEFT, Command.RIGHT):
            if state.view == View.PROJECTS:
                self.cycle_project(-1 if command == Command.LEFT else 1)
        elif command == Command.SELECT:
            self.activate_current()
        elif command == Command.COMPLETE:
            tui_actions.toggle_complete(self)
        elif command == Command.DELETE:
            tui_actions.delete_current(self)
        elif command == Command.COPY:
            tui_actions.copy_current(self)
        elif command in PRIORITY_COMMANDS:
            tui_actions.set_priority(self, PRIORITY_COMMANDS[command])
        elif command == Command.DUE_TODAY:
            tui_actions.set_due_in(self, 0, self.clock().date())
        elif command == Command.DUE_TOMORROW:
            tui_actions.set_due_in(self, 1, self.clock().date())
        elif command == Command.MOVE_TASK_NEXT_DAY:
            tui_actions.shift_due(self, 1, self.clock().date())
        elif command == Command.MOVE_TASK_PREV_DAY:
            tui_actions.shift_due(self, -1, self.clock().date())
        elif command == Command.TOGGLE_SELECT:
            tui_actions.toggle_select(self)

    # -------- view transitions --------
    def go_back(self) -> None:
        """Leave a drill-down screen for the one it was opened from, else clear the selection."""
        state = self.state
        label = state.current_label if state.view == View.LABEL_TASKS else None
        if state.go_back():
            if label is not None:
                names = [name for name, _ in self.listing().labels or []]
                if label in names:
                    state.cursor = names.index(label)
            return
        if state.selected_ids:
            state.selected_ids.clear()
            state.set_status("Selection cleared")

    def cycle_project(self, delta: int) -> None:
        count = len(browsable_projects(self.snapshot.projects))
        if count <= 1:
            return
        self.state.project_index = (self.state.project_index + delta) % count
        self.state.cursor = 0
        self.state.viewport.reset()
        self.state.chord = ChordState()

    def open_calendar_day(self, slot: int = 0) -> None:
        self.state.switch_view(View.CALENDAR_DAY, remember=True)
        self.state.cursor = max(0, slot)

    def open_label(self) -> None:
        label = self.current_label()
        if label is None:
            return
        self.state.switch_view(View.LABEL_TASKS, remember=True)
        self.state.current_label = label

    def toggle_calendar_mode(self) -> None:
        state = self.state
        state.calendar_mode = CALENDAR_EXPANDED if state.calendar_mode == CALENDAR_COMPACT else CALENDAR_COMPACT
        try:
            config.set_calendar_view(state.calendar_mode)
        except OSError as exc:
            logger.warning("Cannot save calendar view: %s", exc)

    def activate_current(self) -> None:
        """Enter on a row: open the day list from the calendar, otherwise summarize the row."""
        if self.state.view == View.CALENDAR:
            self.open_calendar_day(self.state.cursor)
            return
        if self.state.view == View.LABELS:
            self.open_label()
            return
        section = self.current_section()
        if section is not None:
            count = sum(1 for task in self.visible_tasks() if task.section_id == section.id)
            self.state.set_status(f"{section.name}: {count} tasks")
            return
        task = self.current_task()
        if task is None:
            return
        parts = [task.content]
        if task.due is not None:
            parts.append("due " + task.due_display(self.clock()))
        parts.extend("@" + label for label in task.labels)
        if task.description:
            parts.append(task.description.split("\n", 1)[0])
        self.state.set_status(" · ".join(parts), ttl=8)

    def exit(self) -> None:
        app = getattr(self, "app", None)
        if app is not None and app.is_running:
            app.exit()

    def run(self):
        self.app.run()
