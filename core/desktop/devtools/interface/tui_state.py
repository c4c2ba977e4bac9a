"""Mutable per-session view state shared by navigation, mouse and action helpers."""

import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Set, Tuple

from core.desktop.devtools.interface.tui_keys import ChordState
from core.desktop.devtools.interface.tui_window import DEFAULT_BUFFER, Viewport


class View(str, Enum):
    INBOX = "inbox"
    TODAY = "today"
    UPCOMING = "upcoming"
    LABELS = "labels"
    LABEL_TASKS = "label_tasks"
    PROJECTS = "projects"
    CALENDAR = "calendar"
    CALENDAR_DAY = "calendar_day"


TAB_ORDER: Tuple[View, ...] = (View.INBOX, View.TODAY, View.UPCOMING, View.LABELS, View.CALENDAR, View.PROJECTS)

VIEW_TITLES = {
    View.INBOX: "Inbox",
    View.TODAY: "Today",
    View.UPCOMING: "Upcoming",
    View.LABELS: "Labels",
    View.LABEL_TASKS: "Label",
    View.PROJECTS: "Projects",
    View.CALENDAR: "Calendar",
    View.CALENDAR_DAY: "Day",
}

CALENDAR_COMPACT = "compact"
CALENDAR_EXPANDED = "expanded"


@dataclass
class ViewState:
    view: View = View.TODAY
    previous_view: Optional[View] = None
    cursor: int = 0
    viewport: Viewport = field(default_factory=Viewport)
    chord: ChordState = field(default_factory=ChordState)
    calendar_date: date = field(default_factory=date.today)
    calendar_mode: str = CALENDAR_COMPACT
    current_label: Optional[str] = None
    selected_ids: Set[str] = field(default_factory=set)
    project_index: int = 0
    show_help: bool = False
    show_hints: bool = True
    status_message: str = ""
    status_expires: float = 0.0

    @classmethod
    def create(cls, *, buffer: int = DEFAULT_BUFFER, calendar_mode: str = CALENDAR_COMPACT, **kwargs) -> "ViewState":
        return cls(viewport=Viewport(buffer=buffer), calendar_mode=calendar_mode, **kwargs)

    def switch_view(self, view: View, *, remember: bool = False) -> None:
        """Enter another screen; cursor, scroll offset and pending chord start fresh."""
        self.previous_view = self.view if remember else None
        self.view = view
        self.cursor = 0
        self.viewport.reset()
        self.chord = ChordState()
        self.show_help = False

    def go_back(self) -> bool:
        if self.previous_view is None:
            return False
        self.switch_view(self.previous_view)
        return True

    def set_status(self, message: str, ttl: float = 4.0, now: Optional[float] = None) -> None:
        self.status_message = message
        self.status_expires = (now if now is not None else time.time()) + ttl

    def current_status(self, now: Optional[float] = None) -> str:
        if not self.status_message:
            return ""
        if (now if now is not None else time.time()) >= self.status_expires:
            self.status_message = ""
        return self.status_message


__all__ = [
    "View",
    "TAB_ORDER",
    "VIEW_TITLES",
    "CALENDAR_COMPACT",
    "CALENDAR_EXPANDED",
    "ViewState",
]
