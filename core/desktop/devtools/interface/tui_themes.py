#!/usr/bin/env python3
"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": {
        "": "#d7dfe6",
        "text": "#d7dfe6",
        "text.dim": "#97a0a9",
        "title": "#ffb347 bold underline",
        "header": "#ffb347 bold",
        "header.date": "#7fb4ca bold",
        "border": "#4b525a",
        "selected": "bg:#3b3b3b #d7dfe6 bold",
        "task": "#d7dfe6",
        "task.done": "#6d717a strike",
        "task.description": "#8d95a0 italic",
        "priority.1": "#ff6b6b bold",
        "priority.2": "#f9ac60",
        "priority.3": "#7fb4ca",
        "priority.4": "#d7dfe6",
        "due": "#97a0a9",
        "due.today": "#9ad974",
        "due.overdue": "#e06c75 bold",
        "label": "#c678dd",
        "recurring": "#7fb4ca",
        "mark": "#e5c07b bold",
        "calendar.weekday": "#97a0a9 bold",
        "calendar.day": "#d7dfe6",
        "calendar.day.selected": "bg:#ffb347 #1c1c1c bold",
        "calendar.day.today": "#9ad974 bold underline",
        "calendar.day.tasks": "#7fb4ca bold",
        "calendar.day.weekend": "#6d717a",
        "calendar.more": "#97a0a9 italic",
        "tab": "#97a0a9",
        "tab.active": "bg:#3b3b3b #ffb347 bold",
        "status": "#97a0a9",
        "status.ok": "#9ad974 bold",
        "status.fail": "#e06c75 bold",
        "status.key": "#ffb347 bold",
    },
    "dark-contrast": {
        "": "#e8eaec",
        "text": "#e8eaec",
        "text.dim": "#a7b0ba",
        "title": "#ffb347 bold underline",
        "header": "#ffb347 bold",
        "header.date": "#8cc8ff bold",
        "border": "#5a6169",
        "selected": "bg:#3d4047 #e8eaec bold",
        "task": "#e8eaec",
        "task.done": "#6f757d strike",
        "task.description": "#939aa4 italic",
        "priority.1": "#ff6b6b bold",
        "priority.2": "#f0c674 bold",
        "priority.3": "#8cc8ff",
        "priority.4": "#e8eaec",
        "due": "#a7b0ba",
        "due.today": "#b8f171",
        "due.overdue": "#ff5156 bold",
        "label": "#d19afc",
        "recurring": "#8cc8ff",
        "mark": "#f0c674 bold",
        "calendar.weekday": "#a7b0ba bold",
        "calendar.day": "#e8eaec",
        "calendar.day.selected": "bg:#f0c674 #101010 bold",
        "calendar.day.today": "#b8f171 bold underline",
        "calendar.day.tasks": "#8cc8ff bold",
        "calendar.day.weekend": "#6f757d",
        "calendar.more": "#a7b0ba italic",
        "tab": "#a7b0ba",
        "tab.active": "bg:#3d4047 #ffb347 bold",
        "status": "#a7b0ba",
        "status.ok": "#b8f171 bold",
        "status.fail": "#ff6b6b bold",
        "status.key": "#ffb347 bold",
    },
}

DEFAULT_THEME = "dark-olive"

# Priority 4 is the most urgent, rendered with the strongest style.
PRIORITY_STYLES: Dict[int, str] = {
    4: "class:priority.1",
    3: "class:priority.2",
    2: "class:priority.3",
    1: "class:priority.4",
}


def priority_style(priority: int) -> str:
    return PRIORITY_STYLES.get(priority, PRIORITY_STYLES[1])


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if not base:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    """Build Style object from theme name."""
    palette = get_theme_palette(theme)
    return Style.from_dict(palette)
