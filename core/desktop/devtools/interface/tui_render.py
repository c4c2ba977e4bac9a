"""Row renderers for task lists.

Every function here is pure: it reads a task (or header text), the row context and a
column width, and returns prompt_toolkit fragments for exactly one terminal line.
"""
import re
from typing import List, Optional, Tuple

from core import Task
from core.desktop.devtools.interface.tui_display import Fragments, display_width, trim_fragments, truncate_display
from core.desktop.devtools.interface.tui_models import RowContext
from core.desktop.devtools.interface.tui_themes import priority_style

CURSOR_MARK = "> "
NO_CURSOR = "  "
SELECTION_MARK = "●"
CHECKBOX_CHECKED = "[x]"
CHECKBOX_UNCHECKED = "[ ]"
RECURRING_MARK = "↻"
SUBTASK_INDENT = "  "
DESCRIPTION_INDENT = 10
DESCRIPTION_MARGIN = 4
SECTION_NAME_MAX = 50

_MARKDOWN_LINK = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")


def _merge_style(base_style: Optional[str], fragment_style: str) -> str:
    if not base_style:
        return fragment_style
    return f"{base_style} {fragment_style}".strip()


def strip_markdown_links(text: str) -> str:
    """Reduce the first `[text](url)` link to its text."""
    return _MARKDOWN_LINK.sub(lambda m: m.group(1), text, count=1)


def render_task_row(task: Task, slot: int, ctx: RowContext, width: int) -> Fragments:
    """Single task line: cursor, selection mark, checkbox, content, due and labels."""
    is_cursor = ctx.is_cursor(slot)
    cursor = CURSOR_MARK if is_cursor else NO_CURSOR
    mark = SELECTION_MARK if task.id in ctx.selected_ids else " "
    indent = SUBTASK_INDENT if task.is_subtask else ""
    checkbox = CHECKBOX_CHECKED if task.checked else CHECKBOX_UNCHECKED

    due_text = ""
    due_width = 0
    if task.due is not None:
        due_text = "| " + task.due_display(ctx.now)
        due_width = display_width(due_text) + 1

    label_text = " ".join("@" + label for label in task.labels)
    label_width = display_width(label_text) + 1 if label_text else 0

    # cursor + mark + indent + checkbox + separators, plus room for the recurring marker
    overhead = 7 + len(indent) + due_width + label_width + 6
    max_content = max(5, width - overhead)
    content = truncate_display(task.content, max_content)

    base: Optional[str] = None
    if is_cursor:
        base = "class:selected"
    if task.checked:
        base = "class:task.done"

    fragments: List[Tuple[str, str]] = [
        (_merge_style(base, "class:task"), cursor),
        (_merge_style(base, "class:mark"), mark),
        (_merge_style(base, "class:task"), indent + checkbox + " "),
        (_merge_style(base, priority_style(task.priority)), content),
    ]
    if task.due is not None and task.due.is_recurring:
        fragments.append((_merge_style(base, "class:recurring"), RECURRING_MARK))
    if due_text:
        if task.is_overdue(ctx.now):
            due_style = "class:due.overdue"
        elif task.is_due_today(ctx.now.date() if ctx.now else None):
            due_style = "class:due.today"
        else:
            due_style = "class:due"
        fragments.append((_merge_style(base, "class:task"), " "))
        fragments.append((_merge_style(base, due_style), due_text))
    if label_text:
        fragments.append((_merge_style(base, "class:task"), " "))
        fragments.append((_merge_style(base, "class:label"), label_text))
    return trim_fragments(fragments, max(1, width - 2))


def render_description_row(description: str, width: int) -> Fragments:
    """First description line under a task, or nothing when the pane is too narrow."""
    available = width - DESCRIPTION_INDENT - DESCRIPTION_MARGIN
    if not description or available < 5:
        return []
    first_line = strip_markdown_links(description.split("\n")[0])
    text = truncate_display(first_line, available)
    return [("class:task.description", " " * DESCRIPTION_INDENT + text)]


def render_section_header(name: str, slot: int, ctx: RowContext) -> Fragments:
    """Section header; highlighted like a task row when the cursor sits on it."""
    is_cursor = ctx.is_cursor(slot)
    if len(name) > SECTION_NAME_MAX:
        name = name[: SECTION_NAME_MAX - 1] + "…"
    cursor = CURSOR_MARK if is_cursor else NO_CURSOR
    style = "class:selected" if is_cursor else "class:header"
    return [(style, cursor + name)]


def render_label_row(name: str, count: int, slot: int, ctx: RowContext, width: int) -> Fragments:
    """Label list entry: `@name` followed by the number of tasks carrying it."""
    is_cursor = ctx.is_cursor(slot)
    cursor = CURSOR_MARK if is_cursor else NO_CURSOR
    base = "class:selected" if is_cursor else None
    fragments: List[Tuple[str, str]] = [
        (_merge_style(base, "class:task"), cursor),
        (_merge_style(base, "class:label"), "@" + name),
    ]
    if count > 0:
        fragments.append((_merge_style(base, "class:text.dim"), f" ({count})"))
    return trim_fragments(fragments, max(1, width - 2))


def render_group_header(text: str, style: str = "class:header") -> Fragments:
    return [(style, text)]


__all__ = [
    "strip_markdown_links",
    "render_task_row",
    "render_description_row",
    "render_section_header",
    "render_label_row",
    "render_group_header",
]
