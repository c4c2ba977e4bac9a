"""Action handlers extracted from TodoTUI to reduce coupling.

Each handler works on the task under the cursor, or on every multi-selected task
when a selection exists, then persists the snapshot through `tui.persist()`.
"""

import copy
from datetime import date, timedelta
from typing import List, Optional, Set

from core import Task

UNDO_LIMIT = 20


def _targets(tui) -> List[Task]:
    selected = tui.state.selected_ids
    if selected:
        return [task for task in tui.snapshot.tasks if task.id in selected]
    task = tui.current_task()
    return [task] if task is not None else []


def _plural(count: int) -> str:
    return f"{count} task" if count == 1 else f"{count} tasks"


def remember_undo(tui, label: str) -> None:
    tui.undo_stack.append((label, copy.deepcopy(tui.snapshot.tasks)))
    del tui.undo_stack[:-UNDO_LIMIT]


def _commit(tui, message: str) -> None:
    if tui.persist():
        tui.state.set_status(message)


def toggle_complete(tui) -> None:
    tasks = _targets(tui)
    if not tasks:
        return
    remember_undo(tui, "complete")
    for task in tasks:
        task.checked = not task.checked
    if len(tasks) == 1:
        verb = "Completed" if tasks[0].checked else "Reopened"
        _commit(tui, f"{verb}: {tasks[0].content}")
    else:
        _commit(tui, f"Toggled {_plural(len(tasks))}")


def _with_descendants(tasks: List[Task], roots: Set[str]) -> Set[str]:
    doomed = set(roots)
    changed = True
    while changed:
        changed = False
        for task in tasks:
            if task.parent_id in doomed and task.id not in doomed:
                doomed.add(task.id)
                changed = True
    return doomed


def delete_current(tui) -> None:
    """Delete the target tasks together with their subtasks."""
    tasks = _targets(tui)
    if not tasks:
        return
    remember_undo(tui, "delete")
    doomed = _with_descendants(tui.snapshot.tasks, {task.id for task in tasks})
    tui.snapshot.tasks[:] = [task for task in tui.snapshot.tasks if task.id not in doomed]
    tui.state.selected_ids.difference_update(doomed)
    if len(tasks) == 1:
        _commit(tui, f"Deleted: {tasks[0].content}")
    else:
        _commit(tui, f"Deleted {_plural(len(doomed))}")


def copy_text(tui) -> Optional[str]:
    """Clipboard payload for the cursor position: a section outline, the selection or one task."""
    section = tui.current_section()
    if section is not None:
        lines = [section.name]
        lines.extend(f"- {task.content}" for task in tui.visible_tasks() if task.section_id == section.id)
        return "\n".join(lines)
    tasks = _targets(tui)
    if not tasks:
        return None
    return "\n".join(task.content for task in tasks)


def copy_current(tui) -> None:
    text = copy_text(tui)
    if text is None:
        return
    if tui._copy_to_clipboard(text):
        first = text.split("\n", 1)[0]
        tui.state.set_status(f"Copied: {first}")
    else:
        tui.state.set_status("Copy failed")


def set_priority(tui, priority: int) -> None:
    tasks = _targets(tui)
    if not tasks:
        return
    remember_undo(tui, "priority")
    for task in tasks:
        task.priority = max(1, min(4, priority))
    _commit(tui, f"Priority p{5 - priority} for {_plural(len(tasks))}")


def set_due_in(tui, days: int, today: Optional[date] = None) -> None:
    """Schedule the targets `days` after today (0 = today)."""
    tasks = _targets(tui)
    if not tasks:
        return
    target = (today or date.today()) + timedelta(days=days)
    remember_undo(tui, "due")
    for task in tasks:
        task.set_due(target)
    label = "today" if days == 0 else "tomorrow" if days == 1 else target.isoformat()
    _commit(tui, f"Due {label}: {_plural(len(tasks))}")


def shift_due(tui, days: int, today: Optional[date] = None) -> None:
    tasks = _targets(tui)
    if not tasks:
        return
    remember_undo(tui, "reschedule")
    for task in tasks:
        task.shift_due(days, today)
    direction = "later" if days > 0 else "earlier"
    _commit(tui, f"Moved {_plural(len(tasks))} {abs(days)} day {direction}")


def toggle_select(tui) -> None:
    task = tui.current_task()
    if task is None:
        return
    if task.id in tui.state.selected_ids:
        tui.state.selected_ids.discard(task.id)
    else:
        tui.state.selected_ids.add(task.id)
    count = len(tui.state.selected_ids)
    tui.state.set_status(f"{_plural(count)} selected" if count else "Selection cleared")


def undo(tui) -> None:
    if not tui.undo_stack:
        tui.state.set_status("Nothing to undo")
        return
    label, tasks = tui.undo_stack.pop()
    tui.snapshot.tasks[:] = tasks
    _commit(tui, f"Undone: {label}")


def refresh(tui) -> None:
    if tui.reload():
        tui.state.set_status("Reloaded")


__all__ = [
    "UNDO_LIMIT",
    "remember_undo",
    "toggle_complete",
    "delete_current",
    "copy_text",
    "copy_current",
    "set_priority",
    "set_due_in",
    "shift_due",
    "toggle_select",
    "undo",
    "refresh",
]
