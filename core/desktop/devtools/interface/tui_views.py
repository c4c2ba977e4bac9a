"""Task selection and ordering for each screen."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from application.ports import TaskSnapshot
from core import Project, Section, Task
from core.desktop.devtools.interface.tui_calendar import tasks_on
from core.desktop.devtools.interface.tui_lines import GroupingPolicy
from core.desktop.devtools.interface.tui_state import View, ViewState


@dataclass
class ViewListing:
    policy: GroupingPolicy
    tasks: List[Task] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    title: str = ""
    # set only for the label list, whose rows are labels rather than tasks
    labels: Optional[List[Tuple[str, int]]] = None


def _urgency_key(task: Task):
    moment = task.due_datetime()
    due_day = task.due_date()
    return (
        0 if moment is not None else 1,
        moment or datetime.min,
        -task.priority,
        0 if due_day is not None else 1,
        due_day or date.min,
    )


def sort_by_urgency(tasks: Sequence[Task]) -> List[Task]:
    """Timed tasks first in time order, then priority, then due date; stable otherwise."""
    return sorted(tasks, key=_urgency_key)


def order_hierarchically(tasks: Sequence[Task]) -> List[Task]:
    """Source order with every subtask placed right after its parent."""
    present = {task.id for task in tasks}
    children: Dict[str, List[Task]] = {}
    roots: List[Task] = []
    for task in tasks:
        if task.parent_id and task.parent_id in present:
            children.setdefault(task.parent_id, []).append(task)
        else:
            roots.append(task)

    ordered: List[Task] = []
    seen = set()

    def visit(task: Task) -> None:
        if task.id in seen:
            return
        seen.add(task.id)
        ordered.append(task)
        for child in children.get(task.id, []):
            visit(child)

    for root in roots:
        visit(root)
    # parent cycles leave tasks unreachable from any root
    for task in tasks:
        visit(task)
    return ordered


def inbox_project(projects: Sequence[Project]) -> Optional[Project]:
    for project in projects:
        if project.is_inbox:
            return project
    return None


def browsable_projects(projects: Sequence[Project]) -> List[Project]:
    return [project for project in projects if not project.is_inbox]


def project_tasks(tasks: Sequence[Task], project_id: str) -> List[Task]:
    return order_hierarchically([task for task in tasks if task.project_id == project_id])


def today_tasks(tasks: Sequence[Task], now: datetime) -> List[Task]:
    return sort_by_urgency([task for task in tasks if task.is_overdue(now) or task.is_due_today(now.date())])


def upcoming_tasks(tasks: Sequence[Task], today: date, days: int) -> List[Task]:
    """Tasks due from today through the next `days - 1` days."""
    last = today + timedelta(days=max(1, days) - 1)
    result = []
    for task in tasks:
        due_day = task.due_date()
        if due_day is not None and today <= due_day <= last:
            result.append(task)
    return sort_by_urgency(result)


def label_counts(tasks: Sequence[Task]) -> List[Tuple[str, int]]:
    """Every label in use with the number of tasks carrying it, sorted by name."""
    counts: Dict[str, int] = {}
    for task in tasks:
        for label in set(task.labels):
            if not label:
                continue
            counts[label] = counts.get(label, 0) + 1
    return sorted(counts.items())


def label_tasks(tasks: Sequence[Task], label: Optional[str]) -> List[Task]:
    if not label:
        return []
    return sort_by_urgency([task for task in tasks if label in task.labels])


def build_listing(view: View, snapshot: TaskSnapshot, state: ViewState, now: datetime, upcoming_days: int) -> ViewListing:
    tasks = snapshot.tasks
    if view == View.INBOX:
        inbox = inbox_project(snapshot.projects)
        if inbox is None:
            return ViewListing(GroupingPolicy.BY_SECTION, project_tasks(tasks, ""), [], "Inbox")
        return ViewListing(GroupingPolicy.BY_SECTION, project_tasks(tasks, inbox.id), list(inbox.sections), inbox.name)
    if view == View.TODAY:
        return ViewListing(GroupingPolicy.BY_STATUS, today_tasks(tasks, now), [], "Today")
    if view == View.UPCOMING:
        return ViewListing(GroupingPolicy.BY_DATE, upcoming_tasks(tasks, now.date(), upcoming_days), [], "Upcoming")
    if view == View.LABELS:
        return ViewListing(GroupingPolicy.FLAT, [], [], "Labels", labels=label_counts(tasks))
    if view == View.LABEL_TASKS:
        label = state.current_label or ""
        return ViewListing(GroupingPolicy.FLAT, label_tasks(tasks, label), [], "@" + label)
    if view == View.PROJECTS:
        projects = browsable_projects(snapshot.projects)
        if not projects:
            return ViewListing(GroupingPolicy.BY_SECTION, [], [], "No projects")
        project = projects[state.project_index % len(projects)]
        return ViewListing(GroupingPolicy.BY_SECTION, project_tasks(tasks, project.id), list(project.sections), project.name)
    selected = state.calendar_date
    label = f"{selected.strftime('%A')}, {selected.strftime('%B')} {selected.day}"
    return ViewListing(GroupingPolicy.FLAT, sort_by_urgency(tasks_on(tasks, selected)), [], label)


__all__ = [
    "ViewListing",
    "sort_by_urgency",
    "order_hierarchically",
    "inbox_project",
    "browsable_projects",
    "project_tasks",
    "today_tasks",
    "upcoming_tasks",
    "label_counts",
    "label_tasks",
    "build_listing",
]
