"""Line model builder: grouping policies turned into display lines and an ordered cursor index.

The ordered index is filled in lock-step with the lines, so the n-th cursor slot always
maps to the n-th selectable row as it appears on screen. Description previews share the
ref of their task but never get a slot of their own.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from functools import partial
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core import Section, Task
from core.desktop.devtools.interface.tui_models import SPACER_REF, DisplayLine, LineModel, RowContext, header_ref
from core.desktop.devtools.interface.tui_render import (
    render_description_row,
    render_group_header,
    render_label_row,
    render_section_header,
    render_task_row,
)

OVERDUE_HEADER = "OVERDUE"
NO_DUE_DATE_HEADER = "NO DUE DATE"


class GroupingPolicy(Enum):
    FLAT = "flat"
    BY_STATUS = "status"
    BY_SECTION = "section"
    BY_DATE = "date"


class _LineBuilder:
    def __init__(self, tasks: Sequence[Task], ctx: RowContext):
        self.tasks = tasks
        self.ctx = ctx
        self.lines: List[DisplayLine] = []
        self.ordered_index: List[int] = []

    def add_task(self, index: int) -> None:
        slot = len(self.ordered_index)
        self.ordered_index.append(index)
        task = self.tasks[index]
        self.lines.append(DisplayLine(item_ref=index, renderer=partial(render_task_row, task, slot, self.ctx)))
        if task.description:
            self.lines.append(DisplayLine(item_ref=index, renderer=partial(render_description_row, task.description)))

    def add_tasks(self, indices: Iterable[int]) -> None:
        for index in indices:
            self.add_task(index)

    def add_spacer(self) -> None:
        self.lines.append(DisplayLine(item_ref=SPACER_REF, rendered_text=[]))

    def add_header(self, text: str, style: str = "class:header") -> None:
        self.lines.append(DisplayLine(item_ref=SPACER_REF, rendered_text=render_group_header(text, style)))

    def add_section_header(self, section: Section) -> None:
        slot = len(self.ordered_index)
        ref = header_ref(slot)
        self.ordered_index.append(ref)
        self.lines.append(
            DisplayLine(
                item_ref=ref,
                rendered_text=render_section_header(section.name, slot, self.ctx),
                group_id=section.id,
            )
        )

    def model(self) -> LineModel:
        return LineModel(lines=self.lines, ordered_index=self.ordered_index)


def build_flat(tasks: Sequence[Task], ctx: RowContext) -> LineModel:
    builder = _LineBuilder(tasks, ctx)
    builder.add_tasks(range(len(tasks)))
    return builder.model()


def build_status_grouped(tasks: Sequence[Task], ctx: RowContext, now: Optional[datetime] = None) -> LineModel:
    """Overdue, due today, everything else; headers only for non-empty overdue/other groups."""
    now = now or ctx.now or datetime.now()
    overdue: List[int] = []
    today: List[int] = []
    other: List[int] = []
    for idx, task in enumerate(tasks):
        if task.is_overdue(now):
            overdue.append(idx)
        elif task.is_due_today(now.date()):
            today.append(idx)
        else:
            other.append(idx)

    builder = _LineBuilder(tasks, ctx)
    if overdue:
        builder.add_header(OVERDUE_HEADER)
        builder.add_tasks(overdue)
    if today:
        if overdue:
            builder.add_spacer()
        builder.add_tasks(today)
    if other:
        if overdue or today:
            builder.add_spacer()
        builder.add_header(NO_DUE_DATE_HEADER)
        builder.add_tasks(other)
    return builder.model()


def build_section_grouped(tasks: Sequence[Task], sections: Sequence[Section], ctx: RowContext) -> LineModel:
    """Unsectioned tasks first, then every section in stored order, empty ones included.

    Section headers always take a cursor slot so an empty section can still be acted on.
    Tasks pointing at an unknown section are listed with the unsectioned ones.
    """
    known = {section.id for section in sections}
    by_section: Dict[str, List[int]] = {}
    unsectioned: List[int] = []
    for idx, task in enumerate(tasks):
        if task.section_id and task.section_id in known:
            by_section.setdefault(task.section_id, []).append(idx)
        else:
            unsectioned.append(idx)

    builder = _LineBuilder(tasks, ctx)
    if unsectioned:
        builder.add_tasks(unsectioned)
        if sections:
            builder.add_spacer()
    for section in sections:
        builder.add_section_header(section)
        builder.add_tasks(by_section.get(section.id, []))
        builder.add_spacer()
    return builder.model()


def date_group_label(date_key: str, today: date) -> str:
    """`Today`, `Tomorrow`, or a short weekday + month-day label such as `Mon, Jan 2`."""
    try:
        parsed = date.fromisoformat(date_key)
    except ValueError:
        return date_key
    if parsed == today:
        return "Today"
    if parsed == today + timedelta(days=1):
        return "Tomorrow"
    return f"{parsed.strftime('%a')}, {parsed.strftime('%b')} {parsed.day}"


def build_date_grouped(tasks: Sequence[Task], ctx: RowContext, today: Optional[date] = None) -> LineModel:
    """One header per distinct due date, ascending; undated tasks are left out."""
    today = today or (ctx.now.date() if ctx.now else date.today())
    by_date: Dict[str, List[int]] = {}
    for idx, task in enumerate(tasks):
        if task.due is None:
            continue
        by_date.setdefault(task.due.date_key, []).append(idx)

    builder = _LineBuilder(tasks, ctx)
    for position, date_key in enumerate(sorted(by_date)):
        if position > 0:
            builder.add_spacer()
        builder.add_header(date_group_label(date_key, today), "class:header.date")
        builder.add_tasks(by_date[date_key])
    return builder.model()


def build_label_list(labels: Sequence[Tuple[str, int]], ctx: Optional[RowContext] = None) -> LineModel:
    """One selectable row per `(name, count)`; the ref is the position in `labels`."""
    ctx = ctx or RowContext()
    model = LineModel()
    for slot, (name, count) in enumerate(labels):
        model.ordered_index.append(slot)
        model.lines.append(DisplayLine(item_ref=slot, renderer=partial(render_label_row, name, count, slot, ctx)))
    return model


def build_line_model(
    policy: GroupingPolicy,
    tasks: Sequence[Task],
    *,
    sections: Sequence[Section] = (),
    ctx: Optional[RowContext] = None,
    today: Optional[date] = None,
) -> LineModel:
    """Build display lines and the ordered index for `tasks` under `policy`."""
    ctx = ctx or RowContext()
    if policy is GroupingPolicy.BY_STATUS:
        now = ctx.now
        if now is None and today is not None:
            now = datetime.combine(today, datetime.now().time())
        return build_status_grouped(tasks, ctx, now)
    if policy is GroupingPolicy.BY_SECTION:
        return build_section_grouped(tasks, sections, ctx)
    if policy is GroupingPolicy.BY_DATE:
        return build_date_grouped(tasks, ctx, today)
    return build_flat(tasks, ctx)


__all__ = [
    "GroupingPolicy",
    "OVERDUE_HEADER",
    "NO_DUE_DATE_HEADER",
    "build_flat",
    "build_status_grouped",
    "build_section_grouped",
    "build_date_grouped",
    "build_label_list",
    "date_group_label",
    "build_line_model",
]
