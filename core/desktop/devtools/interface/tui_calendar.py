"""Month calendar grid: geometry, per-cell capacity and day-cell rendering.

Columns run Sunday..Saturday. The expanded grid spends one row per week on day
numbers, `max_preview_rows` rows on task previews and one separator row between
weeks, so for `w` weeks the grid body is `w * (2 + rows) - 1` rows tall.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core import Task
from core.desktop.devtools.interface.tui_display import Fragments, pad_display, truncate_display
from core.desktop.devtools.interface.tui_themes import priority_style

WEEKDAY_NAMES: Tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MIN_CELL_WIDTH = 5
MAX_CELL_WIDTH = 20
BORDER_BUDGET = 8
# title, help line, blank, weekday header, top border, bottom border, margin, safety
HEIGHT_OVERHEAD = 8
MIN_PREVIEW_ROWS = 2
MAX_PREVIEW_ROWS = 6
DEFAULT_WEEKEND_DAYS: Tuple[int, ...] = (0, 6)
COMPACT_CELL_WIDTH = 5


@dataclass(frozen=True)
class CalendarGridLayout:
    weeks_needed: int
    first_weekday: int
    days_in_month: int
    cell_width: int
    max_preview_rows: int


@dataclass
class CalendarCell:
    day: Optional[int] = None
    tasks: List[Task] = field(default_factory=list)
    is_today: bool = False
    is_selected: bool = False
    is_weekend: bool = False

    @property
    def has_tasks(self) -> bool:
        return bool(self.tasks)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def month_geometry(year: int, month: int) -> Tuple[int, int]:
    """(Sunday-based weekday of the 1st, days in month)."""
    monday_based, days = calendar.monthrange(year, month)
    return (monday_based + 1) % 7, days


def weeks_needed(first_weekday: int, days_in_month: int) -> int:
    return max(1, -(-(days_in_month + first_weekday) // 7))


def cell_width_for(width: int) -> int:
    return _clamp((width - BORDER_BUDGET) // 7, MIN_CELL_WIDTH, MAX_CELL_WIDTH)


def preview_rows_for(height: int, weeks: int) -> int:
    """Solve `weeks * (2 + rows) - 1 = height - HEIGHT_OVERHEAD` for rows, clamped to [2, 6]."""
    available = height - HEIGHT_OVERHEAD
    rows = (available + 1) // max(1, weeks) - 2
    return _clamp(rows, MIN_PREVIEW_ROWS, MAX_PREVIEW_ROWS)


def compute_layout(first_weekday: int, days_in_month: int, width: int, height: int) -> CalendarGridLayout:
    first_weekday = _clamp(first_weekday, 0, 6)
    weeks = weeks_needed(first_weekday, days_in_month)
    return CalendarGridLayout(
        weeks_needed=weeks,
        first_weekday=first_weekday,
        days_in_month=days_in_month,
        cell_width=cell_width_for(width),
        max_preview_rows=preview_rows_for(height, weeks),
    )


def tasks_by_day(tasks: Iterable[Task], year: int, month: int) -> Dict[int, List[Task]]:
    """Tasks due in the given month keyed by day number, in source order."""
    result: Dict[int, List[Task]] = {}
    for task in tasks:
        due_day = task.due_date()
        if due_day is None or due_day.year != year or due_day.month != month:
            continue
        result.setdefault(due_day.day, []).append(task)
    return result


def tasks_on(tasks: Iterable[Task], day: date) -> List[Task]:
    return [task for task in tasks if task.due_date() == day]


def build_month_cells(
    year: int,
    month: int,
    tasks: Iterable[Task],
    *,
    today: Optional[date] = None,
    selected_day: Optional[int] = None,
    focused: bool = True,
    weekend_days: Sequence[int] = DEFAULT_WEEKEND_DAYS,
) -> List[List[CalendarCell]]:
    """Weeks of seven cells; cells outside the month have `day=None`."""
    today = today or date.today()
    first_weekday, days = month_geometry(year, month)
    by_day = tasks_by_day(tasks, year, month)
    weekend = set(weekend_days)
    weeks: List[List[CalendarCell]] = []
    for week in range(weeks_needed(first_weekday, days)):
        row: List[CalendarCell] = []
        for weekday in range(7):
            day = week * 7 + weekday - first_weekday + 1
            if day < 1 or day > days:
                row.append(CalendarCell(is_weekend=weekday in weekend))
                continue
            row.append(
                CalendarCell(
                    day=day,
                    tasks=list(by_day.get(day, [])),
                    is_today=(today.year, today.month, today.day) == (year, month, day),
                    is_selected=focused and day == selected_day,
                    is_weekend=weekday in weekend,
                )
            )
        weeks.append(row)
    return weeks


def day_style(cell: CalendarCell) -> str:
    """Selected beats today, which beats has-tasks, which beats weekend."""
    if cell.is_selected:
        return "class:calendar.day.selected"
    if cell.is_today:
        return "class:calendar.day.today"
    if cell.has_tasks:
        return "class:calendar.day.tasks"
    if cell.is_weekend:
        return "class:calendar.day.weekend"
    return "class:calendar.day"


def truncate_cell_text(text: str, cell_width: int) -> str:
    max_len = cell_width - 2
    if max_len > 1:
        return truncate_display(text, max_len)
    return text


def cell_preview_rows(cell: CalendarCell, rows: int, cell_width: int) -> List[Tuple[str, str]]:
    """Exactly `rows` styled strings of `cell_width` columns for one day cell."""
    blank = ("", " " * cell_width)
    if cell.day is None:
        return [blank] * rows
    count = len(cell.tasks)
    shown = count if count <= rows - 1 else rows - 1
    result: List[Tuple[str, str]] = []
    for task in cell.tasks[:shown]:
        text = " " + pad_display(truncate_cell_text(task.content, cell_width), cell_width - 1)
        result.append((priority_style(task.priority), text))
    if count > rows - 1:
        more = f"+{count - (rows - 1)} more"
        result.append(("class:calendar.more", " " + pad_display(more, cell_width - 1)))
    while len(result) < rows:
        result.append(blank)
    return result


def _border(left: str, mid: str, right: str, cell_width: int) -> str:
    return left + (("─" * cell_width) + mid) * 6 + ("─" * cell_width) + right


def render_expanded(weeks: Sequence[Sequence[CalendarCell]], layout: CalendarGridLayout) -> FormattedText:
    """Bordered month grid with day numbers and task previews in each cell."""
    cw = layout.cell_width
    rows = layout.max_preview_rows
    border = "class:border"
    result: Fragments = [(border, "│")]
    for name in WEEKDAY_NAMES:
        result.append(("class:calendar.weekday", pad_display(" " + name, cw)))
        result.append((border, "│"))
    result.append(("", "\n"))
    result.append((border, _border("├", "┼", "┤", cw) + "\n"))

    for week_no, week in enumerate(weeks):
        result.append((border, "│"))
        for cell in week:
            if cell.day is None:
                result.append(("", " " * cw))
            else:
                result.append((day_style(cell), pad_display(f" {cell.day:2d}", cw)))
            result.append((border, "│"))
        result.append(("", "\n"))

        previews = [cell_preview_rows(cell, rows, cw) for cell in week]
        for line_no in range(rows):
            result.append((border, "│"))
            for cell_rows in previews:
                result.append(cell_rows[line_no])
                result.append((border, "│"))
            result.append(("", "\n"))

        if week_no < len(weeks) - 1:
            result.append((border, _border("├", "┼", "┤", cw) + "\n"))
    result.append((border, _border("└", "┴", "┘", cw)))
    return FormattedText(result)


def render_compact(weeks: Sequence[Sequence[CalendarCell]]) -> FormattedText:
    """Day-number grid; days with tasks carry a `*` unless selected."""
    result: Fragments = []
    for name in WEEKDAY_NAMES:
        result.append(("class:calendar.weekday", f" {name} "))
    result.append(("", "\n"))
    for week_no, week in enumerate(weeks):
        for cell in week:
            if cell.day is None:
                result.append(("", " " * COMPACT_CELL_WIDTH))
                continue
            marker = "*" if cell.has_tasks and not cell.is_selected else " "
            result.append((day_style(cell), f" {cell.day:2d}{marker}"))
            result.append(("", " "))
        if week_no < len(weeks) - 1:
            result.append(("", "\n"))
    return FormattedText(result)


def shift_day(current: date, days: int) -> date:
    """Move by days or weeks; crossing a month edge lands in the neighbouring month."""
    return current + timedelta(days=days)


def shift_month(current: date, months: int) -> date:
    """Same day in another month, clamped to that month's last day."""
    index = current.year * 12 + (current.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    _, days = calendar.monthrange(year, month)
    return date(year, month, min(current.day, days))


__all__ = [
    "WEEKDAY_NAMES",
    "HEIGHT_OVERHEAD",
    "DEFAULT_WEEKEND_DAYS",
    "CalendarGridLayout",
    "CalendarCell",
    "month_geometry",
    "weeks_needed",
    "cell_width_for",
    "preview_rows_for",
    "compute_layout",
    "tasks_by_day",
    "tasks_on",
    "build_month_cells",
    "day_style",
    "truncate_cell_text",
    "cell_preview_rows",
    "render_expanded",
    "render_compact",
    "shift_day",
    "shift_month",
]
