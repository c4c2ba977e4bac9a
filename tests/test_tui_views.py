from datetime import date, datetime

from application.ports import TaskSnapshot
from core import Due, Project, Section, Task
from core.desktop.devtools.interface.tui_lines import GroupingPolicy
from core.desktop.devtools.interface.tui_state import View, ViewState
from core.desktop.devtools.interface.tui_views import (
    build_listing,
    order_hierarchically,
    sort_by_urgency,
    today_tasks,
    upcoming_tasks,
)

NOW = datetime(2024, 1, 10, 12, 0)


def _task(tid, due=None, **kwargs):
    return Task(id=tid, content=kwargs.pop("content", tid), due=Due.from_dict(due), **kwargs)


def _snapshot():
    projects = [
        Project(id="inbox", name="Inbox", is_inbox=True),
        Project(id="work", name="Work", sections=[Section(id="s1", name="Now", project_id="work")]),
        Project(id="home", name="Home"),
    ]
    tasks = [
        _task("a", "2024-01-09", project_id="inbox"),
        _task("b", "2024-01-10", project_id="work", section_id="s1"),
        _task("c", "2024-01-12", project_id="home"),
        _task("d", project_id="inbox"),
        _task("e", "2024-01-30", project_id="work"),
    ]
    return TaskSnapshot(tasks=tasks, projects=projects)


def _ids(tasks):
    return [task.id for task in tasks]


def test_sort_by_urgency():
    tasks = [
        _task("undated", priority=4),
        _task("late-day", "2024-01-12"),
        _task("urgent-day", "2024-01-12", priority=4),
        _task("timed-late", "2024-01-10T18:00:00"),
        _task("timed-early", "2024-01-10T09:00:00"),
        _task("early-day", "2024-01-11"),
    ]
    assert _ids(sort_by_urgency(tasks)) == [
        "timed-early",
        "timed-late",
        "urgent-day",
        "undated",
        "early-day",
        "late-day",
    ]


def test_order_hierarchically_places_children_after_parent():
    tasks = [_task("child", parent_id="p"), _task("x"), _task("p"), _task("grand", parent_id="child")]
    assert _ids(order_hierarchically(tasks)) == ["x", "p", "child", "grand"]


def test_order_hierarchically_survives_cycles():
    tasks = [_task("a", parent_id="b"), _task("b", parent_id="a")]
    assert sorted(_ids(order_hierarchically(tasks))) == ["a", "b"]


def test_today_and_upcoming_filters():
    snapshot = _snapshot()
    assert _ids(today_tasks(snapshot.tasks, NOW)) == ["a", "b"]
    assert _ids(upcoming_tasks(snapshot.tasks, NOW.date(), 7)) == ["b", "c"]
    assert _ids(upcoming_tasks(snapshot.tasks, NOW.date(), 0)) == ["b"]


def test_build_listing_per_view():
    snapshot = _snapshot()
    state = ViewState.create(calendar_date=date(2024, 1, 12))

    inbox = build_listing(View.INBOX, snapshot, state, NOW, 7)
    assert (inbox.policy, inbox.title, _ids(inbox.tasks)) == (GroupingPolicy.BY_SECTION, "Inbox", ["a", "d"])

    today = build_listing(View.TODAY, snapshot, state, NOW, 7)
    assert today.policy is GroupingPolicy.BY_STATUS

    upcoming = build_listing(View.UPCOMING, snapshot, state, NOW, 7)
    assert upcoming.policy is GroupingPolicy.BY_DATE

    project = build_listing(View.PROJECTS, snapshot, state, NOW, 7)
    assert project.title == "Work"
    assert _ids(project.tasks) == ["b", "e"]
    assert [section.id for section in project.sections] == ["s1"]

    state.project_index = 3
    assert build_listing(View.PROJECTS, snapshot, state, NOW, 7).title == "Home"

    day = build_listing(View.CALENDAR_DAY, snapshot, state, NOW, 7)
    assert day.policy is GroupingPolicy.FLAT
    assert day.title == "Friday, January 12"
    assert _ids(day.tasks) == ["c"]


def test_build_listing_without_projects():
    snapshot = TaskSnapshot(tasks=[_task("loose")])
    state = ViewState.create()
    assert _ids(build_listing(View.INBOX, snapshot, state, NOW, 7).tasks) == ["loose"]
    assert build_listing(View.PROJECTS, snapshot, state, NOW, 7).title == "No projects"


def test_label_counts_and_label_listing():
    snapshot = _snapshot()
    snapshot.tasks[0].labels = ["home", "errand"]
    snapshot.tasks[2].labels = ["home", "home"]
    snapshot.tasks[3].labels = [""]

    listing = build_listing(View.LABELS, snapshot, ViewState(), NOW, 7)
    assert listing.labels == [("errand", 1), ("home", 2)]
    assert listing.tasks == []

    state = ViewState(current_label="home")
    listing = build_listing(View.LABEL_TASKS, snapshot, state, NOW, 7)
    assert listing.policy is GroupingPolicy.FLAT
    assert listing.title == "@home"
    assert _ids(listing.tasks) == ["a", "c"]
    assert listing.labels is None
