from datetime import date, datetime

import pytest

from core import Due, Project, Task

NOW = datetime(2024, 1, 10, 12, 0)


def _task(due=None, **kwargs) -> Task:
    return Task(id=kwargs.pop("id", "1"), content=kwargs.pop("content", "Task"), due=Due.from_dict(due), **kwargs)


def test_from_dict_clamps_priority_and_reads_due():
    task = Task.from_dict({"id": 7, "content": "Pay rent", "priority": 9, "due": "2024-02-01", "labels": ["home"]})
    assert task.id == "7"
    assert task.priority == 4
    assert task.due.date == "2024-02-01"
    assert task.labels == ["home"]

    assert Task.from_dict({"id": "x", "priority": "high"}).priority == 1


def test_due_from_dict_accepts_mapping():
    due = Due.from_dict({"date": "2024-01-10T09:30:00", "is_recurring": True, "string": "every day"})
    assert due.date_key == "2024-01-10"
    assert due.is_recurring
    assert Due.from_dict(None) is None


def test_overdue_date_only_and_timed():
    assert _task("2024-01-09").is_overdue(NOW)
    assert not _task("2024-01-10").is_overdue(NOW)
    assert _task({"date": "2024-01-10T11:00:00"}).is_overdue(NOW)
    assert not _task({"date": "2024-01-10T13:00:00"}).is_overdue(NOW)
    assert not _task("2024-01-09", checked=True).is_overdue(NOW)
    assert not _task().is_overdue(NOW)


def test_due_today_uses_local_date():
    assert _task("2024-01-10").is_due_today(date(2024, 1, 10))
    assert _task({"date": "2024-01-10", "datetime": "2024-01-10T18:00:00"}).is_due_today(date(2024, 1, 10))
    assert not _task("2024-01-11").is_due_today(date(2024, 1, 10))


@pytest.mark.parametrize(
    "due, expected",
    [
        ("2024-01-08", "2 days ago"),
        ("2024-01-09", "yesterday"),
        ("2024-01-10", "today"),
        ("2024-01-11", "tomorrow"),
        ("2024-01-13", "Saturday"),
        ("2024-01-25", "Jan 25"),
        ("2024-01-10T15:04:00", "today 3:04pm"),
        ("2024-01-11T09:00:00", "tomorrow 9:00am"),
    ],
)
def test_due_display(due, expected):
    assert _task(due).due_display(NOW) == expected


def test_shift_due_crosses_month_and_keeps_time():
    task = _task("2024-01-31")
    task.shift_due(1)
    assert task.due.date == "2024-02-01"

    timed = _task({"date": "2024-01-10T15:04:00"})
    timed.shift_due(-1)
    assert timed.due_date() == date(2024, 1, 9)
    assert timed.due_datetime() == datetime(2024, 1, 9, 15, 4)


def test_shift_due_schedules_undated_from_today():
    task = _task()
    task.shift_due(1, today=date(2024, 1, 10))
    assert task.due.date == "2024-01-11"


def test_set_due_keeps_recurrence_flag():
    task = _task({"date": "2024-01-01", "is_recurring": True})
    task.set_due(date(2024, 1, 10))
    assert task.due.date == "2024-01-10"
    assert task.due.is_recurring


def test_task_to_dict_omits_defaults():
    task = Task.from_dict({"id": "1", "content": "Plain"})
    assert task.to_dict() == {"id": "1", "content": "Plain"}
    rich = Task.from_dict(
        {"id": "2", "content": "Rich", "priority": 3, "section_id": "s", "parent_id": "1", "checked": True}
    )
    assert Task.from_dict(rich.to_dict()) == rich


def test_project_sections_sorted_by_order():
    project = Project.from_dict(
        {
            "id": "p",
            "name": "Work",
            "sections": [{"id": "b", "name": "Later", "order": 2}, {"id": "a", "name": "Now", "order": 1}],
        }
    )
    assert [section.id for section in project.sections] == ["a", "b"]
    assert all(section.project_id == "p" for section in project.sections)
