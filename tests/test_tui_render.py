from datetime import datetime

from core import Due, Task
from core.desktop.devtools.interface.tui_display import display_width
from core.desktop.devtools.interface.tui_models import RowContext
from core.desktop.devtools.interface.tui_render import (
    render_description_row,
    render_label_row,
    render_section_header,
    render_task_row,
    strip_markdown_links,
)

NOW = datetime(2024, 1, 10, 12, 0)


def _plain(fragments):
    return "".join(text for _, text in fragments)


def test_cursor_row_is_highlighted():
    task = Task(id="1", content="Buy milk")
    fragments = render_task_row(task, 0, RowContext(cursor_slot=0), 80)
    assert _plain(fragments) == ">  [ ] Buy milk"
    assert all(style.startswith("class:selected") for style, _ in fragments)

    other = render_task_row(task, 1, RowContext(cursor_slot=0), 80)
    assert _plain(other) == "   [ ] Buy milk"
    assert not any("selected" in style for style, _ in other)


def test_unfocused_list_hides_cursor():
    task = Task(id="1", content="Buy milk")
    assert _plain(render_task_row(task, 0, RowContext(cursor_slot=0, focused=False), 80)).startswith("  ")


def test_row_shows_selection_subtask_due_and_labels():
    task = Task(
        id="1",
        content="Pay rent",
        parent_id="0",
        labels=["home", "money"],
        due=Due.from_dict({"date": "2024-01-09", "is_recurring": True}),
    )
    fragments = render_task_row(task, 1, RowContext(selected_ids=frozenset({"1"}), now=NOW), 80)
    assert _plain(fragments) == "  ●  [ ] Pay rent↻ | yesterday @home @money"
    assert ("class:due.overdue", "| yesterday") in fragments
    assert ("class:label", "@home @money") in fragments


def test_due_today_style():
    task = Task(id="1", content="Call", due=Due.from_dict("2024-01-10"))
    fragments = render_task_row(task, 1, RowContext(now=NOW), 80)
    assert ("class:due.today", "| today") in fragments


def test_checked_task_uses_done_style():
    task = Task(id="1", content="Done thing", checked=True)
    fragments = render_task_row(task, 0, RowContext(cursor_slot=0), 80)
    assert "[x]" in _plain(fragments)
    assert all(style.startswith("class:task.done") for style, _ in fragments)


def test_priority_style_on_content():
    task = Task(id="1", content="Urgent", priority=4)
    fragments = render_task_row(task, 1, RowContext(), 80)
    assert ("class:priority.1", "Urgent") in fragments


def test_narrow_row_fits_width():
    task = Task(id="1", content="A fairly long task description that will not fit", labels=["work"])
    for width in (10, 20, 40):
        assert display_width(_plain(render_task_row(task, 0, RowContext(), width))) <= width - 2


def test_long_content_is_truncated_with_ellipsis():
    task = Task(id="1", content="x" * 100)
    text = _plain(render_task_row(task, 1, RowContext(), 40))
    assert text.endswith("…")
    assert display_width(text) <= 38


def test_description_row():
    assert render_description_row("", 80) == []
    assert render_description_row("text", 18) == []
    fragments = render_description_row("first [link](http://x)\nsecond", 80)
    assert fragments == [("class:task.description", " " * 10 + "first link")]
    assert display_width(_plain(render_description_row("y" * 200, 40))) == 10 + 26


def test_strip_markdown_links_only_first():
    assert strip_markdown_links("see [a](b) and [c](d)") == "see a and [c](d)"
    assert strip_markdown_links("plain") == "plain"


def test_section_header():
    assert render_section_header("Work", 2, RowContext(cursor_slot=2)) == [("class:selected", "> Work")]
    assert render_section_header("Work", 2, RowContext(cursor_slot=0)) == [("class:header", "  Work")]


def test_label_row():
    assert render_label_row("home", 3, 0, RowContext(cursor_slot=0), 80) == [
        ("class:selected class:task", "> "),
        ("class:selected class:label", "@home"),
        ("class:selected class:text.dim", " (3)"),
    ]
    assert _plain(render_label_row("empty", 0, 1, RowContext(cursor_slot=0), 80)) == "  @empty"
