import pytest

from core import Section, Task
from core.desktop.devtools.interface.tui_lines import build_flat, build_section_grouped
from core.desktop.devtools.interface.tui_models import DisplayLine, RowContext
from core.desktop.devtools.interface.tui_window import FALLBACK_HEIGHT, Viewport, resolve_cursor_line, sync_offset


def _tasks(count, with_descriptions=False):
    return [
        Task(id=str(i), content=f"task {i}", description=("note" if with_descriptions and i % 3 == 0 else ""))
        for i in range(count)
    ]


def _plain(formatted):
    return "".join(text for _, text in formatted)


def test_sync_offset_scrolls_minimally():
    assert sync_offset(0, 3, 5, 20) == 0
    assert sync_offset(0, 7, 5, 20) == 3
    assert sync_offset(10, 4, 5, 20) == 4
    assert sync_offset(30, 19, 5, 20) == 15
    assert sync_offset(3, 2, 10, 5) == 0


def test_resolve_cursor_line_out_of_range_is_zero():
    model = build_flat(_tasks(3), RowContext())
    assert resolve_cursor_line(model.lines, model.ordered_index, 2) == 2
    assert resolve_cursor_line(model.lines, model.ordered_index, 5) == 0
    assert resolve_cursor_line(model.lines, model.ordered_index, -1) == 0


@pytest.mark.parametrize("height", [1, 2, 3, 7, 20, 200])
def test_cursor_line_always_inside_visible_window(height):
    tasks = _tasks(40, with_descriptions=True)
    viewport = Viewport(buffer=2)
    model = build_flat(tasks, RowContext())
    slots = list(range(model.slot_count)) + list(reversed(range(model.slot_count))) + [0, 39, 5, 30]
    for slot in slots:
        model = build_flat(tasks, RowContext(cursor_slot=slot))
        viewport.render(model.lines, model.ordered_index, slot, height, 80)
        assert viewport.offset <= viewport.cursor_line < viewport.offset + height
        assert 0 <= viewport.offset <= max(0, len(model.lines) - height)


def test_output_has_one_line_per_display_line():
    sections = [Section(id="s", name="Later")]
    tasks = _tasks(30, with_descriptions=True)
    tasks[5].section_id = "s"
    model = build_section_grouped(tasks, sections, RowContext(cursor_slot=20))
    viewport = Viewport()
    text = _plain(viewport.render(model.lines, model.ordered_index, 20, 6, 80))
    assert len(text.split("\n")) == len(model.lines)


def test_lines_outside_window_are_empty_placeholders():
    model = build_flat(_tasks(100), RowContext())
    viewport = Viewport(buffer=5)
    rows = _plain(viewport.render(model.lines, model.ordered_index, 0, 5, 80)).split("\n")
    assert rows[10].strip().endswith("task 10")
    assert rows[11] == ""
    assert rows[99] == ""


def test_renderers_outside_window_are_not_called():
    calls = []

    def renderer(idx):
        def render(width):
            calls.append(idx)
            return [("", f"row {idx}")]

        return render

    lines = [DisplayLine(item_ref=i, renderer=renderer(i)) for i in range(50)]
    viewport = Viewport(buffer=1)
    viewport.render(lines, list(range(50)), 30, 4, 80)
    assert viewport.offset == 27
    assert calls == list(range(26, 33))


def test_render_is_idempotent():
    model = build_flat(_tasks(60), RowContext(cursor_slot=45))
    viewport = Viewport()
    first = viewport.render(model.lines, model.ordered_index, 45, 10, 80)
    offset = viewport.offset
    second = viewport.render(model.lines, model.ordered_index, 45, 10, 80)
    assert first == second
    assert viewport.offset == offset


def test_offset_persists_between_renders():
    model = build_flat(_tasks(60), RowContext())
    viewport = Viewport()
    viewport.render(model.lines, model.ordered_index, 30, 10, 80)
    assert viewport.offset == 21
    viewport.render(model.lines, model.ordered_index, 25, 10, 80)
    assert viewport.offset == 21


def test_empty_lines_reset_offset_and_row_maps():
    model = build_flat(_tasks(30), RowContext())
    viewport = Viewport()
    viewport.render(model.lines, model.ordered_index, 29, 5, 80)
    assert viewport.offset > 0
    assert viewport.render([], [], 0, 5, 80) == []
    assert viewport.offset == 0
    assert viewport.row_refs == []
    assert viewport.hit_test(0) is None


def test_non_positive_height_uses_fallback():
    model = build_flat(_tasks(30), RowContext())
    viewport = Viewport()
    viewport.render(model.lines, model.ordered_index, 25, 0, 80)
    assert viewport.height == FALLBACK_HEIGHT
    assert viewport.offset == 25 - FALLBACK_HEIGHT + 1


def test_hit_test_and_slot_mapping_follow_offset():
    sections = [Section(id="s1", name="Work")]
    tasks = _tasks(3)
    tasks[2].section_id = "s1"
    model = build_section_grouped(tasks, sections, RowContext())
    # lines: t0, t1, spacer, header(s1), t2, spacer
    viewport = Viewport()
    viewport.render(model.lines, model.ordered_index, 0, 10, 80)

    assert viewport.hit_test(3) == (-102, "s1")
    assert viewport.slot_at_row(0, model.ordered_index) == 0
    assert viewport.slot_at_row(2, model.ordered_index) is None
    assert viewport.slot_at_row(3, model.ordered_index) == 2
    assert viewport.slot_at_row(4, model.ordered_index) == 3
    assert viewport.slot_at_row(40, model.ordered_index) is None
    assert viewport.slot_at_row(-1, model.ordered_index) is None


def test_hit_test_description_row_maps_to_its_task():
    tasks = [Task(id="a", content="a", description="details"), Task(id="b", content="b")]
    model = build_flat(tasks, RowContext())
    viewport = Viewport()
    viewport.render(model.lines, model.ordered_index, 0, 10, 80)
    assert viewport.slot_at_row(1, model.ordered_index) == 0
    assert viewport.slot_at_row(2, model.ordered_index) == 1
