"""Windowed rendering of a virtual line document.

Only lines within `buffer` rows of the visible window are rendered; every other line is
an empty placeholder so the document keeps its full height for scrolling and hit-testing.
"""

from typing import List, Optional, Sequence, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core.desktop.devtools.interface.tui_display import Fragments
from core.desktop.devtools.interface.tui_models import DisplayLine, is_header_ref

DEFAULT_BUFFER = 5
FALLBACK_HEIGHT = 10


def resolve_cursor_line(lines: Sequence[DisplayLine], ordered_index: Sequence[int], cursor_slot: int) -> int:
    """Index of the first line carrying the ref under `cursor_slot`, 0 when unresolvable."""
    if not 0 <= cursor_slot < len(ordered_index):
        return 0
    target = ordered_index[cursor_slot]
    for idx, line in enumerate(lines):
        if line.item_ref == target:
            return idx
    return 0


def sync_offset(offset: int, cursor_line: int, height: int, total: int) -> int:
    """Smallest scroll change that keeps `cursor_line` inside `[offset, offset + height)`."""
    if cursor_line < offset:
        offset = cursor_line
    elif cursor_line >= offset + height:
        offset = cursor_line - height + 1
    max_offset = max(0, total - height)
    return max(0, min(offset, max_offset))


class Viewport:
    """Scroll state for one screen; the offset survives renders and is resynced on each one."""

    def __init__(self, height: int = FALLBACK_HEIGHT, buffer: int = DEFAULT_BUFFER):
        self.offset: int = 0
        self.height: int = height
        self.buffer: int = max(0, buffer)
        self.row_refs: List[int] = []
        self.row_groups: List[str] = []
        self.cursor_line: int = 0

    def reset(self) -> None:
        self.offset = 0
        self.cursor_line = 0
        self.row_refs = []
        self.row_groups = []

    def render_window(self) -> Tuple[int, int]:
        return self.offset - self.buffer, self.offset + self.height + self.buffer

    def render(
        self,
        lines: Sequence[DisplayLine],
        ordered_index: Sequence[int],
        cursor_slot: int,
        height: int,
        width: int,
    ) -> FormattedText:
        if height <= 0:
            height = FALLBACK_HEIGHT
        self.height = height
        if not lines:
            self.reset()
            return FormattedText([])

        self.row_refs = [line.item_ref for line in lines]
        self.row_groups = [line.group_id for line in lines]

        self.cursor_line = resolve_cursor_line(lines, ordered_index, cursor_slot)
        self.offset = sync_offset(self.offset, self.cursor_line, height, len(lines))

        start, end = self.render_window()
        result: Fragments = []
        last = len(lines) - 1
        for idx, line in enumerate(lines):
            if start <= idx <= end:
                result.extend(line.render(width))
            if idx < last:
                result.append(("", "\n"))
        return FormattedText(result)

    def hit_test(self, row: int) -> Optional[Tuple[int, str]]:
        """Map a screen row inside the window to `(item_ref, group_id)` of the line under it."""
        idx = self.offset + row
        if row < 0 or not 0 <= idx < len(self.row_refs):
            return None
        return self.row_refs[idx], self.row_groups[idx]

    def slot_at_row(self, row: int, ordered_index: Sequence[int]) -> Optional[int]:
        """Cursor slot for a clicked row; spacers and plain group headers map to nothing."""
        hit = self.hit_test(row)
        if hit is None:
            return None
        ref, _ = hit
        if ref < 0 and not is_header_ref(ref):
            return None
        for slot, value in enumerate(ordered_index):
            if value == ref:
                return slot
        return None


__all__ = ["DEFAULT_BUFFER", "FALLBACK_HEIGHT", "resolve_cursor_line", "sync_offset", "Viewport"]
