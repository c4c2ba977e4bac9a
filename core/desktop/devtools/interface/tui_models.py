#!/usr/bin/env python3
"""TUI data models and constants."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, FrozenSet, List, Optional

from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.mouse_events import MouseEvent

from core.desktop.devtools.interface.tui_display import Fragments

# Refs at or below this value belong to cursor-addressable section headers.
HEADER_REF_BASE = -100
# Spacers and non-addressable headers.
SPACER_REF = -1


def header_ref(slot: int) -> int:
    """Unique ref for a section header occupying `slot` in the ordered index."""
    return HEADER_REF_BASE - slot


def is_header_ref(ref: int) -> bool:
    return ref <= HEADER_REF_BASE


@dataclass(frozen=True)
class DisplayLine:
    """One row of the virtual document.

    Static rows (headers, spacers) carry `rendered_text`; data rows carry a
    `renderer` that is only evaluated when the row falls inside the render window.
    """
    item_ref: int
    rendered_text: Optional[Fragments] = None
    renderer: Optional[Callable[[int], Optional[Fragments]]] = None
    group_id: str = ""

    @property
    def is_selectable(self) -> bool:
        return self.item_ref >= 0 or is_header_ref(self.item_ref)

    def render(self, width: int) -> Fragments:
        if self.renderer is not None:
            return list(self.renderer(width) or [])
        return list(self.rendered_text or [])


@dataclass
class LineModel:
    """Display lines plus the ordered index mapping cursor slots to item refs."""
    lines: List[DisplayLine] = field(default_factory=list)
    ordered_index: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def slot_count(self) -> int:
        return len(self.ordered_index)

    def ref_at_slot(self, slot: int) -> Optional[int]:
        if 0 <= slot < len(self.ordered_index):
            return self.ordered_index[slot]
        return None

    def group_at_slot(self, slot: int) -> str:
        """Section id when `slot` sits on a section header, empty string otherwise."""
        ref = self.ref_at_slot(slot)
        if ref is None or not is_header_ref(ref):
            return ""
        for line in self.lines:
            if line.item_ref == ref:
                return line.group_id
        return ""


@dataclass(frozen=True)
class RowContext:
    """Values a row renderer needs besides the task itself."""
    cursor_slot: int = 0
    focused: bool = True
    selected_ids: FrozenSet[str] = frozenset()
    now: Optional[datetime] = None

    def is_cursor(self, slot: int) -> bool:
        return self.focused and slot == self.cursor_slot


class InteractiveFormattedTextControl(FormattedTextControl):
    """FormattedTextControl with external mouse handler support."""

    def __init__(self, *args, mouse_handler=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._external_mouse_handler = mouse_handler

    def mouse_handler(self, mouse_event: MouseEvent):
        if self._external_mouse_handler:
            result = self._external_mouse_handler(mouse_event)
            if result is not NotImplemented:
                return result
        return super().mouse_handler(mouse_event)
