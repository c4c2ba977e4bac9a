"""Display utilities - text width, trimming, padding and truncation with proper Unicode width."""

from typing import List, Tuple

from wcwidth import wcwidth

ELLIPSIS = "…"

Fragments = List[Tuple[str, str]]


def _char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def display_width(text: str) -> int:
    """Return visual width of text accounting for wide/narrow characters."""
    return sum(_char_width(ch) for ch in text)


def trim_display(text: str, width: int) -> str:
    """Trim text so visible width doesn't exceed specified width."""
    acc = []
    used = 0
    for ch in text:
        w = _char_width(ch)
        if used + w > width:
            break
        acc.append(ch)
        used += w
    return "".join(acc)


def pad_display(text: str, width: int) -> str:
    """Trim and pad with spaces to exact visible width."""
    trimmed = trim_display(text, width)
    trimmed_width = display_width(trimmed)
    if trimmed_width < width:
        trimmed += " " * (width - trimmed_width)
    return trimmed


def truncate_display(text: str, width: int) -> str:
    """Cut text to `width` columns, replacing the tail with an ellipsis when it does not fit."""
    if display_width(text) <= width:
        return text
    if width <= 1:
        return ELLIPSIS
    return trim_display(text, width - 1) + ELLIPSIS


def fragments_width(fragments: Fragments) -> int:
    return sum(display_width(text) for _, text in fragments)


def trim_fragments(fragments: Fragments, width: int) -> Fragments:
    """Trim styled fragments to a maximum visible width, keeping styles intact."""
    result: Fragments = []
    used = 0
    for style, text in fragments:
        if used >= width:
            break
        remaining = width - used
        piece = trim_display(text, remaining)
        if piece:
            result.append((style, piece))
            used += display_width(piece)
        if len(piece) < len(text):
            break
    return result


__all__ = [
    "ELLIPSIS",
    "Fragments",
    "display_width",
    "trim_display",
    "pad_display",
    "truncate_display",
    "fragments_width",
    "trim_fragments",
]
