"""Clipboard handling mixin for TUI."""

import logging
import subprocess
from typing import TYPE_CHECKING, Optional

import pyperclip
from prompt_toolkit.clipboard import ClipboardData, InMemoryClipboard
from prompt_toolkit.clipboard.pyperclip import PyperclipClipboard

if TYPE_CHECKING:
    from prompt_toolkit.clipboard import Clipboard

logger = logging.getLogger("todo_tui.app")

NATIVE_COPY_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard", "-in"],
    ["clip.exe"],
)


class ClipboardMixin:
    """Mixin providing clipboard operations for TUI."""

    clipboard: Optional["Clipboard"]

    @staticmethod
    def _build_clipboard() -> "Clipboard":
        """System clipboard through pyperclip, in-memory when no backend is available."""
        try:
            pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            logger.warning("System clipboard unavailable: %s", exc)
            return InMemoryClipboard()
        return PyperclipClipboard()

    def _copy_to_clipboard(self, text: str) -> bool:
        """Copy text to clipboard (best-effort)."""
        payload = str(text or "")
        if not payload:
            return False
        clipboard = getattr(self, "clipboard", None)
        if clipboard is not None and not isinstance(clipboard, InMemoryClipboard):
            try:
                clipboard.set_data(ClipboardData(payload))
                return True
            except pyperclip.PyperclipException as exc:
                logger.warning("pyperclip copy failed: %s", exc)
        for cmd in NATIVE_COPY_COMMANDS:
            try:
                result = subprocess.run(cmd, input=payload, text=True, timeout=1)
            except (OSError, subprocess.SubprocessError):
                continue
            if result.returncode == 0:
                return True
        if clipboard is not None:
            clipboard.set_data(ClipboardData(payload))
            return True
        return False


__all__ = ["ClipboardMixin", "NATIVE_COPY_COMMANDS"]
