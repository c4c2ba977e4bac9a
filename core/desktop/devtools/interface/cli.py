"""Command line entry point for the todo TUI."""

import argparse
import logging
from typing import Any, Mapping, Optional, Sequence

import config
from infrastructure.file_repository import YamlTaskRepository
from core.desktop.devtools.interface.tui_keys import build_keymap
from core.desktop.devtools.interface.tui_themes import DEFAULT_THEME, THEMES

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser(themes: Mapping[str, Any], default_theme: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo-tui",
        description="Keyboard-driven terminal task manager",
    )
    parser.add_argument("--data", help="YAML task file (default: config data_file or ~/.todo_tui_tasks.yaml)")
    parser.add_argument("--theme", choices=list(themes.keys()), default=default_theme, help="color palette")
    parser.add_argument("--log-file", help="write warnings and diagnostics to this file")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level (with --log-file)")
    return parser


def configure_logging(log_file: Optional[str], debug: bool = False) -> None:
    """Route `todo_tui.*` loggers to a file; without one keep the terminal clean."""
    root = logging.getLogger("todo_tui")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.setLevel(logging.DEBUG if debug else logging.INFO)
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)
    root.propagate = False


def cmd_tui(args) -> int:
    from core.desktop.devtools.interface.tui_app import TodoTUI

    repository = YamlTaskRepository(config.resolve_data_file(args.data))
    tui = TodoTUI(
        repository,
        theme=args.theme,
        keymap=build_keymap(config.get_keymap_overrides()),
        render_buffer=config.get_render_buffer(),
        calendar_mode=config.get_calendar_view(),
        weekend_days=config.get_weekend_days(),
        upcoming_days=config.get_upcoming_days(),
    )
    tui.run()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    configured = config.get_theme()
    default_theme = configured if configured in THEMES else DEFAULT_THEME
    parser = build_parser(THEMES, default_theme)
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.debug)
    logging.getLogger("todo_tui.app").info("Starting with data file %s", config.resolve_data_file(args.data))
    return cmd_tui(args)


__all__ = ["build_parser", "configure_logging", "cmd_tui", "main"]
