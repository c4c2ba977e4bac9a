from __future__ import annotations

import logging
import os
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("todo_tui.config")

USER_CONFIG_PATH = Path.home() / ".todo_tui_config.yaml"
DEFAULT_DATA_FILE = Path.home() / ".todo_tui_tasks.yaml"

DEFAULT_THEME = "dark-olive"
DEFAULT_CALENDAR_VIEW = "compact"
CALENDAR_VIEWS = ("compact", "expanded")
DEFAULT_RENDER_BUFFER = 5
DEFAULT_WEEKEND_DAYS = [0, 6]
DEFAULT_UPCOMING_DAYS = 7


def config_path() -> Path:
    override = os.getenv("TODO_TUI_CONFIG", "").strip()
    return Path(override).expanduser() if override else USER_CONFIG_PATH


def _load_config() -> Dict[str, Any]:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Cannot read config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config %s is not a mapping; ignoring it", path)
        return {}
    return data


def _save_config(data: Dict[str, Any]) -> None:
    path = config_path()
    if not data:
        if path.exists():
            path.unlink()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _int_setting(key: str, default: int, minimum: int) -> int:
    raw = _load_config().get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s %r; using %s", key, raw, default)
        return default
    if value < minimum:
        logger.warning("%s must be >= %s, got %s; using %s", key, minimum, value, default)
        return default
    return value


def get_theme() -> str:
    return str(_load_config().get("theme") or DEFAULT_THEME).strip()


def set_theme(value: str) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data["theme"] = value
    else:
        data.pop("theme", None)
    _save_config(data)


def get_calendar_view() -> str:
    value = str(_load_config().get("calendar_view") or DEFAULT_CALENDAR_VIEW).strip().lower()
    if value not in CALENDAR_VIEWS:
        logger.warning("Unknown calendar_view %r; using %s", value, DEFAULT_CALENDAR_VIEW)
        return DEFAULT_CALENDAR_VIEW
    return value


def set_calendar_view(value: str) -> None:
    if value not in CALENDAR_VIEWS:
        raise ValueError(f"calendar_view must be one of {', '.join(CALENDAR_VIEWS)}")
    data = _load_config()
    data["calendar_view"] = value
    _save_config(data)


def get_render_buffer() -> int:
    return _int_setting("render_buffer", DEFAULT_RENDER_BUFFER, 0)


def get_upcoming_days() -> int:
    return _int_setting("upcoming_days", DEFAULT_UPCOMING_DAYS, 1)


def get_weekend_days() -> List[int]:
    raw = _load_config().get("weekend_days", DEFAULT_WEEKEND_DAYS)
    if not isinstance(raw, list):
        logger.warning("weekend_days must be a list; using defaults")
        return list(DEFAULT_WEEKEND_DAYS)
    days: List[int] = []
    for item in raw:
        try:
            day = int(item)
        except (TypeError, ValueError):
            logger.warning("Ignoring weekend day %r", item)
            continue
        if 0 <= day <= 6:
            days.append(day)
        else:
            logger.warning("Ignoring weekend day %r outside 0..6", item)
    return days


def get_keymap_overrides() -> Dict[str, str]:
    raw = _load_config().get("keymap") or {}
    if not isinstance(raw, dict):
        logger.warning("keymap must be a mapping; ignoring it")
        return {}
    return {str(key): str(value) for key, value in raw.items()}


def get_data_file() -> Optional[Path]:
    raw = str(_load_config().get("data_file") or "").strip()
    return Path(raw).expanduser() if raw else None


def resolve_data_file(cli_value: Optional[str] = None) -> Path:
    if cli_value:
        return Path(cli_value).expanduser()
    return get_data_file() or DEFAULT_DATA_FILE
