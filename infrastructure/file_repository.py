import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar

import yaml

from core import Project, Task
from application.ports import TaskRepository, TaskSnapshot

logger = logging.getLogger("todo_tui.store")

T = TypeVar("T")


class RepositoryError(Exception):
    """Task file cannot be read, parsed or written."""


class YamlTaskRepository(TaskRepository):
    """Tasks and projects kept in a single YAML document.

    ```yaml
    projects:
      - {id: inbox, name: Inbox, is_inbox: true, sections: [{id: s1, name: Later}]}
    tasks:
      - {id: "1", content: Buy milk, project_id: inbox, due: {date: "2024-01-02"}}
    ```
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> TaskSnapshot:
        if not self.path.exists():
            logger.info("Task file %s does not exist yet", self.path)
            return TaskSnapshot()
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except OSError as exc:
            raise RepositoryError(f"cannot read {self.path}: {exc.strerror or exc}") from exc
        except yaml.YAMLError as exc:
            raise RepositoryError(f"invalid YAML in {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise RepositoryError(f"{self.path} must contain a mapping with 'tasks' and 'projects'")
        return TaskSnapshot(
            tasks=self._build(raw, "tasks", Task.from_dict),
            projects=self._build(raw, "projects", Project.from_dict),
        )

    def _build(self, raw: Dict[str, Any], key: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        built = []
        for item in self._records(raw, key):
            try:
                built.append(factory(item))
            except (TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed %s entry in %s: %r (%s)", key, self.path, item, exc)
        return built

    def _records(self, raw: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
        items = raw.get(key) or []
        if not isinstance(items, list):
            raise RepositoryError(f"'{key}' in {self.path} must be a list")
        records = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning("Skipping malformed %s entry in %s: %r", key, self.path, item)
                continue
            records.append(item)
        return records

    def save(self, snapshot: TaskSnapshot) -> None:
        payload = {
            "projects": [project.to_dict() for project in snapshot.projects],
            "tasks": [task.to_dict() for task in snapshot.tasks],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise RepositoryError(f"cannot write {self.path}: {exc.strerror or exc}") from exc
