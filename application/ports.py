from dataclasses import dataclass, field
from typing import List, Protocol

from core import Project, Task


@dataclass
class TaskSnapshot:
    tasks: List[Task] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)


class TaskRepository(Protocol):
    def load(self) -> TaskSnapshot:
        ...

    def save(self, snapshot: TaskSnapshot) -> None:
        ...
