from .task import Due, Project, Section, Task

__all__ = [
    "Due",
    "Project",
    "Section",
    "Task",
]
