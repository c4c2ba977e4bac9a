"""Task records as delivered by the data layer."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional


def _parse_datetime(raw: Any) -> Optional[datetime]:
    value = str(raw or "").strip()
    if len(value) <= 10:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _parse_date(raw: Any) -> Optional[date]:
    value = str(raw or "").strip()[:10]
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


@dataclass
class Due:
    """Due information; `date` is `YYYY-MM-DD` or a full ISO timestamp."""
    date: str
    datetime: Optional[str] = None
    string: str = ""
    is_recurring: bool = False

    @property
    def date_key(self) -> str:
        return (self.date or "")[:10]

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Due"]:
        if not data:
            return None
        if not isinstance(data, dict):
            return cls(date=str(data))
        moment = data.get("datetime")
        return cls(
            date=str(data.get("date") or ""),
            datetime=str(moment) if moment else None,
            string=str(data.get("string") or ""),
            is_recurring=bool(data.get("is_recurring", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"date": self.date}
        if self.datetime:
            data["datetime"] = self.datetime
        if self.string:
            data["string"] = self.string
        if self.is_recurring:
            data["is_recurring"] = True
        return data


@dataclass
class Task:
    id: str
    content: str
    description: str = ""
    priority: int = 1
    due: Optional[Due] = None
    project_id: str = ""
    section_id: Optional[str] = None
    parent_id: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    checked: bool = False

    @property
    def is_subtask(self) -> bool:
        return bool(self.parent_id)

    def due_datetime(self) -> Optional[datetime]:
        """Due moment when the task carries a time of day."""
        if self.due is None:
            return None
        return _parse_datetime(self.due.datetime or "") or _parse_datetime(self.due.date)

    def due_date(self) -> Optional[date]:
        if self.due is None:
            return None
        moment = self.due_datetime()
        if moment is not None:
            return moment.date()
        return _parse_date(self.due.date)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Past the due time, or due before today for date-only tasks. Completed tasks never are."""
        if self.due is None or self.checked:
            return False
        now = now or datetime.now()
        moment = self.due_datetime()
        if moment is not None:
            return now > moment
        due_day = self.due_date()
        if due_day is None:
            return False
        return due_day < now.date()

    def is_due_today(self, today: Optional[date] = None) -> bool:
        due_day = self.due_date()
        if due_day is None:
            return False
        return due_day == (today or date.today())

    def due_display(self, now: Optional[datetime] = None) -> str:
        """Human readable due label such as `today`, `Friday 3:00pm` or `Jan 2`."""
        if self.due is None:
            return ""
        due_day = self.due_date()
        if due_day is None:
            return self.due.string
        now = now or datetime.now()
        diff = (due_day - now.date()).days
        if diff < -1:
            display = f"{-diff} days ago"
        elif diff == -1:
            display = "yesterday"
        elif diff == 0:
            display = "today"
        elif diff == 1:
            display = "tomorrow"
        elif diff < 7:
            display = due_day.strftime("%A")
        else:
            display = f"{due_day.strftime('%b')} {due_day.day}"
        moment = self.due_datetime()
        if moment is not None:
            hour = moment.hour % 12 or 12
            suffix = "am" if moment.hour < 12 else "pm"
            display += f" {hour}:{moment.minute:02d}{suffix}"
        return display

    def shift_due(self, days: int, today: Optional[date] = None) -> None:
        """Move the due date by `days`; undated tasks are scheduled relative to today."""
        base = self.due_date() or (today or date.today())
        target = base + timedelta(days=days)
        moment = self.due_datetime()
        if moment is not None:
            shifted = moment + timedelta(days=days)
            self.due = Due(date=target.isoformat(), datetime=shifted.isoformat(timespec="minutes"),
                           is_recurring=self.due.is_recurring if self.due else False)
        else:
            recurring = self.due.is_recurring if self.due else False
            self.due = Due(date=target.isoformat(), is_recurring=recurring)

    def set_due(self, day: date) -> None:
        recurring = self.due.is_recurring if self.due else False
        self.due = Due(date=day.isoformat(), is_recurring=recurring)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        try:
            priority = int(data.get("priority", 1) or 1)
        except (TypeError, ValueError):
            priority = 1
        return cls(
            id=str(data.get("id") or ""),
            content=str(data.get("content") or ""),
            description=str(data.get("description") or ""),
            priority=max(1, min(4, priority)),
            due=Due.from_dict(data.get("due")),
            project_id=str(data.get("project_id") or ""),
            section_id=data.get("section_id") or None,
            parent_id=data.get("parent_id") or None,
            labels=[str(label) for label in data.get("labels") or []],
            checked=bool(data.get("checked", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "content": self.content}
        if self.description:
            data["description"] = self.description
        if self.priority != 1:
            data["priority"] = self.priority
        if self.due is not None:
            data["due"] = self.due.to_dict()
        if self.project_id:
            data["project_id"] = self.project_id
        if self.section_id:
            data["section_id"] = self.section_id
        if self.parent_id:
            data["parent_id"] = self.parent_id
        if self.labels:
            data["labels"] = list(self.labels)
        if self.checked:
            data["checked"] = True
        return data


@dataclass
class Section:
    id: str
    name: str
    project_id: str = ""
    order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_id: str = "", order: int = 0) -> "Section":
        try:
            order = int(data.get("order", order) or order)
        except (TypeError, ValueError):
            pass
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            project_id=str(data.get("project_id") or project_id),
            order=order,
        )


@dataclass
class Project:
    id: str
    name: str
    is_inbox: bool = False
    sections: List[Section] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        project_id = str(data.get("id") or "")
        raw_sections = data.get("sections") or []
        if not isinstance(raw_sections, list):
            raw_sections = []
        sections = [
            Section.from_dict(raw, project_id=project_id, order=idx)
            for idx, raw in enumerate(raw_sections)
            if isinstance(raw, dict)
        ]
        sections.sort(key=lambda s: s.order)
        return cls(
            id=project_id,
            name=str(data.get("name") or project_id),
            is_inbox=bool(data.get("is_inbox", False)),
            sections=sections,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.is_inbox:
            data["is_inbox"] = True
        if self.sections:
            data["sections"] = [{"id": s.id, "name": s.name, "order": s.order} for s in self.sections]
        return data


__all__ = ["Due", "Task", "Section", "Project"]
