# src/tasktrack/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

DATE_FORMAT = "%Y-%m-%d"
NO_TAGS = "No Tags"
DEFAULT_CATEGORIES = ("Personal", "Work", "Study")


class MissingDueDateError(ValueError):
    """A task without a due date was formatted or compared by due date."""


class TaskStatus(StrEnum):
    """
    Canonical task status vocabulary.

    Comparisons elsewhere are case-insensitive, so a raw value such as
    "completed" set directly on a task still counts as completed.
    """

    PENDING = "Pending"
    COMPLETED = "Completed"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        if raw is None:
            return cls.PENDING
        text = str(raw).strip()
        if not text:
            return cls.PENDING
        for member in cls:
            if member.value.casefold() == text.casefold():
                return member
        return cls.PENDING


def is_completed(status: Any) -> bool:
    return str(status or "").casefold() == TaskStatus.COMPLETED.casefold()


def format_date(value: date | None, fmt: str = DATE_FORMAT) -> str:
    if value is None:
        raise MissingDueDateError("due date is not set")
    if fmt == DATE_FORMAT:
        # strftime("%Y") does not zero-pad years below 1000 on every platform.
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
    return value.strftime(fmt)


def parse_date(text: str, fmt: str = DATE_FORMAT) -> date:
    return datetime.strptime(str(text).strip(), fmt).date()


def coerce_date(value: date | str | None, fmt: str = DATE_FORMAT) -> date | None:
    """Accept a date, canonical text or None; raise ValueError on bad text."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not str(value).strip():
        return None
    return parse_date(value, fmt)


class UpdatableField(StrEnum):
    """Closed set of task fields that may be changed one at a time."""

    TITLE = "title"
    DESCRIPTION = "description"
    DUE_DATE = "due_date"
    CATEGORY = "category"
    STATUS = "status"

    @property
    def column(self) -> str:
        return _FIELD_COLUMNS[self]

    @classmethod
    def parse(cls, name: Any) -> UpdatableField | None:
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        key = name.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            return None


_FIELD_COLUMNS = {
    UpdatableField.TITLE: "title",
    UpdatableField.DESCRIPTION: "description",
    UpdatableField.DUE_DATE: "due_date",
    UpdatableField.CATEGORY: "category",
    UpdatableField.STATUS: "status",
}


def normalize_field_value(field: UpdatableField, value: Any) -> Any:
    """Validate a single-field change; raise ValueError for unusable values."""
    if field is UpdatableField.TITLE:
        text = str(value or "").strip()
        if not text:
            raise ValueError("title cannot be empty")
        return text
    if field is UpdatableField.DUE_DATE:
        return coerce_date(value)
    if field is UpdatableField.STATUS:
        return TaskStatus.from_raw(value).value
    return "" if value is None else str(value)


def _dedupe(tags: Iterable[str]) -> list[str]:
    out: list[str] = []
    for tag in tags:
        if tag not in out:
            out.append(tag)
    return out


@dataclass(slots=True)
class Task:
    """
    A single to-do item.

    `id` is assigned by the database on insert; tasks created offline keep 0.
    Status is normalized on construction and by set_status(); assigning the
    attribute directly keeps whatever value is given.
    """

    title: str
    description: str = ""
    due_date: date | None = None
    category: str = ""
    status: str = TaskStatus.PENDING.value
    id: int = 0
    tags: list[str] = field(default_factory=list)
    assigned_user: str | None = None

    def __post_init__(self) -> None:
        self.status = TaskStatus.from_raw(self.status).value
        self.tags = _dedupe(self.tags or [])

    def set_status(self, value: Any) -> None:
        self.status = TaskStatus.from_raw(value).value

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        if tag in self.tags:
            self.tags.remove(tag)

    def mark_completed(self) -> None:
        self.status = TaskStatus.COMPLETED.value

    @property
    def completed(self) -> bool:
        return is_completed(self.status)

    def apply(self, field: UpdatableField, value: Any) -> None:
        setattr(self, field.value, normalize_field_value(field, value))

    def formatted_tags(self) -> str:
        return ", ".join(self.tags) if self.tags else NO_TAGS

    def formatted_due_date(self, fmt: str = DATE_FORMAT) -> str:
        return format_date(self.due_date, fmt)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_date": format_date(self.due_date) if self.due_date else None,
            "category": self.category,
            "status": self.status,
            "tags": list(self.tags),
            "assigned_user": self.assigned_user,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Task:
        title = data["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValueError("task record has no title")
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise TypeError("tags must be a list")
        return cls(
            id=int(data.get("id") or 0),
            title=title,
            description=str(data.get("description") or ""),
            due_date=coerce_date(data.get("due_date")),
            category=str(data.get("category") or ""),
            status=data.get("status"),
            tags=[str(t) for t in tags],
            assigned_user=data.get("assigned_user"),
        )

    def __str__(self) -> str:
        due = self.formatted_due_date() if self.due_date else "-"
        return (
            f"{self.title} ({self.category}) - Due: {due} - "
            f"Status: {self.status} - Tags: {self.formatted_tags()}"
        )


@dataclass(slots=True)
class User:
    # Carried for display and task ownership only; nothing is enforced.
    username: str
    role: str = "user"
    password: str | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "role": self.role}
