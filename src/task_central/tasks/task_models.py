# src/task_central/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ..core.text import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_TITLE_LENGTH,
    generate_id,
    sanitize,
    validate_enum,
    validate_length,
)


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(StrEnum):
    PERSONAL = "personal"
    WORK = "work"
    URGENT = "urgent"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

_PRIORITY_VALUES = tuple(p.value for p in Priority)
_CATEGORY_VALUES = tuple(c.value for c in Category)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_ts(ts: datetime) -> str:
    return ts.isoformat()


def parse_ts(raw: Any) -> datetime:
    """
    Parse a persisted timestamp back into an aware UTC datetime.

    Accepts ISO-8601 strings (including a trailing "Z") and epoch seconds.
    Naive values are interpreted as UTC.
    """
    if isinstance(raw, datetime):
        ts = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            ts = datetime.fromtimestamp(float(raw), UTC)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {raw!r}") from e
    elif isinstance(raw, str) and raw.strip():
        ts = datetime.fromisoformat(raw.strip())
    else:
        raise ValueError(f"invalid timestamp: {raw!r}")

    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    try:
        return ts.astimezone(UTC)
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {raw!r}") from e


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)


def validate_task(title: Any, description: Any, priority: Any, category: Any) -> ValidationResult:
    """
    Validate raw task fields. Pure; every failing field is reported in one pass.

    Lengths are checked on the trimmed raw input, before sanitization.
    """
    errors: dict[str, str] = {}

    if not isinstance(title, str) or not title.strip():
        errors["title"] = "Task title is required"
    elif not validate_length(title, MIN_TITLE_LENGTH, MAX_TITLE_LENGTH):
        errors["title"] = f"Title must be {MIN_TITLE_LENGTH}-{MAX_TITLE_LENGTH} chars"

    if description and not validate_length(description, 0, MAX_DESCRIPTION_LENGTH):
        errors["description"] = f"Description max {MAX_DESCRIPTION_LENGTH} chars"

    if not priority or not validate_enum(priority, _PRIORITY_VALUES):
        errors["priority"] = "Please select a valid priority"

    if not category or not validate_enum(category, _CATEGORY_VALUES):
        errors["category"] = "Please select a valid category"

    return ValidationResult(valid=not errors, errors=errors)


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    """Mutable fields of a Task, captured for rollback."""

    title: str
    description: str
    priority: Priority
    category: Category
    completed: bool
    updated_at: datetime


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    priority: Priority
    category: Category
    created_at: datetime
    updated_at: datetime
    completed: bool = False

    @classmethod
    def create(
        cls,
        title: str,
        description: str,
        priority: str,
        category: str,
        *,
        now: datetime,
    ) -> Task:
        """Build a new task from already-validated input."""
        return cls(
            id=generate_id(),
            title=sanitize(title),
            description=sanitize(description),
            priority=Priority(priority),
            category=Category(category),
            created_at=now,
            updated_at=now,
        )

    def apply_update(
        self,
        title: str,
        description: str,
        priority: str,
        category: str,
        *,
        now: datetime,
    ) -> None:
        self.title = sanitize(title)
        self.description = sanitize(description)
        self.priority = Priority(priority)
        self.category = Category(category)
        self.updated_at = now

    def set_completed(self, completed: bool, *, now: datetime) -> None:
        self.completed = bool(completed)
        self.updated_at = now

    def matches_search(self, query: str) -> bool:
        if not query:
            return True
        q = query.lower()
        return q in self.title.lower() or q in self.description.lower()

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            title=self.title,
            description=self.description,
            priority=self.priority,
            category=self.category,
            completed=self.completed,
            updated_at=self.updated_at,
        )

    def restore(self, snap: TaskSnapshot) -> None:
        self.title = snap.title
        self.description = snap.description
        self.priority = snap.priority
        self.category = snap.category
        self.completed = snap.completed
        self.updated_at = snap.updated_at

    # ---- persisted layout ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category.value,
            "completed": self.completed,
            "createdAt": format_ts(self.created_at),
            "updatedAt": format_ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Rebuild a persisted task. Stored values are trusted (no re-validation).

        Raises KeyError/ValueError/TypeError when the entry is structurally unusable.
        """
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            priority=Priority(data["priority"]),
            category=Category(data["category"]),
            completed=bool(data.get("completed", False)),
            created_at=parse_ts(data["createdAt"]),
            updated_at=parse_ts(data["updatedAt"]),
        )
