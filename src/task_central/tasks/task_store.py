# src/task_central/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.ports import KeyValueStorage, SaveResult
from .task_models import PRIORITY_RANK, Task, utc_now, validate_task

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "taskManagerTasks"
NOT_FOUND_MESSAGE = "Task not found"

WELCOME_TITLE = "Welcome to TASK CENTRAL!"
WELCOME_DESCRIPTION = "This is your first task. Try editing, marking as complete, or deleting it."


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


@dataclass(frozen=True, slots=True)
class StoreResult:
    """
    Outcome of a store operation.

    success=True  -> `task` holds the affected task (None for delete)
    success=False -> `kind` says why; validation failures carry per-field `errors`,
                     everything else a single `error` message
    """

    success: bool
    task: Task | None = None
    errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, task: Task | None = None) -> StoreResult:
        return cls(success=True, task=task)

    @classmethod
    def invalid(cls, errors: dict[str, str]) -> StoreResult:
        return cls(success=False, errors=dict(errors), kind=ErrorKind.VALIDATION)

    @classmethod
    def not_found(cls) -> StoreResult:
        return cls(success=False, error=NOT_FOUND_MESSAGE, kind=ErrorKind.NOT_FOUND)

    @classmethod
    def persistence_failed(cls, save: SaveResult) -> StoreResult:
        return cls(success=False, error=save.error or "Storage error", kind=ErrorKind.PERSISTENCE)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    shown: int


class TaskStore:
    """
    Owns the task collection and every validated mutation on it.

    Atomicity:
    - each mutation is applied in memory, then the whole collection is persisted
    - if persisting fails the in-memory change is undone, so the collection never
      diverges from what was last durably saved

    Storage order is insertion order; display order always comes from query().
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        tasks_key: str = DEFAULT_TASKS_KEY,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._tasks_key = tasks_key
        self._clock = clock
        self._tasks: list[Task] = []
        self._edit_target: str | None = None

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return -1

    def _persist(self) -> SaveResult:
        return self._storage.save(self._tasks_key, [t.to_dict() for t in self._tasks])

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        i = self._index_of(task_id)
        return self._tasks[i] if i >= 0 else None

    def query(
        self,
        search_text: str = "",
        category_filter: str = "",
        priority_filter: str = "",
    ) -> list[Task]:
        """
        Filter + sort a fresh view of the collection.

        Order: priority high > medium > low, then newest created_at first.
        """
        out = [
            t
            for t in self._tasks
            if (not search_text or t.matches_search(search_text))
            and (not category_filter or t.category == category_filter)
            and (not priority_filter or t.priority == priority_filter)
        ]
        out.sort(key=lambda t: (PRIORITY_RANK[t.priority], t.created_at), reverse=True)
        return out

    def stats(self, shown: int | None = None) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=total, completed=completed, shown=total if shown is None else shown)

    # ---- edit target ----

    @property
    def edit_target(self) -> str | None:
        return self._edit_target

    def begin_edit(self, task_id: str) -> bool:
        if self.get(task_id) is None:
            return False
        self._edit_target = task_id
        return True

    def cancel_edit(self) -> None:
        self._edit_target = None

    # ---- mutations ----

    def add(self, title: Any, description: Any, priority: Any, category: Any) -> StoreResult:
        validation = validate_task(title, description, priority, category)
        if not validation.valid:
            return StoreResult.invalid(validation.errors)

        task = Task.create(title, description or "", priority, category, now=self._clock())
        self._tasks.append(task)

        saved = self._persist()
        if not saved.success:
            self._tasks.pop()
            logger.warning("Add rolled back id=%s: %s", task.id, saved.error)
            return StoreResult.persistence_failed(saved)

        logger.debug("Task added id=%s priority=%s category=%s", task.id, task.priority, task.category)
        return StoreResult.ok(task)

    def update(
        self,
        task_id: str,
        title: Any,
        description: Any,
        priority: Any,
        category: Any,
    ) -> StoreResult:
        validation = validate_task(title, description, priority, category)
        if not validation.valid:
            return StoreResult.invalid(validation.errors)

        task = self.get(task_id)
        if task is None:
            return StoreResult.not_found()

        before = task.snapshot()
        task.apply_update(title, description or "", priority, category, now=self._clock())

        saved = self._persist()
        if not saved.success:
            task.restore(before)
            logger.warning("Update rolled back id=%s: %s", task_id, saved.error)
            return StoreResult.persistence_failed(saved)

        if self._edit_target == task_id:
            self._edit_target = None
        logger.debug("Task updated id=%s priority=%s", task_id, task.priority)
        return StoreResult.ok(task)

    def delete(self, task_id: str) -> StoreResult:
        i = self._index_of(task_id)
        if i < 0:
            return StoreResult.not_found()

        task = self._tasks.pop(i)

        saved = self._persist()
        if not saved.success:
            self._tasks.insert(i, task)
            logger.warning("Delete rolled back id=%s: %s", task_id, saved.error)
            return StoreResult.persistence_failed(saved)

        if self._edit_target == task_id:
            self._edit_target = None
        logger.debug("Task deleted id=%s", task_id)
        return StoreResult.ok(task)

    def toggle_completion(self, task_id: str) -> StoreResult:
        task = self.get(task_id)
        if task is None:
            return StoreResult.not_found()

        before = task.snapshot()
        task.set_completed(not task.completed, now=self._clock())

        saved = self._persist()
        if not saved.success:
            task.restore(before)
            logger.warning("Toggle rolled back id=%s: %s", task_id, saved.error)
            return StoreResult.persistence_failed(saved)

        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        return StoreResult.ok(task)

    # ---- loading / bootstrap ----

    def load(self) -> int:
        """
        Replace the collection with the persisted one.

        Absent or corrupt data yields an empty collection. Entries that cannot be
        rebuilt are skipped. Returns the number of tasks loaded.
        """
        raw = self._storage.load(self._tasks_key)
        self._tasks = []
        self._edit_target = None

        if raw is None:
            logger.info("No persisted tasks under key=%s", self._tasks_key)
            return 0
        if not isinstance(raw, list):
            logger.warning("Persisted tasks under key=%s is not a list; ignoring.", self._tasks_key)
            return 0

        seen: set[str] = set()
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning("Skipping non-object task entry: %r", entry)
                continue
            try:
                task = Task.from_dict(entry)
            except (KeyError, ValueError, TypeError):
                logger.warning("Skipping unreadable task entry id=%r", entry.get("id"), exc_info=True)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            self._tasks.append(task)

        logger.info("Loaded %d tasks from key=%s", len(self._tasks), self._tasks_key)
        return len(self._tasks)

    def ensure_welcome_task(self) -> StoreResult | None:
        """Seed the welcome task through the normal add path when the collection is empty."""
        if self._tasks:
            return None
        result = self.add(WELCOME_TITLE, WELCOME_DESCRIPTION, "medium", "personal")
        if not result.success:
            logger.warning("Failed to seed welcome task: %s", result.error or result.errors)
        return result
