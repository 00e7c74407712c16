# src/task_central/core/actions.py

from __future__ import annotations

"""
Action dispatch: the boundary between a presentation layer and the TaskStore.

It decides:
- add vs update (is an edit target active?)
- which single notification an action produces (success / warning / error)
- whether a submit is rejected because another one is still in flight

It does not render anything; connectors print or display the Notification.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..tasks.task_models import Priority
from ..tasks.task_store import ErrorKind, StoreResult, TaskStore

logger = logging.getLogger(__name__)


class NotificationKind(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    message: str


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    result: StoreResult | None
    notification: Notification | None
    escalated: bool = False
    ignored: bool = False

    @property
    def success(self) -> bool:
        return self.result is not None and self.result.success

    @classmethod
    def rejected(cls) -> ActionOutcome:
        return cls(result=None, notification=None, ignored=True)


def _error_text(result: StoreResult) -> str:
    if result.kind is ErrorKind.VALIDATION:
        return "; ".join(result.errors.values()) or "Invalid task"
    return result.error or "Something went wrong"


def _failure(result: StoreResult) -> ActionOutcome:
    return ActionOutcome(
        result=result,
        notification=Notification(NotificationKind.ERROR, _error_text(result)),
    )


class TaskActions:
    """User-action entrypoints with a submit lock against overlapping submits."""

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self._submitting = False

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def editing(self) -> str | None:
        return self.store.edit_target

    def submit(self, title: Any, description: Any, priority: Any, category: Any) -> ActionOutcome:
        if self._submitting:
            logger.debug("Submit ignored: another submit is in flight.")
            return ActionOutcome.rejected()

        self._submitting = True
        try:
            edit_id = self.store.edit_target
            if edit_id is not None:
                return self._update(edit_id, title, description, priority, category)
            return self._add(title, description, priority, category)
        finally:
            self._submitting = False

    def _add(self, title: Any, description: Any, priority: Any, category: Any) -> ActionOutcome:
        result = self.store.add(title, description, priority, category)
        if not result.success or result.task is None:
            return _failure(result)

        task = result.task
        if task.priority is Priority.HIGH:
            note = Notification(NotificationKind.WARNING, f'High priority task "{task.title}" added!')
            return ActionOutcome(result=result, notification=note, escalated=True)
        return ActionOutcome(
            result=result,
            notification=Notification(NotificationKind.SUCCESS, "Task added successfully!"),
        )

    def _update(
        self,
        task_id: str,
        title: Any,
        description: Any,
        priority: Any,
        category: Any,
    ) -> ActionOutcome:
        existing = self.store.get(task_id)
        was_high = existing is not None and existing.priority is Priority.HIGH

        result = self.store.update(task_id, title, description, priority, category)
        if not result.success or result.task is None:
            return _failure(result)

        task = result.task
        if task.priority is Priority.HIGH and not was_high:
            note = Notification(
                NotificationKind.WARNING, f'Task "{task.title}" updated to high priority!'
            )
            return ActionOutcome(result=result, notification=note, escalated=True)
        return ActionOutcome(
            result=result,
            notification=Notification(NotificationKind.SUCCESS, "Task updated successfully!"),
        )

    def toggle(self, task_id: str) -> ActionOutcome:
        result = self.store.toggle_completion(task_id)
        if not result.success or result.task is None:
            return _failure(result)

        task = result.task
        if task.completed:
            msg = f'Task "{task.title}" completed!'
        else:
            msg = f'Task "{task.title}" marked incomplete'
        return ActionOutcome(result=result, notification=Notification(NotificationKind.SUCCESS, msg))

    def delete(self, task_id: str) -> ActionOutcome:
        result = self.store.delete(task_id)
        if not result.success or result.task is None:
            return _failure(result)
        return ActionOutcome(
            result=result,
            notification=Notification(
                NotificationKind.SUCCESS, f'Task "{result.task.title}" deleted!'
            ),
        )

    def begin_edit(self, task_id: str) -> ActionOutcome:
        if not self.store.begin_edit(task_id):
            return _failure(StoreResult.not_found())
        return ActionOutcome(result=StoreResult.ok(self.store.get(task_id)), notification=None)

    def cancel_edit(self) -> None:
        self.store.cancel_edit()
