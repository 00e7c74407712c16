# tests/test_actions.py

from __future__ import annotations

from task_central.core.actions import NotificationKind, TaskActions
from task_central.tasks.task_store import ErrorKind

from .fakes import FakeStorage


def test_submit_adds_when_not_editing(actions: TaskActions) -> None:
    out = actions.submit("Plan trip", "", "medium", "personal")
    assert out.success
    assert out.notification is not None
    assert out.notification.kind is NotificationKind.SUCCESS
    assert out.notification.message == "Task added successfully!"
    assert out.escalated is False
    assert len(actions.store) == 1


def test_submit_high_priority_add_is_a_warning(actions: TaskActions) -> None:
    out = actions.submit("Pay taxes", "", "high", "urgent")
    assert out.success
    assert out.escalated is True
    assert out.notification is not None
    assert out.notification.kind is NotificationKind.WARNING
    assert out.notification.message == 'High priority task "Pay taxes" added!'


def test_submit_updates_edit_target(actions: TaskActions) -> None:
    task = actions.submit("Plan trip", "", "low", "personal").result.task
    assert task is not None
    actions.begin_edit(task.id)

    out = actions.submit("Plan big trip", "Japan", "medium", "personal")
    assert out.success
    assert out.notification is not None
    assert out.notification.message == "Task updated successfully!"
    assert len(actions.store) == 1
    assert task.title == "Plan big trip"
    assert actions.editing is None


def test_update_to_high_priority_is_escalation(actions: TaskActions) -> None:
    task = actions.submit("Plan trip", "", "low", "personal").result.task
    assert task is not None

    actions.begin_edit(task.id)
    out = actions.submit("Plan trip", "", "high", "personal")
    assert out.escalated is True
    assert out.notification is not None
    assert out.notification.kind is NotificationKind.WARNING
    assert out.notification.message == 'Task "Plan trip" updated to high priority!'

    # already high: plain success, no escalation
    actions.begin_edit(task.id)
    again = actions.submit("Plan trip!", "", "high", "personal")
    assert again.escalated is False
    assert again.notification is not None
    assert again.notification.kind is NotificationKind.SUCCESS


def test_validation_failure_is_error_notification(actions: TaskActions) -> None:
    out = actions.submit("Hi", "", "", "work")
    assert not out.success
    assert out.result is not None
    assert out.result.kind is ErrorKind.VALIDATION
    assert out.notification is not None
    assert out.notification.kind is NotificationKind.ERROR
    assert "Title must be 3-100 chars" in out.notification.message
    assert "Please select a valid priority" in out.notification.message
    assert len(actions.store) == 0


def test_persistence_failure_is_error_notification(
    actions: TaskActions, storage: FakeStorage
) -> None:
    storage.fail_saves = True
    out = actions.submit("Plan trip", "", "low", "personal")
    assert not out.success
    assert out.notification is not None
    assert out.notification.kind is NotificationKind.ERROR
    assert out.notification.message == "Storage error"
    assert len(actions.store) == 0


def test_reentrant_submit_is_ignored(actions: TaskActions, storage: FakeStorage) -> None:
    nested = []

    def double_click() -> None:
        storage.on_save = None
        nested.append(actions.submit("Plan trip", "", "low", "personal"))

    storage.on_save = double_click
    out = actions.submit("Plan trip", "", "low", "personal")

    assert out.success
    assert len(nested) == 1
    assert nested[0].ignored is True
    assert nested[0].notification is None
    assert len(actions.store) == 1
    # lock is released afterwards
    assert actions.submitting is False
    assert actions.submit("Another trip", "", "low", "personal").success


def test_toggle_notifications(actions: TaskActions) -> None:
    task = actions.submit("Call mom", "", "medium", "personal").result.task
    assert task is not None

    done = actions.toggle(task.id)
    assert done.notification is not None
    assert done.notification.kind is NotificationKind.SUCCESS
    assert done.notification.message == 'Task "Call mom" completed!'

    undone = actions.toggle(task.id)
    assert undone.notification is not None
    assert undone.notification.message == 'Task "Call mom" marked incomplete'


def test_delete_and_not_found(actions: TaskActions) -> None:
    task = actions.submit("Call mom", "", "medium", "personal").result.task
    assert task is not None

    out = actions.delete(task.id)
    assert out.success
    assert out.notification is not None
    assert out.notification.message == 'Task "Call mom" deleted!'

    missing = actions.delete(task.id)
    assert missing.notification is not None
    assert missing.notification.kind is NotificationKind.ERROR
    assert missing.notification.message == "Task not found"

    assert actions.toggle("nope").result.kind is ErrorKind.NOT_FOUND


def test_begin_edit_unknown_id(actions: TaskActions) -> None:
    out = actions.begin_edit("nope")
    assert not out.success
    assert out.notification is not None
    assert out.notification.message == "Task not found"
    assert actions.editing is None

