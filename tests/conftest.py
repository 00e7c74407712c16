# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_central.cli.bootstrap import create_initial_state
from task_central.core.actions import TaskActions
from task_central.core.state import AppState
from task_central.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TASK CENTRAL",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        tasks_key="taskManagerTasks",
        theme_key="taskManagerTheme",
        seed_welcome_task=True,
    )


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(storage: FakeStorage, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, clock=clock)


@pytest.fixture()
def actions(store: TaskStore) -> TaskActions:
    return TaskActions(store)


@pytest.fixture()
def state(settings: SimpleNamespace, storage: FakeStorage) -> AppState:
    """AppState wired with the in-memory storage fake (no welcome task, empty collection)."""
    return create_initial_state(settings=settings, storage=storage)
