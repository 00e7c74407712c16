# src/task_central/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the durable store into TaskStore / ThemePreference / TaskActions,
- loads persisted state and applies the welcome-task rule.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

from ..config import Settings, get_settings
from ..core.actions import TaskActions
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..core.theme import ThemePreference
from ..storage.kv_store import SqliteKeyValueStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings | SimpleNamespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings: Settings | SimpleNamespace | None = None,
    storage: KeyValueStorage | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and storage) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = SqliteKeyValueStorage(settings.storage_db_path)

    store = TaskStore(storage, tasks_key=settings.tasks_key)
    return AppState(
        settings=settings,
        storage=storage,
        actions=TaskActions(store),
        theme=ThemePreference(storage, key=settings.theme_key),
    )


def load_persisted_state(state: AppState) -> None:
    """Load tasks and theme; seed the welcome task into an empty collection if enabled."""
    loaded = state.store.load()
    if loaded == 0 and getattr(state.settings, "seed_welcome_task", True):
        result = state.store.ensure_welcome_task()
        if result is not None and result.success:
            logger.info("Seeded welcome task id=%s", result.task.id if result.task else None)

    theme = state.theme.load()
    logger.info("State loaded: tasks=%d theme=%s", len(state.store), theme)
