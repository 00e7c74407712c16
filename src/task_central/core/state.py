# src/task_central/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace

from ..config import Settings
from ..tasks.task_store import TaskStore
from .actions import TaskActions
from .ports import KeyValueStorage
from .theme import ThemePreference


@dataclass
class AppState:
    # SimpleNamespace stands in for Settings in tests.
    settings: Settings | SimpleNamespace

    storage: KeyValueStorage
    actions: TaskActions
    theme: ThemePreference

    @property
    def store(self) -> TaskStore:
        return self.actions.store
