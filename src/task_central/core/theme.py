# src/task_central/core/theme.py

from __future__ import annotations

import logging
from enum import StrEnum

from .ports import KeyValueStorage, SaveResult

logger = logging.getLogger(__name__)

DEFAULT_THEME_KEY = "taskManagerTheme"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_stored(cls, raw: object) -> Theme:
        if not isinstance(raw, str):
            return cls.LIGHT
        try:
            return cls(raw)
        except ValueError:
            return cls.LIGHT


class ThemePreference:
    """Persisted light/dark preference. How a theme looks is up to the presentation layer."""

    def __init__(self, storage: KeyValueStorage, *, key: str = DEFAULT_THEME_KEY) -> None:
        self._storage = storage
        self._key = key
        self._current = Theme.LIGHT

    @property
    def current(self) -> Theme:
        return self._current

    def load(self) -> Theme:
        self._current = Theme.from_stored(self._storage.load(self._key))
        return self._current

    def toggle(self) -> tuple[Theme, SaveResult]:
        target = Theme.DARK if self._current is Theme.LIGHT else Theme.LIGHT
        saved = self._storage.save(self._key, target.value)
        if saved.success:
            self._current = target
        else:
            logger.warning("Theme change to %s not saved: %s", target, saved.error)
        return self._current, saved
