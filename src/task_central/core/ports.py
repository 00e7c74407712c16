# src/task_central/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and theme preference depend on a Protocol instead of a concrete
storage backend. This keeps the durable store swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class SaveResult:
    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> SaveResult:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> SaveResult:
        return cls(success=False, error=error)


class KeyValueStorage(Protocol):
    """
    Durable local key-value store.

    Contract:
    - save/remove never raise; failures come back as SaveResult(success=False, error=...)
    - load returns the deserialized value, or None if the key is absent or the data is corrupt
    """

    def save(self, key: str, value: Any) -> SaveResult: ...
    def load(self, key: str) -> Any | None: ...
    def remove(self, key: str) -> SaveResult: ...
