# src/task_central/core/text.py

from __future__ import annotations

"""
Small text helpers shared by the task entity and the store.

Sanitization happens at write time (angle brackets are stripped before a value
is stored). Escaping for display is a separate concern of whatever renders tasks.
"""

import secrets
import time
from collections.abc import Container
from typing import Any

MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_ID_SUFFIX_LEN = 10
_STRIP_MARKUP = str.maketrans("", "", "<>")


def sanitize(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    return text.strip().translate(_STRIP_MARKUP)


def validate_length(text: Any, min_len: int, max_len: int) -> bool:
    """True iff the trimmed length of `text` is within [min_len, max_len]."""
    if not isinstance(text, str):
        return False
    return min_len <= len(text.strip()) <= max_len


def validate_enum(value: Any, allowed: Container[Any]) -> bool:
    try:
        return value in allowed
    except TypeError:
        # unhashable value against a set/dict
        return False


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_id() -> str:
    """
    Process-unique id: base36 millisecond timestamp + random base36 suffix.

    No global uniqueness is promised, only uniqueness within one collection's lifetime.
    """
    prefix = _to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_ID_SUFFIX_LEN))
    return prefix + suffix
