# src/task_central/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Everything local: the durable store lives under data_dir.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASK_CENTRAL"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_db_path: Path

    # ---- Persisted record keys ----
    tasks_key: str
    theme_key: str

    # ---- Behaviour ----
    seed_welcome_task: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TASK CENTRAL").strip() or "TASK CENTRAL"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_central"))
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3")

        tasks_key = _env(_k("TASKS_KEY"), "taskManagerTasks").strip() or "taskManagerTasks"
        theme_key = _env(_k("THEME_KEY"), "taskManagerTheme").strip() or "taskManagerTheme"

        seed_welcome_task = _env_bool(_k("SEED_WELCOME_TASK"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_db_path=storage_db_path,
            tasks_key=tasks_key,
            theme_key=theme_key,
            seed_welcome_task=seed_welcome_task,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
