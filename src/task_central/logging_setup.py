# src/task_central/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER_PREFIX = "task_central."

# Per-save/per-load debug lines; file-only unless they report a problem.
QUIET_LOGGER_PREFIXES = ("task_central.storage.",)

LOG_FILE_NAME = "task_central.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the task console readable: app logs pass, storage chatter only at
    WARNING+, Python warnings and third-party noise only at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(APP_LOGGER_PREFIX):
            if name.startswith(QUIET_LOGGER_PREFIXES):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_central",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
