# src/task_central/cli/commands.py

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Callable

from ..core.actions import ActionOutcome
from ..core.state import AppState
from ..tasks.task_models import Category, Priority, Task
from ..tasks.task_store import ErrorKind, TaskStats

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, str, CommandEmitter | None], str]

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name.lower())
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, rest.strip(), emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- display helpers ----


def safe_text(text: str) -> str:
    """Escape for terminal output: drop control characters (ANSI escapes, bells, ...)."""
    return "".join(
        ch if ch in ("\n", "\t") or unicodedata.category(ch)[0] != "C" else "" for ch in text
    )


def format_count(stats: TaskStats) -> str:
    text = f"{stats.total} task{'s' if stats.total != 1 else ''}"
    if stats.completed > 0:
        text += f" ({stats.completed} completed)"
    if stats.shown != stats.total:
        text = f"{stats.shown} of {text} shown"
    return text


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = (
        f"[{mark}] {task.id}  {task.priority.value.upper():<6} "
        f"{task.category.value.upper():<8} {safe_text(task.title)}"
    )
    if task.description:
        line += f"\n      {safe_text(task.description)}"
    return line


def format_outcome(outcome: ActionOutcome) -> str:
    if outcome.ignored:
        return "Still saving the previous submission; try again."

    lines: list[str] = []
    if outcome.notification is not None:
        note = outcome.notification
        lines.append(f"[{note.kind.value.upper()}] {safe_text(note.message)}")

    result = outcome.result
    if result is not None and result.kind is ErrorKind.VALIDATION:
        for field_name, message in result.errors.items():
            lines.append(f"  {field_name}: {message}")
    return "\n".join(lines)


def parse_fields(arg_text: str) -> tuple[str, str, str, str]:
    """'title | description | priority | category' -> 4 raw strings (missing ones empty)."""
    parts = [p.strip() for p in arg_text.split(FIELD_SEPARATOR)]
    parts += [""] * (4 - len(parts))
    if len(parts) > 4:
        # extra separators belong to the description
        parts = [parts[0], f" {FIELD_SEPARATOR} ".join(parts[1:-2]), parts[-2], parts[-1]]
    title, description, priority, category = parts
    return title, description, priority.lower(), category.lower()


def parse_list_args(arg_text: str) -> tuple[str, str, str]:
    """'[search words] [category:<c>] [priority:<p>]' -> (search, category, priority)."""
    search: list[str] = []
    category = ""
    priority = ""
    for token in arg_text.split():
        key, sep, value = token.partition(":")
        if sep and key.lower() in ("category", "cat"):
            category = value.lower()
        elif sep and key.lower() in ("priority", "pri"):
            priority = value.lower()
        else:
            search.append(token)
    return " ".join(search), category, priority


# ---- handlers ----


def cmd_help(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    store = state.store
    editing = store.edit_target or "none"
    return (
        "Status:\n"
        f"  Tasks: {format_count(store.stats())}\n"
        f"  Editing: {editing}\n"
        f"  Theme: {state.theme.current.value}"
    )


def cmd_add(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    if state.store.edit_target is not None:
        return "An edit is in progress. Use /save to apply it or /cancel to discard it."
    return format_outcome(state.actions.submit(*parse_fields(arg_text)))


def cmd_edit(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    task_id = arg_text.strip()
    if not task_id:
        return "Usage: /edit <id>"
    outcome = state.actions.begin_edit(task_id)
    task = outcome.result.task if outcome.result is not None else None
    if not outcome.success or task is None:
        return format_outcome(outcome)
    return (
        f"Editing {task.id}. Current values:\n"
        f"  {safe_text(task.title)} | {safe_text(task.description)} | "
        f"{task.priority.value} | {task.category.value}\n"
        "Use /save title | description | priority | category, or /cancel."
    )


def cmd_save(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    if state.store.edit_target is None:
        return "Nothing is being edited. Use /edit <id> first."
    return format_outcome(state.actions.submit(*parse_fields(arg_text)))


def cmd_cancel(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    if state.store.edit_target is None:
        return "Nothing is being edited."
    state.actions.cancel_edit()
    return "Edit cancelled."


def cmd_done(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    task_id = arg_text.strip()
    if not task_id:
        return "Usage: /done <id>"
    return format_outcome(state.actions.toggle(task_id))


def cmd_delete(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    task_id = arg_text.strip()
    if not task_id:
        return "Usage: /delete <id>"
    return format_outcome(state.actions.delete(task_id))


def cmd_list(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    search, category, priority = parse_list_args(arg_text)
    if category and category not in {c.value for c in Category}:
        return f"Unknown category: {category}. Use one of: personal, work, urgent."
    if priority and priority not in {p.value for p in Priority}:
        return f"Unknown priority: {priority}. Use one of: low, medium, high."

    tasks = state.store.query(search, category, priority)
    header = format_count(state.store.stats(shown=len(tasks)))
    if not tasks:
        return f"{header}\nNo tasks found."
    return "\n".join([header, *(format_task(t) for t in tasks)])


def cmd_theme(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    """
    /theme         -> show current theme
    /theme toggle  -> switch light <-> dark
    """
    arg = arg_text.strip().lower()
    if not arg:
        return f"Theme is {state.theme.current.value}. Use /theme toggle to switch."
    if arg != "toggle":
        return "Usage: /theme toggle"

    theme, saved = state.theme.toggle()
    if not saved.success:
        return f"[ERROR] {saved.error}"
    logger.debug("Theme switched to %s", theme)
    return f"Theme switched to {theme.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts, edit mode and theme.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add title | description | priority | category."
)
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <id>.")
registry.register(
    "save", cmd_save, help_text="Apply the edit: /save title | description | priority | category."
)
registry.register("cancel", cmd_cancel, help_text="Discard the current edit.")
registry.register(
    "done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"]
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [search] [category:<c>] [priority:<p>].",
    aliases=["ls"],
)
registry.register("theme", cmd_theme, help_text="Show or toggle the theme: /theme [toggle].")
