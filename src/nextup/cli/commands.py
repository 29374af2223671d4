# src/nextup/cli/commands.py

from __future__ import annotations

from collections.abc import Callable

from ..core.state import AppState
from ..errors import InvalidTask
from ..tasks import task_api
from ..tasks.ranking import score
from ..tasks.task_models import QueryContext, Task

CommandHandler = Callable[[AppState, list[str]], str]


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _int_arg(args: list[str], idx: int) -> int:
    try:
        return int(args[idx])
    except (IndexError, ValueError):
        return 0


def _context(args: list[str]) -> QueryContext:
    return QueryContext.build(free_minutes=_int_arg(args, 0), stress_level=_int_arg(args, 1))


def _describe(task: Task, ctx: QueryContext) -> str:
    due = f" due {task.due_at}" if task.due_at else ""
    title = task.title or "(untitled)"
    return (
        f"[{score(task, ctx):.3f}] {task.id}: {title} "
        f"({task.minutes_needed} min, imp {task.importance}, {task.emotion or '-'}{due})"
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Tasks: {state.task_store.count()}\n"
        f"  Data file: {state.persistence.path}\n"
        f"  Save interval: {getattr(settings, 'save_interval_seconds', 30.0)}s"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <id> <minutes> <importance> <emotion> [dueAt|-] [title...]
    """
    if len(args) < 4:
        return "Usage: /add <id> <minutes> <importance> <PLEASANT|NEUTRAL|AVERSIVE> [dueAt|-] [title...]"

    try:
        minutes = int(args[1])
        importance = int(args[2])
    except ValueError:
        return "minutes and importance must be integers."

    due_at: str | None = None
    title_parts = args[4:]
    if title_parts:
        due_at = None if title_parts[0] == "-" else title_parts[0]
        title_parts = title_parts[1:]

    task = Task(
        id=args[0],
        title=" ".join(title_parts),
        emotion=args[3].upper(),
        minutes_needed=minutes,
        importance=importance,
        due_at=due_at,
    )
    try:
        result = task_api.upsert_task(state, task)
    except InvalidTask as e:
        return f"Rejected: {e}"
    return f"Saved {task.id}. Tasks: {result.count}"


def cmd_del(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id>"
    result = task_api.delete_task(state, args[0])
    return f"Deleted {args[0]} (if it existed). Tasks: {result.count}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [freeMin] [stress]
    """
    ctx = _context(args)
    ranked = task_api.list_tasks(state, ctx)
    if not ranked:
        return "No tasks."
    lines = [f"Tasks for {ctx.free_minutes} free min, stress {ctx.stress_level}:"]
    for i, t in enumerate(ranked, start=1):
        lines.append(f"{i}. {_describe(t, ctx)}")
    return "\n".join(lines)


def cmd_next(state: AppState, args: list[str]) -> str:
    ctx = _context(args)
    best = task_api.next_task(state, ctx)
    if best is None:
        return "Nothing to do: no tasks stored."
    return "Next: " + _describe(best, ctx)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count and persistence settings.")
registry.register(
    "add",
    cmd_add,
    help_text="Add/replace a task: /add <id> <minutes> <importance> <emotion> [dueAt|-] [title...]",
)
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("list", cmd_list, help_text="Ranked tasks: /list [freeMin] [stress].", aliases=["order"])
registry.register("next", cmd_next, help_text="Best task now: /next [freeMin] [stress].")
