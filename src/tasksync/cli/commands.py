# src/tasksync/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.task_api import (
    add_subtask,
    format_subtask_lines,
    format_task_line,
    parse_quick_add,
    resolve_id,
    resolve_task_id,
)
from ..tasks.task_gateway import GatewayError

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

DEFAULT_LIST_COLOR = "#3b82f6"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Gateway failures and bad input become reply text.
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

        try:
            return await handler(state, args, emit)
        except GatewayError as e:
            logger.info("Command /%s failed: %s", name, e)
            return f"Backend error: {e.message}"
        except ValueError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _require_task(state: AppState, prefix: str) -> str:
    task_id = resolve_task_id(state.task_store, prefix)
    if task_id is None:
        raise ValueError(f"No loaded task matches {prefix!r}. Use /list or /load.")
    return task_id


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.task_store
    if emit is not None:
        emit("Checking backend tables...")
    tables = await state.probe.check_tables()
    table_str = ", ".join(f"{name}={'ok' if ok else 'MISSING'}" for name, ok in tables.items())
    return (
        "Status:\n"
        f"  User: {store.user_id or '(none)'}\n"
        f"  Tasks loaded: {len(store.tasks)}{' (loading)' if store.loading else ''}\n"
        f"  Last error: {store.error or '-'}\n"
        f"  Tables: {table_str}"
    )


async def cmd_load(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /load          -> reload tasks of the current user
    /load <user>   -> switch user and load their tasks
    """
    user_id = args[0] if args else state.task_store.user_id
    if not user_id:
        return "No user configured. Set TASKSYNC_USER_ID or use /load <user_id>."
    if emit is not None:
        emit(f"Loading tasks for {user_id}...")
    await state.task_store.load(user_id)
    if state.task_store.error:
        return state.task_store.error
    return f"Loaded {len(state.task_store.tasks)} task(s)."


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list        -> all loaded tasks (newest first)
    /list open   -> only open tasks
    /list done   -> only completed tasks
    """
    tasks = state.task_store.tasks
    mode = args[0].lower() if args else "all"
    if mode == "open":
        tasks = [t for t in tasks if not t.completed]
    elif mode == "done":
        tasks = [t for t in tasks if t.completed]
    elif mode != "all":
        return "Usage: /list [open|done]"

    if not tasks:
        return "No tasks."
    lines: list[str] = []
    for t in tasks:
        lines.append(format_task_line(t))
        lines.extend(format_subtask_lines(t))
    return "\n".join(lines)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.task_store.user_id:
        return "No user loaded. Use /load <user_id> first."
    fields = parse_quick_add(" ".join(args))
    task = await state.task_store.add(fields)
    return f"Added: {format_task_line(task)}" if task else "Nothing added."


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <task id>"
    task = await state.task_store.toggle_completion(_require_task(state, args[0]))
    return format_task_line(task) if task else "Nothing changed."


async def cmd_sub(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /sub <task id> <subtask id>"
    task_id = _require_task(state, args[0])
    task = state.task_store.get(task_id)
    subtask_id = resolve_id(args[1], (s.id for s in task.subtasks)) if task else None
    if subtask_id is None:
        return f"No subtask matches {args[1]!r}."
    updated = await state.task_store.toggle_subtask_completion(task_id, subtask_id)
    if updated is None:
        return "Nothing changed."
    return "\n".join([format_task_line(updated), *format_subtask_lines(updated)])


async def cmd_subadd(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /subadd <task id> <title>"
    updated = await add_subtask(state.task_store, _require_task(state, args[0]), " ".join(args[1:]))
    if updated is None:
        return "Nothing changed."
    return "\n".join([format_task_line(updated), *format_subtask_lines(updated)])


async def cmd_rename(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /rename <task id> <new title>"
    task_id = _require_task(state, args[0])
    task = await state.task_store.update(task_id, {"title": " ".join(args[1:])})
    return format_task_line(task) if task else "Nothing changed."


async def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /rm <task id>"
    task_id = _require_task(state, args[0])
    await state.task_store.remove(task_id)
    return f"Deleted {task_id[:8]}."


async def cmd_lists(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.user_id:
        return "No user loaded. Use /load <user_id> first."
    lists = await state.lists.fetch_lists(state.user_id)
    if not lists:
        return "No lists."
    return "\n".join(f"{tl.id[:8]} {tl.name} ({tl.color})" for tl in lists)


async def cmd_newlist(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /newlist <name>           -> default color
    /newlist <name> #rrggbb   -> explicit color (last word starting with "#")
    """
    if not state.user_id:
        return "No user loaded. Use /load <user_id> first."
    if not args:
        return "Usage: /newlist <name> [color]"
    if len(args) > 1 and args[-1].startswith("#"):
        name, color = " ".join(args[:-1]), args[-1]
    else:
        name, color = " ".join(args), DEFAULT_LIST_COLOR
    tl = await state.lists.create_list(name=name, color=color, user_id=state.user_id)
    return f"List created: {tl.id[:8]} {tl.name} ({tl.color})"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show user, loaded tasks and backend tables.")
registry.register("load", cmd_load, help_text="Reload tasks: /load [user_id].", aliases=["refresh"])
registry.register("list", cmd_list, help_text="List tasks: /list [open|done].", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [!low|!high] [#category] [due:YYYY-MM-DD]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <task id>.")
registry.register("sub", cmd_sub, help_text="Toggle a subtask: /sub <task id> <subtask id>.")
registry.register("subadd", cmd_subadd, help_text="Add a subtask: /subadd <task id> <title>.")
registry.register("rename", cmd_rename, help_text="Rename a task: /rename <task id> <title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <task id>.", aliases=["del"])
registry.register("lists", cmd_lists, help_text="Show your task lists.")
registry.register("newlist", cmd_newlist, help_text="Create a list: /newlist <name> [color].")
