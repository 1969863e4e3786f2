# src/tasksync/tasks/task_api.py

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from .task_models import Priority, Subtask, Task, parse_timestamp
from .task_store import TaskStore

_PRIORITY_ALIASES = {
    "low": Priority.LOW,
    "l": Priority.LOW,
    "med": Priority.MEDIUM,
    "medium": Priority.MEDIUM,
    "m": Priority.MEDIUM,
    "high": Priority.HIGH,
    "h": Priority.HIGH,
}


def parse_quick_add(text: str) -> dict[str, Any]:
    """
    Parse "/add" arguments into task fields.

    "Buy milk !high #errands due:2025-03-01" ->
        {"title": "Buy milk", "priority": Priority.HIGH,
         "category": "errands", "due_date": datetime(2025, 3, 1, tzinfo=UTC)}
    """
    fields: dict[str, Any] = {}
    words: list[str] = []

    for token in text.split():
        low = token.lower()
        if low.startswith("!") and low[1:] in _PRIORITY_ALIASES:
            fields["priority"] = _PRIORITY_ALIASES[low[1:]]
        elif token.startswith("#") and len(token) > 1:
            fields["category"] = token[1:]
        elif low.startswith("due:"):
            try:
                due = parse_timestamp(token[4:])
            except ValueError as e:
                raise ValueError(f"Bad due date: {token[4:]!r} (expected YYYY-MM-DD)") from e
            if due is None:
                raise ValueError("Empty due date")
            fields["due_date"] = due
        else:
            words.append(token)

    title = " ".join(words).strip()
    if not title:
        raise ValueError("title is required")
    fields["title"] = title
    return fields


def resolve_id(prefix: str, ids: Iterable[str]) -> str | None:
    """
    Resolve an exact id or a unique id prefix.

    Returns None if nothing matches; raises ValueError if the prefix is ambiguous.
    """
    prefix = prefix.strip()
    if not prefix:
        return None
    candidates = [i for i in ids if i.startswith(prefix)]
    if prefix in candidates:
        return prefix
    if len(candidates) > 1:
        raise ValueError(f"Ambiguous id prefix {prefix!r} ({len(candidates)} matches)")
    return candidates[0] if candidates else None


def resolve_task_id(store: TaskStore, prefix: str) -> str | None:
    return resolve_id(prefix, (t.id for t in store.tasks))


async def add_subtask(store: TaskStore, task_id: str, title: str) -> Task | None:
    """Append a new open subtask; no-op if the task is not loaded."""
    task = store.get(task_id)
    if task is None:
        return None
    if not title or not title.strip():
        raise ValueError("subtask title is required")
    subtask = Subtask(id=uuid.uuid4().hex, title=title.strip())
    return await store.update(task_id, {"subtasks": [*task.subtasks, subtask]})


def format_task_line(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    parts = [f"{box} {task.id[:8]} {task.title}"]
    if task.priority is not Priority.MEDIUM:
        parts.append(f"!{task.priority.value}")
    if task.category:
        parts.append(f"#{task.category}")
    if task.due_date is not None:
        parts.append(f"due {task.due_date.date().isoformat()}")
    if task.recurring is not None:
        every = "" if task.recurring.interval == 1 else f" x{task.recurring.interval}"
        parts.append(f"({task.recurring.frequency.value}{every})")
    if task.subtasks:
        done = sum(1 for s in task.subtasks if s.completed)
        parts.append(f"{done}/{len(task.subtasks)}")
    return " ".join(parts)


def format_subtask_lines(task: Task) -> list[str]:
    return [
        f"    {'[x]' if s.completed else '[ ]'} {s.id[:8]} {s.title}".rstrip()
        for s in task.subtasks
    ]
