# src/tasksync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task store and the console.

The store depends on Protocols instead of the HTTP gateway directly.
This keeps the backend swappable and makes testing easier.
"""

from typing import Any, Mapping, Protocol

from ..tasks.task_models import Task, TaskList


class TaskGateway(Protocol):
    """Remote task operations. Reads return [] on failure; writes raise."""

    async def fetch_tasks(self, user_id: str) -> list[Task]: ...
    async def create_task(self, fields: Mapping[str, Any]) -> Task: ...
    async def update_task(self, task_id: str, updates: Mapping[str, Any]) -> Task: ...
    async def delete_task(self, task_id: str) -> None: ...


class ListGateway(Protocol):
    async def fetch_lists(self, user_id: str) -> list[TaskList]: ...
    async def create_list(self, *, name: str, color: str, user_id: str) -> TaskList: ...


class BackendProbe(Protocol):
    async def check_tables(self) -> dict[str, bool]: ...
