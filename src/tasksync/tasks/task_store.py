# src/tasksync/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from ..core.ports import TaskGateway
from .task_models import Task

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load tasks. Please try again later."
ADD_ERROR = "Failed to add task. Please try again."
UPDATE_ERROR = "Failed to update task. Please try again."
DELETE_ERROR = "Failed to delete task. Please try again."


class TaskStore:
    """
    Client-side task state for one user, synchronized through a TaskGateway.

    State:
    - tasks: newest first
    - loading: True until the first load() finishes
    - error: user-facing message of the last failed operation (None on success)

    Local state is reassigned only after the gateway call returns, and each
    completion touches only its own task id, so overlapping calls resolve as
    last-response-wins. Nothing is retried.
    """

    def __init__(self, gateway: TaskGateway, *, user_id: str | None = None) -> None:
        self._gateway = gateway
        self.user_id = user_id
        self.tasks: list[Task] = []
        self.loading = True
        self.error: str | None = None

    def get(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    async def load(self, user_id: str | None) -> None:
        """Replace local state with the user's tasks. Never raises."""
        self.user_id = user_id or None
        self.error = None
        if not self.user_id:
            self.loading = False
            return

        try:
            self.tasks = list(await self._gateway.fetch_tasks(self.user_id))
            logger.info("Loaded %d task(s) user=%s", len(self.tasks), self.user_id)
        except Exception:
            logger.exception("Error fetching tasks user=%s", self.user_id)
            self.tasks = []
            self.error = LOAD_ERROR
        finally:
            self.loading = False

    async def add(self, fields: Mapping[str, Any]) -> Task | None:
        if not self.user_id:
            return None

        try:
            self.error = None
            task = await self._gateway.create_task(
                {**fields, "user_id": self.user_id, "completed": False}
            )
        except Exception:
            logger.exception("Error adding task")
            self.error = ADD_ERROR
            raise

        self.tasks = [task, *self.tasks]
        return task

    async def update(self, task_id: str, updates: Mapping[str, Any]) -> Task | None:
        if not self.user_id:
            return None

        try:
            self.error = None
            updated = await self._gateway.update_task(task_id, updates)
        except Exception:
            logger.exception("Error updating task id=%s", task_id)
            self.error = UPDATE_ERROR
            raise

        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    async def remove(self, task_id: str) -> None:
        if not self.user_id:
            return

        try:
            self.error = None
            await self._gateway.delete_task(task_id)
        except Exception:
            logger.exception("Error deleting task id=%s", task_id)
            self.error = DELETE_ERROR
            raise

        self.tasks = [t for t in self.tasks if t.id != task_id]

    async def toggle_completion(self, task_id: str) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        return await self.update(task_id, {"completed": not task.completed})

    async def toggle_subtask_completion(self, task_id: str, subtask_id: str) -> Task | None:
        task = self.get(task_id)
        if task is None or not task.subtasks:
            return None

        subtasks = [
            dataclasses.replace(s, completed=not s.completed) if s.id == subtask_id else s
            for s in task.subtasks
        ]
        return await self.update(task_id, {"subtasks": subtasks})
