# src/tasksync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .ports import BackendProbe, ListGateway


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: Any

    task_store: TaskStore
    lists: ListGateway
    probe: BackendProbe

    @property
    def user_id(self) -> str | None:
        return self.task_store.user_id
