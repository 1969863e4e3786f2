# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasksync.cli.bootstrap import create_initial_state
from tasksync.core.state import AppState
from tasksync.tasks.task_store import TaskStore

from .fakes import FakeTaskGateway, make_row


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the gateway config.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="tasksync-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
        access_token="user-jwt",
        tasks_table="tasks",
        lists_table="todo_lists",
        user_id="u1",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
    )


@pytest.fixture()
def gateway() -> FakeTaskGateway:
    """Three tasks for u1 (task-1 oldest .. task-3 newest) and one foreign task."""
    return FakeTaskGateway(
        [
            make_row(1),
            make_row(
                2,
                subtasks=[
                    {"id": "s1", "title": "first", "completed": False},
                    {"id": "s2", "title": "second", "completed": True},
                ],
            ),
            make_row(3, completed=True),
            make_row(4, user_id="someone-else"),
        ]
    )


@pytest.fixture()
def store(gateway: FakeTaskGateway) -> TaskStore:
    return TaskStore(gateway)


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: FakeTaskGateway) -> AppState:
    """AppState wired with the in-memory gateway (no HTTP)."""
    return create_initial_state(settings=settings, gateway=gateway)
