# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasksync.config import Settings

_VARS = [
    "TASKSYNC_SUPABASE_URL",
    "SUPABASE_URL",
    "TASKSYNC_SUPABASE_KEY",
    "SUPABASE_ANON_KEY",
    "SUPABASE_KEY",
    "TASKSYNC_ACCESS_TOKEN",
    "TASKSYNC_USER_ID",
    "TASKSYNC_DATA_DIR",
    "TASKSYNC_CONNECT_TIMEOUT_SECONDS",
    "TASKSYNC_READ_TIMEOUT_SECONDS",
    "TASKSYNC_TASKS_TABLE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_need_no_secrets() -> None:
    s = Settings.from_env()
    assert s.supabase_url == ""
    assert s.supabase_key is None
    assert s.user_id is None
    assert s.tasks_table == "tasks"
    assert s.lists_table == "todo_lists"
    assert s.data_dir == Path(".local/tasksync")


def test_prefixed_vars_win_over_plain_supabase_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://plain.supabase.co")
    monkeypatch.setenv("TASKSYNC_SUPABASE_URL", "https://prefixed.supabase.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("TASKSYNC_USER_ID", "  u1 ")

    s = Settings.from_env()

    assert s.supabase_url == "https://prefixed.supabase.co"
    assert s.supabase_key == "anon"
    assert s.user_id == "u1"


def test_bad_numbers_fall_back_and_read_timeout_is_at_least_connect(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKSYNC_CONNECT_TIMEOUT_SECONDS", "20")
    monkeypatch.setenv("TASKSYNC_READ_TIMEOUT_SECONDS", "soon")

    s = Settings.from_env()

    assert s.connect_timeout_seconds == 20.0
    assert s.read_timeout_seconds == 20.0
