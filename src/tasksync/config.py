# src/tasksync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Plain SUPABASE_* names are accepted as fallbacks for the prefixed ones.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TASKSYNC"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Backend (Supabase REST) ----
    supabase_url: str
    supabase_key: Optional[str]
    access_token: Optional[str]
    tasks_table: str
    lists_table: str

    # ---- Session (issued externally) ----
    user_id: Optional[str]

    # ---- HTTP ----
    connect_timeout_seconds: float
    read_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasksync").strip() or "tasksync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasksync"))

        supabase_url = (_first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default="") or "").strip().rstrip("/")
        supabase_key = _first_env(_k("SUPABASE_KEY"), "SUPABASE_ANON_KEY", "SUPABASE_KEY", default=None)
        access_token = _first_env(_k("ACCESS_TOKEN"), default=None)
        tasks_table = _env(_k("TASKS_TABLE"), "tasks").strip() or "tasks"
        lists_table = _env(_k("LISTS_TABLE"), "todo_lists").strip() or "todo_lists"

        user_id = (_first_env(_k("USER_ID"), default="") or "").strip() or None

        connect_timeout_seconds = _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 5.0)
        # keep read >= connect as a sane baseline
        read_timeout_seconds = max(
            _env_float(_k("READ_TIMEOUT_SECONDS"), 15.0),
            connect_timeout_seconds,
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            supabase_url=supabase_url,
            supabase_key=supabase_key.strip() if supabase_key else None,
            access_token=access_token.strip() if access_token else None,
            tasks_table=tasks_table,
            lists_table=lists_table,
            user_id=user_id,
            connect_timeout_seconds=connect_timeout_seconds,
            read_timeout_seconds=read_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
