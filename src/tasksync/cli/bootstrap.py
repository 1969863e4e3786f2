# src/tasksync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the HTTP gateway and the task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_gateway import GatewayConfig, RemoteTaskGateway
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, gateway=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    `gateway` replaces the HTTP gateway (tests pass an in-memory one).
    Raises RuntimeError if the backend URL or key is missing.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if gateway is None:
        gateway = RemoteTaskGateway(GatewayConfig.from_settings(settings))

    logger.info(
        "Backend %s tables=%s,%s user=%s",
        settings.supabase_url,
        settings.tasks_table,
        settings.lists_table,
        settings.user_id or "-",
    )

    return AppState(
        settings=settings,
        task_store=TaskStore(gateway, user_id=settings.user_id),
        lists=gateway,
        probe=gateway,
    )


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        aclose = getattr(state.probe, "aclose", None)
        if aclose is not None:
            await aclose()
    except Exception:
        logger.debug("Gateway close failed.", exc_info=True)
