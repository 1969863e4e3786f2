# src/tasksync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _run_command(state: AppState, runner: asyncio.Runner, line: str) -> str | None:
    try:
        return runner.run(command_registry.handle(state, line, emit=_print_ts))
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState, runner: asyncio.Runner) -> None:
    """
    Blocking REPL in the main thread.

    Every command is awaited to completion on `runner` (one event loop for the
    whole session, so the gateway's HTTP connection pool is reused).
    """
    logger.info("Console connector started (user=%s).", state.user_id)
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    app_name = str(getattr(state.settings, "app_name", "tasksync"))

    if state.user_id:
        _print_ts(_run_command(state, runner, "/load") or "")

    while True:
        try:
            user_input = input(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a quick add.
            user_input = f"/add {user_input}"

        cmd_response = _run_command(state, runner, user_input)
        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console connector finished.")
