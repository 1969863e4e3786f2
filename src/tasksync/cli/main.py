# src/tasksync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL until /exit,
EOF or Ctrl+C. One asyncio.Runner serves every command of the session.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/tasksync")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "tasksync"))

    try:
        state = create_initial_state(settings=settings)
    except RuntimeError as e:
        # Missing backend configuration; nothing useful to do without it.
        logger.error("%s", e)
        sys.exit(2)

    try:
        with asyncio.Runner() as runner:
            try:
                run_console_loop(state, runner)
            finally:
                runner.run(shutdown_state(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
