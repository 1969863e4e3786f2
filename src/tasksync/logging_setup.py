# src/tasksync/logging_setup.py

"""
Logging for the tasksync console.

stderr shares the terminal with the REPL prompt, so it only carries app
messages and real problems. The log file under data_dir keeps everything,
including one DEBUG line per backend request.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasksync.log"

_APP_PREFIX = "tasksync."
# Per-request DEBUG lines; only its warnings belong on the console.
_GATEWAY_LOGGER = "tasksync.tasks.task_gateway"
_CHATTY_LIBRARIES = ("httpx", "httpcore")


class _ConsoleNoiseFilter(logging.Filter):
    """Console gate: app records pass, gateway needs WARNING+, everything else ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _GATEWAY_LOGGER:
            return record.levelno >= logging.WARNING
        if record.name.startswith(_APP_PREFIX):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasksync",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the console and file handlers on the root logger.

    Replaces any handlers already there, so calling it twice does not
    duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn() ends up in the file as 'py.warnings'.
    logging.captureWarnings(True)

    # The gateway logs its own requests; the client's INFO request lines would repeat them.
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
