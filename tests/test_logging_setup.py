# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from tasksync.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("tasksync.tasks.task_store", logging.INFO, True),
        ("tasksync.tasks.task_gateway", logging.DEBUG, False),
        ("tasksync.tasks.task_gateway", logging.WARNING, True),
        ("httpx", logging.WARNING, False),
        ("httpx", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_file_and_replaces_handlers(tmp_path, restore_root_logger) -> None:
    setup_logging(log_dir=tmp_path)
    log_file = setup_logging(log_dir=tmp_path)

    assert log_file == tmp_path / "tasksync.log"
    assert len(restore_root_logger.handlers) == 2
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("tasksync.tasks.task_gateway").debug("GET /rest/v1/tasks")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert "GET /rest/v1/tasks" in log_file.read_text(encoding="utf-8")
