# tests/test_console_connector.py

from __future__ import annotations

import asyncio

import pytest

from tasksync.connectors.console_connector import run_console_loop

from .fakes import FakeTaskGateway


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    pending = list(lines)

    def fake_input(prompt: str = "") -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)


def test_console_loads_then_quick_adds_bare_text(state, gateway: FakeTaskGateway, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["", "Water plants #home", "/list open", "/exit", "/never-reached"])

    with asyncio.Runner() as runner:
        run_console_loop(state, runner)

    out = capsys.readouterr().out
    assert "Loading tasks for u1..." in out
    assert "Loaded 3 task(s)." in out
    assert "Added: [ ]" in out
    assert "Water plants #home" in out
    assert state.task_store.tasks[0].title == "Water plants"
    assert gateway.call_names() == ["fetch_tasks", "create_task"]


def test_console_reports_crashing_command(state, monkeypatch, capsys) -> None:
    async def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(state.task_store, "load", boom)
    _feed(monkeypatch, [])

    with asyncio.Runner() as runner:
        run_console_loop(state, runner)

    assert "Internal error while handling a command." in capsys.readouterr().out
