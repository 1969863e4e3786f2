# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tasksync.tasks.task_gateway import row_to_task, task_fields_to_row
from tasksync.tasks.task_models import (
    Frequency,
    NotificationSettings,
    Priority,
    Recurrence,
    Subtask,
    parse_timestamp,
)

from .fakes import make_row


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2025-03-01T10:00:00Z", datetime(2025, 3, 1, 10, tzinfo=timezone.utc)),
        ("2025-03-01 10:00:00.1234567+00:00", datetime(2025, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)),
        ("2025-03-01", datetime(2025, 3, 1, tzinfo=timezone.utc)),
        (None, None),
        ("", None),
    ],
)
def test_parse_timestamp(raw, expected) -> None:
    assert parse_timestamp(raw) == expected


def test_parse_timestamp_keeps_offset() -> None:
    value = parse_timestamp("2025-03-01T10:00:00+02:00")
    assert value.utcoffset() == timedelta(hours=2)


def test_priority_from_db_falls_back_to_medium() -> None:
    assert Priority.from_db("HIGH") is Priority.HIGH
    assert Priority.from_db("urgent") is Priority.MEDIUM
    assert Priority.from_db(None) is Priority.MEDIUM


def test_recurrence_accepts_bare_frequency_and_rejects_garbage() -> None:
    assert Recurrence.from_json("daily") == Recurrence(frequency=Frequency.DAILY)
    assert Recurrence.from_json({"frequency": "monthly", "interval": 0}).interval == 1
    assert Recurrence.from_json({"frequency": "hourly"}) is None
    assert Recurrence.from_json(42) is None


def test_subtask_and_notifications_from_json() -> None:
    assert Subtask.from_json({"id": 7, "completed": 1}) == Subtask(id="7", completed=True)
    assert Subtask.from_json({"title": "no id"}) is None
    assert NotificationSettings.from_json({"enabled": True}) == NotificationSettings(enabled=True)
    assert NotificationSettings.from_json("on") is None


def test_row_to_task_skips_malformed_subtasks() -> None:
    task = row_to_task(make_row(1, subtasks=[{"id": "a"}, "junk", {"completed": True}]))
    assert [s.id for s in task.subtasks] == ["a"]


def test_row_to_task_defaults_missing_timestamps_to_epoch() -> None:
    task = row_to_task({"id": 1, "title": "bare"})
    assert task.id == "1"
    assert task.created_at == datetime.fromtimestamp(0, tz=timezone.utc)
    assert task.priority is Priority.MEDIUM
    assert task.subtasks == []


def test_task_fields_to_row_encodes_nested_values() -> None:
    row = task_fields_to_row(
        {
            "recurring": Recurrence(frequency=Frequency.WEEKLY, interval=2),
            "notifications": NotificationSettings(enabled=True, reminder_minutes=15),
            "priority": Priority.HIGH,
            "description": None,
        }
    )
    assert row == {
        "recurring": {"frequency": "weekly", "interval": 2, "until": None},
        "notifications": {"enabled": True, "reminder_minutes": 15},
        "priority": "high",
        "description": None,
    }


@pytest.mark.parametrize("field", ["id", "created_at", "updated_at", "colour"])
def test_task_fields_to_row_rejects_non_writable_fields(field: str) -> None:
    with pytest.raises(ValueError):
        task_fields_to_row({field: "x"})


def test_recurrence_with_bad_until_keeps_rule() -> None:
    rule = Recurrence.from_json({"frequency": "yearly", "until": "someday"})
    assert rule == Recurrence(frequency=Frequency.YEARLY)
