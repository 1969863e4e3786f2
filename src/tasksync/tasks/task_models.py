# src/tasksync/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

# Postgres may emit 1-6 fractional digits; pad/trim to microseconds.
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp or date from the backend. Naive values are taken as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        s = raw.strip().replace(" ", "T", 1)
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        s = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), s, count=1)
        value = datetime.fromisoformat(s)
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class Frequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(slots=True, frozen=True)
class Subtask:
    """Checklist item stored inside the parent task's `subtasks` JSON column."""

    id: str
    completed: bool = False
    title: str = ""

    @classmethod
    def from_json(cls, raw: Any) -> Subtask | None:
        if not isinstance(raw, dict) or raw.get("id") in (None, ""):
            return None
        return cls(
            id=str(raw["id"]),
            completed=bool(raw.get("completed", False)),
            title=str(raw.get("title") or ""),
        )

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed}


@dataclass(slots=True, frozen=True)
class Recurrence:
    frequency: Frequency
    interval: int = 1
    until: datetime | None = None

    @classmethod
    def from_json(cls, raw: Any) -> Recurrence | None:
        """
        Accepts either a bare frequency string ("weekly") or an object
        {"frequency": ..., "interval": ..., "until": ...}. Anything else -> None.
        """
        if isinstance(raw, str):
            raw = {"frequency": raw}
        if not isinstance(raw, dict):
            return None
        try:
            frequency = Frequency(str(raw.get("frequency") or "").strip().lower())
        except ValueError:
            return None
        try:
            interval = max(1, int(raw.get("interval") or 1))
        except (TypeError, ValueError):
            interval = 1
        try:
            until = parse_timestamp(raw.get("until"))
        except ValueError:
            until = None
        return cls(frequency=frequency, interval=interval, until=until)

    def to_json(self) -> dict[str, Any]:
        return {
            "frequency": self.frequency.value,
            "interval": self.interval,
            "until": self.until.isoformat() if self.until else None,
        }


@dataclass(slots=True, frozen=True)
class NotificationSettings:
    enabled: bool = False
    reminder_minutes: int | None = None  # minutes before due_date

    @classmethod
    def from_json(cls, raw: Any) -> NotificationSettings | None:
        if not isinstance(raw, dict):
            return None
        minutes = raw.get("reminder_minutes")
        try:
            reminder = int(minutes) if minutes is not None else None
        except (TypeError, ValueError):
            reminder = None
        return cls(enabled=bool(raw.get("enabled", False)), reminder_minutes=reminder)

    def to_json(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "reminder_minutes": self.reminder_minutes}


@dataclass(slots=True)
class Task:
    id: str
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    user_id: str

    priority: Priority = Priority.MEDIUM
    category: str = ""
    description: str | None = None
    due_date: datetime | None = None
    recurring: Recurrence | None = None
    subtasks: list[Subtask] = field(default_factory=list)
    notifications: NotificationSettings | None = None


@dataclass(slots=True)
class TaskList:
    id: str
    name: str
    color: str
    user_id: str
