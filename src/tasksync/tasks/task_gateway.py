# src/tasksync/tasks/task_gateway.py

from __future__ import annotations

"""
Remote task gateway.

Talks to a PostgREST endpoint (Supabase REST) over httpx:
- owner-scoped reads of `tasks` / `todo_lists`
- single-row insert / update / delete of tasks
- row <-> domain mapping

Reads never raise: failures are logged and an empty list is returned.
Writes raise GatewayError.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

import httpx

from .task_models import (
    NotificationSettings,
    Priority,
    Recurrence,
    Subtask,
    Task,
    TaskList,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
SINGLE_OBJECT = "application/vnd.pgrst.object+json"

# Columns a caller may set on insert/update. id and timestamps are server-assigned.
WRITABLE_TASK_FIELDS = frozenset(
    {
        "title",
        "description",
        "completed",
        "priority",
        "due_date",
        "category",
        "recurring",
        "subtasks",
        "notifications",
        "user_id",
    }
)

# "relation does not exist" (Postgres) / "table not in schema cache" (PostgREST)
_MISSING_TABLE_CODES = {"42P01", "PGRST205"}

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class GatewayError(Exception):
    """A backend request failed (HTTP error status, bad payload or transport failure)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint

    @classmethod
    def from_response(cls, resp: httpx.Response) -> GatewayError:
        body: Any
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        message = str(body.get("message") or resp.text or resp.reason_phrase or "request failed")
        return cls(
            message,
            status_code=resp.status_code,
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.code:
            parts.append(f"code={self.code}")
        return " ".join(parts)


# ---- row mapping ----


def _safe_timestamp(raw: Any, field_name: str) -> datetime | None:
    try:
        return parse_timestamp(raw)
    except ValueError:
        logger.warning("Unparsable %s=%r, ignoring", field_name, raw)
        return None


def row_to_task(row: Mapping[str, Any]) -> Task:
    subtasks_raw = row.get("subtasks") or []
    subtasks = [s for s in (Subtask.from_json(x) for x in subtasks_raw) if s is not None]
    return Task(
        id=str(row["id"]),
        title=str(row.get("title") or ""),
        description=row.get("description"),
        completed=bool(row.get("completed", False)),
        created_at=_safe_timestamp(row.get("created_at"), "created_at") or _EPOCH,
        updated_at=_safe_timestamp(row.get("updated_at"), "updated_at") or _EPOCH,
        priority=Priority.from_db(row.get("priority")),
        due_date=_safe_timestamp(row.get("due_date"), "due_date"),
        category=str(row.get("category") or ""),
        recurring=Recurrence.from_json(row.get("recurring")),
        subtasks=subtasks,
        notifications=NotificationSettings.from_json(row.get("notifications")),
        user_id=str(row.get("user_id") or ""),
    )


def row_to_list(row: Mapping[str, Any]) -> TaskList:
    return TaskList(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        color=str(row.get("color") or ""),
        user_id=str(row.get("user_id") or ""),
    )


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Subtask, Recurrence, NotificationSettings)):
        return value.to_json()
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    return value


def task_fields_to_row(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate caller-supplied task fields and encode them as a JSON row."""
    unknown = set(fields) - WRITABLE_TASK_FIELDS
    if unknown:
        raise ValueError(f"Not writable task field(s): {', '.join(sorted(unknown))}")
    return {k: _to_json_value(v) for k, v in fields.items()}


def new_task_row(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Encode fields for an insert; a task needs a non-blank title and an owner."""
    row = task_fields_to_row(fields)
    if not str(row.get("title") or "").strip():
        raise ValueError("title is required")
    if not row.get("user_id"):
        raise ValueError("user_id is required")
    return row


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise GatewayError("Backend returned invalid JSON", status_code=resp.status_code) from e


def _single(data: Any) -> Mapping[str, Any]:
    # Accept both `object+json` replies and plain arrays.
    if isinstance(data, list):
        if not data:
            raise GatewayError("Backend returned no row")
        data = data[0]
    if not isinstance(data, Mapping):
        raise GatewayError("Backend returned an unexpected payload")
    return data


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    base_url: str
    api_key: str
    access_token: str | None = None
    tasks_table: str = "tasks"
    lists_table: str = "todo_lists"
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0

    @classmethod
    def from_settings(cls, settings: Any) -> GatewayConfig:
        base_url = str(getattr(settings, "supabase_url", "") or "").strip()
        api_key = str(getattr(settings, "supabase_key", "") or "").strip()
        if not base_url:
            raise RuntimeError("Backend URL is not set. Set TASKSYNC_SUPABASE_URL in your .env.")
        if not api_key:
            raise RuntimeError("Backend API key is not set. Set TASKSYNC_SUPABASE_KEY in your .env.")
        return cls(
            base_url=base_url,
            api_key=api_key,
            access_token=getattr(settings, "access_token", None),
            tasks_table=getattr(settings, "tasks_table", "tasks"),
            lists_table=getattr(settings, "lists_table", "todo_lists"),
            connect_timeout_seconds=float(getattr(settings, "connect_timeout_seconds", 5.0)),
            read_timeout_seconds=float(getattr(settings, "read_timeout_seconds", 15.0)),
        )


class RemoteTaskGateway:
    """
    One method = one HTTP round trip. No retries, no transactions.

    Owns one httpx.AsyncClient; `transport` is only overridden in tests
    (httpx.MockTransport).
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            transport=transport,
            base_url=config.base_url.rstrip("/") + REST_PREFIX,
            headers=self._auth_headers(config),
            timeout=httpx.Timeout(
                connect=config.connect_timeout_seconds,
                read=config.read_timeout_seconds,
                write=10.0,
                pool=config.connect_timeout_seconds,
            ),
        )

    @staticmethod
    def _auth_headers(config: GatewayConfig) -> dict[str, str]:
        # Row-level security keys off the bearer token; the anon key alone sees nothing private.
        return {
            "apikey": config.api_key,
            "Authorization": f"Bearer {config.access_token or config.api_key}",
        }

    @property
    def config(self) -> GatewayConfig:
        return self._config

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RemoteTaskGateway:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ---- low-level helpers ----

    async def _send(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} /{table} failed: {e}") from e

        logger.debug("%s /%s params=%s -> %s", method, table, params, resp.status_code)
        if resp.is_error:
            raise GatewayError.from_response(resp)
        return resp

    async def _fetch_rows(self, table: str, params: dict[str, str]) -> list[Mapping[str, Any]]:
        data = _json(await self._send("GET", table, params=params))
        if not isinstance(data, list):
            raise GatewayError(f"Expected a JSON array from /{table}")
        return data

    # ---- tasks ----

    async def fetch_tasks(self, user_id: str) -> list[Task]:
        """All tasks owned by user_id, newest first. Returns [] on any failure."""
        try:
            rows = await self._fetch_rows(
                self._config.tasks_table,
                {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"},
            )
            return [row_to_task(r) for r in rows]
        except Exception:
            logger.exception("Error fetching tasks user=%s", user_id)
            return []

    async def create_task(self, fields: Mapping[str, Any]) -> Task:
        row = new_task_row(fields)
        try:
            resp = await self._send(
                "POST",
                self._config.tasks_table,
                json=row,
                headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT},
            )
            task = row_to_task(_single(_json(resp)))
        except GatewayError:
            logger.exception("Error creating task")
            raise
        logger.info("Task created id=%s", task.id)
        return task

    async def update_task(self, task_id: str, updates: Mapping[str, Any]) -> Task:
        row = task_fields_to_row(updates)
        try:
            resp = await self._send(
                "PATCH",
                self._config.tasks_table,
                params={"id": f"eq.{task_id}"},
                json=row,
                headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT},
            )
            task = row_to_task(_single(_json(resp)))
        except GatewayError:
            logger.exception("Error updating task id=%s", task_id)
            raise
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(row))
        return task

    async def delete_task(self, task_id: str) -> None:
        try:
            await self._send("DELETE", self._config.tasks_table, params={"id": f"eq.{task_id}"})
        except GatewayError:
            logger.exception("Error deleting task id=%s", task_id)
            raise
        logger.info("Task deleted id=%s", task_id)

    # ---- lists ----

    async def fetch_lists(self, user_id: str) -> list[TaskList]:
        """All lists owned by user_id, oldest first. Returns [] on any failure."""
        try:
            rows = await self._fetch_rows(
                self._config.lists_table,
                {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at"},
            )
            return [row_to_list(r) for r in rows]
        except Exception:
            logger.exception("Error fetching lists user=%s", user_id)
            return []

    async def create_list(self, *, name: str, color: str, user_id: str) -> TaskList:
        if not name or not name.strip():
            raise ValueError("name is required")
        try:
            resp = await self._send(
                "POST",
                self._config.lists_table,
                json={"name": name.strip(), "color": color, "user_id": user_id},
                headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT},
            )
            task_list = row_to_list(_single(_json(resp)))
        except GatewayError:
            logger.exception("Error creating list name=%s", name)
            raise
        logger.info("List created id=%s", task_list.id)
        return task_list

    # ---- diagnostics ----

    async def check_tables(self) -> dict[str, bool]:
        """
        Probe each table with a one-row select.

        A missing table is reported (never created): schema and row-level
        policies are provisioned from the backend dashboard.
        """
        out: dict[str, bool] = {}
        for table in (self._config.tasks_table, self._config.lists_table):
            try:
                await self._send("GET", table, params={"select": "id", "limit": "1"})
                out[table] = True
            except GatewayError as e:
                if e.code in _MISSING_TABLE_CODES or e.status_code == 404:
                    logger.warning(
                        "Table %s is missing; provision the schema from the backend dashboard.",
                        table,
                    )
                else:
                    logger.warning("Table %s is not reachable: %s", table, e)
                out[table] = False
        return out
