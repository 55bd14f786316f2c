# src/todolist/tasks/task_importer.py

"""
One-shot bootstrap import from a remote todo list.

Expected payload (dummyjson.com style):

    {"todos": [{"id": 1, "todo": "Do something", "completed": false}, ...]}

Every failure (network, non-2xx, malformed JSON) degrades to an empty import.
There are no retries; the caller simply proceeds with zero remote tasks.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.ports import TaskRepo
from .task_errors import ImportDecodeError, ImportNetworkError, RemoteImportError, StorageError
from .task_models import Task, new_task_id

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RemoteTodo:
    external_id: int
    text: str
    completed: bool


def parse_todos_payload(payload: Any) -> list[RemoteTodo]:
    """Validate the decoded JSON body. Any structural mismatch rejects the whole payload."""
    if not isinstance(payload, dict):
        raise ImportDecodeError("payload is not a JSON object")
    raw_items = payload.get("todos")
    if not isinstance(raw_items, list):
        raise ImportDecodeError("payload has no 'todos' list")

    out: list[RemoteTodo] = []
    for i, item in enumerate(raw_items):
        if not isinstance(item, dict):
            raise ImportDecodeError(f"todos[{i}] is not an object")
        ext_id = item.get("id")
        text = item.get("todo")
        completed = item.get("completed")
        if not isinstance(ext_id, int) or isinstance(ext_id, bool):
            raise ImportDecodeError(f"todos[{i}].id is not an integer")
        if not isinstance(text, str):
            raise ImportDecodeError(f"todos[{i}].todo is not a string")
        if not isinstance(completed, bool):
            raise ImportDecodeError(f"todos[{i}].completed is not a boolean")
        out.append(RemoteTodo(external_id=ext_id, text=text, completed=completed))
    return out


def to_local_task(todo: RemoteTodo, *, now_ts: float | None = None) -> Task:
    return Task(
        id=new_task_id(),
        title=todo.text,
        details="",
        created_at=time.time() if now_ts is None else now_ts,
        start_time=None,
        end_time=None,
        is_completed=todo.completed,
    )


class RemoteTaskImporter:
    def __init__(
        self,
        task_store: TaskRepo,
        *,
        url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store = task_store
        self._url = url
        self._timeout = httpx.Timeout(timeout_seconds)
        # Injected in tests (httpx.MockTransport); None means real network.
        self._transport = transport

    async def fetch_remote_todos(self) -> list[RemoteTodo]:
        """Single GET of the remote list. Raises ImportNetworkError / ImportDecodeError."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, headers={"Accept": "application/json"})
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImportNetworkError(f"remote list returned HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL is not an HTTPError subclass; a bad configured URL is a network failure here.
            raise ImportNetworkError(f"remote list request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ImportDecodeError("remote list is not valid JSON") from e
        return parse_todos_payload(payload)

    async def import_once(self) -> list[Task]:
        """
        Fetch, map and seed the store (skipping titles that already exist).

        Returns the mapped tasks whether or not each one was persisted.
        """
        try:
            todos = await self.fetch_remote_todos()
        except RemoteImportError as e:
            logger.warning("Remote import skipped url=%s: %s", self._url, e)
            return []

        now_ts = time.time()
        tasks: list[Task] = []
        for todo in todos:
            if not todo.text.strip():
                logger.debug("Skipping remote todo with empty text external_id=%s", todo.external_id)
                continue
            tasks.append(to_local_task(todo, now_ts=now_ts))

        try:
            inserted = await asyncio.to_thread(self._store.bulk_insert_if_absent, tasks)
        except StorageError:
            logger.exception("Seeding imported tasks failed; continuing with unsaved import")
        else:
            logger.info(
                "Remote import done url=%s fetched=%s inserted=%s",
                self._url,
                len(tasks),
                inserted,
            )
        return tasks
