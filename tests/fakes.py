# tests/fakes.py

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import httpx

from todolist.tasks.task_errors import StorageError
from todolist.tasks.task_models import Task


def todos_transport(
    payload: Any = None,
    *,
    status_code: int = 200,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """
    MockTransport answering every request with `payload` as JSON.

    Requests are appended to `calls` so tests can assert how often the
    remote list was hit.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def failing_transport(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)


class FakeImporter:
    """
    Deterministic importer: returns (and optionally seeds) a fixed task list.

    Counts calls so bootstrap tests can assert the import ran at most once.
    """

    def __init__(self, tasks: list[Task] | None = None, *, store: Any = None) -> None:
        self.tasks = list(tasks or [])
        self.store = store
        self.calls = 0

    async def import_once(self) -> list[Task]:
        self.calls += 1
        if self.store is not None:
            self.store.bulk_insert_if_absent(self.tasks)
        return list(self.tasks)


class FakeBootstrapFlag:
    def __init__(self, imported: bool = False) -> None:
        self.imported = imported
        self.mark_calls = 0

    def is_imported(self) -> bool:
        return self.imported

    def mark_imported(self) -> None:
        self.mark_calls += 1
        self.imported = True


class SpyTaskRepo:
    """
    Wraps a real TaskRepo, counting reads and optionally failing writes
    with StorageError (disk full, locked database, ...).
    """

    def __init__(self, inner: Any, *, fail_writes: bool = False) -> None:
        self.inner = inner
        self.fail_writes = fail_writes
        self.list_all_calls = 0

    def list_all(self) -> list[Task]:
        self.list_all_calls += 1
        return self.inner.list_all()

    def count_tasks(self) -> int:
        return self.inner.count_tasks()

    def _maybe_fail(self, op: str) -> None:
        if self.fail_writes:
            raise StorageError(f"{op} failed")

    def insert(self, title, details="", start_time=None, end_time=None) -> Task:
        self._maybe_fail("insert")
        return self.inner.insert(title, details, start_time, end_time)

    def update(self, task_id: str, **fields) -> None:
        self._maybe_fail("update")
        self.inner.update(task_id, **fields)

    def delete(self, task_id: str) -> None:
        self._maybe_fail("delete")
        self.inner.delete(task_id)

    def bulk_insert_if_absent(self, tasks: Iterable[Task]) -> int:
        self._maybe_fail("bulk_insert_if_absent")
        return self.inner.bulk_insert_if_absent(tasks)
