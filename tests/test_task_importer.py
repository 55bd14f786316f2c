# tests/test_task_importer.py

from __future__ import annotations

import httpx
import pytest

from todolist.tasks.task_errors import ImportDecodeError
from todolist.tasks.task_importer import RemoteTaskImporter, parse_todos_payload
from todolist.tasks.task_store import TaskStore

from .fakes import failing_transport, todos_transport

URL = "https://example.test/todos"


def _importer(store: TaskStore, transport: httpx.MockTransport) -> RemoteTaskImporter:
    return RemoteTaskImporter(store, url=URL, timeout_seconds=1.0, transport=transport)


@pytest.mark.asyncio
async def test_import_maps_remote_items_and_seeds_store(store: TaskStore) -> None:
    calls: list[httpx.Request] = []
    payload = {
        "todos": [
            {"id": 1, "todo": "Task A", "completed": False, "userId": 7},
            {"id": 2, "todo": "Task B", "completed": True},
        ],
        "total": 2,
    }

    tasks = await _importer(store, todos_transport(payload, calls=calls)).import_once()

    assert len(calls) == 1
    assert calls[0].method == "GET"
    assert str(calls[0].url) == URL

    assert [t.title for t in tasks] == ["Task A", "Task B"]
    assert all(t.details == "" for t in tasks)
    assert all(t.start_time is None and t.end_time is None for t in tasks)
    assert [t.is_completed for t in tasks] == [False, True]
    assert len({t.id for t in tasks}) == 2

    stored = {t.title: t for t in store.list_all()}
    assert set(stored) == {"Task A", "Task B"}
    assert stored["Task B"].is_completed is True


@pytest.mark.asyncio
async def test_import_does_not_duplicate_existing_titles(store: TaskStore) -> None:
    store.insert("Task A", "mine")
    payload = {"todos": [{"id": 1, "todo": "Task A", "completed": True}]}

    tasks = await _importer(store, todos_transport(payload)).import_once()

    # mapped result is returned even though nothing new was persisted
    assert [t.title for t in tasks] == ["Task A"]
    rows = store.list_all()
    assert len(rows) == 1
    assert rows[0].details == "mine"
    assert rows[0].is_completed is False


@pytest.mark.asyncio
async def test_non_2xx_degrades_to_empty(store: TaskStore) -> None:
    payload = {"todos": [{"id": 1, "todo": "Task A", "completed": False}]}

    tasks = await _importer(store, todos_transport(payload, status_code=503)).import_once()

    assert tasks == []
    assert store.count_tasks() == 0


@pytest.mark.asyncio
async def test_network_error_degrades_to_empty(store: TaskStore) -> None:
    transport = failing_transport(lambda req: httpx.ConnectError("connection refused", request=req))

    assert await _importer(store, transport).import_once() == []
    assert store.count_tasks() == 0


@pytest.mark.asyncio
async def test_timeout_degrades_to_empty(store: TaskStore) -> None:
    transport = failing_transport(lambda req: httpx.ReadTimeout("too slow", request=req))

    assert await _importer(store, transport).import_once() == []


@pytest.mark.asyncio
async def test_invalid_json_degrades_to_empty(store: TaskStore) -> None:
    transport = httpx.MockTransport(lambda req: httpx.Response(200, text="<html>nope</html>"))

    assert await _importer(store, transport).import_once() == []


@pytest.mark.asyncio
async def test_malformed_payload_degrades_to_empty(store: TaskStore) -> None:
    payload = {"todos": [{"id": 1, "todo": "ok", "completed": False}, {"id": "2", "todo": "bad"}]}

    assert await _importer(store, todos_transport(payload)).import_once() == []
    assert store.count_tasks() == 0


@pytest.mark.asyncio
async def test_blank_remote_titles_are_skipped(store: TaskStore) -> None:
    payload = {"todos": [{"id": 1, "todo": "   ", "completed": False}, {"id": 2, "todo": "Real", "completed": False}]}

    tasks = await _importer(store, todos_transport(payload)).import_once()

    assert [t.title for t in tasks] == ["Real"]
    assert store.count_tasks() == 1


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"items": []},
        {"todos": {"id": 1}},
        {"todos": ["Task A"]},
        {"todos": [{"id": True, "todo": "x", "completed": False}]},
        {"todos": [{"id": 1, "todo": None, "completed": False}]},
        {"todos": [{"id": 1, "todo": "x", "completed": "yes"}]},
    ],
)
def test_parse_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ImportDecodeError):
        parse_todos_payload(payload)


def test_parse_accepts_empty_list() -> None:
    assert parse_todos_payload({"todos": []}) == []


@pytest.mark.parametrize("bad_url", ["http://[::1", "exa mple", "not a url", ""])
@pytest.mark.asyncio
async def test_unusable_url_degrades_to_empty(store: TaskStore, bad_url: str) -> None:
    importer = RemoteTaskImporter(store, url=bad_url, timeout_seconds=1.0, transport=todos_transport({"todos": []}))

    assert await importer.import_once() == []
    assert store.count_tasks() == 0
