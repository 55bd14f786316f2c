# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.tasks.bootstrap_state import BootstrapState
from todolist.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        import_enabled=True,
        import_url="https://example.test/todos",
        import_timeout_seconds=1.0,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    """Real SQLite store: its correctness is part of what we want to test."""
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def bootstrap(tmp_path: Path) -> BootstrapState:
    return BootstrapState(tmp_path / "tasks.sqlite3")
