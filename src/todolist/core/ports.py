# src/todolist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task service.

The service depends on Protocols instead of concrete implementations.
This keeps storage and the remote source swappable and makes testing easier.
"""

from typing import Iterable, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    # Reads
    def list_all(self) -> list[Task]: ...
    def count_tasks(self) -> int: ...

    # Mutations (serialized by the implementation)
    def insert(
            self,
            title: str,
            details: str = "",
            start_time: float | None = None,
            end_time: float | None = None,
    ) -> Task: ...

    def update(
            self,
            task_id: str,
            *,
            title: str,
            details: str,
            start_time: float | None,
            end_time: float | None,
            is_completed: bool,
    ) -> None: ...

    def delete(self, task_id: str) -> None: ...

    # Remote import only
    def bulk_insert_if_absent(self, tasks: Iterable[Task]) -> int: ...


class BootstrapFlag(Protocol):
    """Persisted 'has imported from remote source' flag."""
    def is_imported(self) -> bool: ...
    def mark_imported(self) -> None: ...


class TaskImporter(Protocol):
    async def import_once(self) -> list[Task]: ...
