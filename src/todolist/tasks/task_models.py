# src/todolist/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import StrEnum


class SortOrder(StrEnum):
    """Ordering of the cached task view. Process-wide, never persisted."""

    NEWEST_FIRST = "newest_first"
    OLDEST_FIRST = "oldest_first"
    ALPHABETICAL_AZ = "alphabetical_az"
    ALPHABETICAL_ZA = "alphabetical_za"


class TaskFilter(StrEnum):
    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class Task:
    """
    A titled, optionally time-boxed unit of work.

    Timestamps are unix seconds (float), same as everywhere else in the store.
    `id` and `created_at` never change after creation.
    """

    title: str
    details: str = ""
    start_time: float | None = None
    end_time: float | None = None
    is_completed: bool = False

    id: str = field(default_factory=new_task_id)
    created_at: float = field(default_factory=time.time)
