# src/todolist/tasks/task_views.py

"""
Pure projections over a task sequence (sort, filter, counts).

Nothing here touches storage; callers pass in whatever snapshot they hold.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import SortOrder, Task, TaskFilter


def sort_tasks(tasks: Iterable[Task], order: SortOrder) -> list[Task]:
    """Return a new list ordered by `order`. Title ordering ignores case."""
    if order == SortOrder.NEWEST_FIRST:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if order == SortOrder.OLDEST_FIRST:
        return sorted(tasks, key=lambda t: t.created_at)
    if order == SortOrder.ALPHABETICAL_AZ:
        return sorted(tasks, key=lambda t: t.title.lower())
    if order == SortOrder.ALPHABETICAL_ZA:
        return sorted(tasks, key=lambda t: t.title.lower(), reverse=True)
    raise ValueError(f"unknown sort order: {order!r}")


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.ALL:
        return list(tasks)
    if task_filter == TaskFilter.OPEN:
        return [t for t in tasks if not t.is_completed]
    if task_filter == TaskFilter.CLOSED:
        return [t for t in tasks if t.is_completed]
    raise ValueError(f"unknown task filter: {task_filter!r}")


def count_by_filter(tasks: Iterable[Task]) -> dict[TaskFilter, int]:
    total = 0
    closed = 0
    for t in tasks:
        total += 1
        if t.is_completed:
            closed += 1
    return {
        TaskFilter.ALL: total,
        TaskFilter.OPEN: total - closed,
        TaskFilter.CLOSED: closed,
    }
