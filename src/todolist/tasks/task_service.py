# src/todolist/tasks/task_service.py

from __future__ import annotations

"""
Task service.

The only object a UI shell talks to. It owns:
- the bootstrap decision (one-shot remote import vs. reading the store),
- validated mutations (add / update / toggle / delete),
- the cached, sorted view and the projections over it (filter, counts).

Blocking store calls run in worker threads; the cached view and the service
state are only ever reassigned on the event loop, after the store call has
returned. Toggle-completion is pessimistic: nothing in the view changes until
the store accepted the write.
"""

import asyncio
import dataclasses
import logging
from enum import StrEnum

from ..core.ports import BootstrapFlag, TaskImporter, TaskRepo
from .task_errors import InvalidTaskError, StorageError, TaskError
from .task_models import SortOrder, Task, TaskFilter
from .task_views import count_by_filter, filter_tasks, sort_tasks

logger = logging.getLogger(__name__)


class ServiceState(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class TaskService:
    def __init__(
        self,
        task_store: TaskRepo,
        bootstrap: BootstrapFlag,
        importer: TaskImporter | None = None,
        *,
        sort_order: SortOrder = SortOrder.NEWEST_FIRST,
    ) -> None:
        self._store = task_store
        self._bootstrap = bootstrap
        # None disables the remote bootstrap; the first load just marks it done.
        self._importer = importer
        self._sort_order = SortOrder(sort_order)
        self._tasks: list[Task] = []
        self._state = ServiceState.UNINITIALIZED
        self._load_lock = asyncio.Lock()

    # ---- read-only state ----

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def tasks(self) -> list[Task]:
        """The cached view (a copy), in the current sort order."""
        return list(self._tasks)

    # ---- bootstrap / refresh ----

    async def load(self) -> list[Task]:
        """
        Refresh the cached view.

        First call ever (flag unset): run the remote import, persist the flag
        and show the imported set. Afterwards: read everything from the store.
        Never raises; failures resolve to the previous or an empty view.
        """
        async with self._load_lock:
            self._state = ServiceState.LOADING
            try:
                if await asyncio.to_thread(self._bootstrap.is_imported):
                    tasks = await asyncio.to_thread(self._store.list_all)
                else:
                    tasks = await self._bootstrap_import()
            except TaskError:
                logger.exception("Task load failed; keeping the previous view")
                tasks = self._tasks

            self._tasks = sort_tasks(tasks, self._sort_order)
            self._state = ServiceState.READY
            logger.debug("View refreshed tasks=%s order=%s", len(self._tasks), self._sort_order)
            return list(self._tasks)

    async def _bootstrap_import(self) -> list[Task]:
        # The first view is the mapped remote set as returned by the importer. Titles the
        # store already had are not persisted again, so their ids exist only in this view
        # until the next load(); toggling or deleting them logs not-found.
        if self._importer is None:
            logger.info("Remote import disabled; starting from the local store")
            tasks = await asyncio.to_thread(self._store.list_all)
        else:
            tasks = await self._importer.import_once()

        try:
            await asyncio.to_thread(self._bootstrap.mark_imported)
        except StorageError:
            # The next load will attempt the import again; title dedup keeps that harmless.
            logger.warning("Could not persist bootstrap flag")
        return tasks

    # ---- mutations ----

    async def add(
        self,
        title: str,
        details: str = "",
        start_time: float | None = None,
        end_time: float | None = None,
    ) -> Task | None:
        """
        Create a task and refresh the view.

        Raises InvalidTaskError (empty title) or DuplicateTitleError; the store
        is left unchanged in both cases. Returns None if the write was abandoned
        because of a storage failure.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise InvalidTaskError("title must not be empty")

        try:
            task = await asyncio.to_thread(
                self._store.insert, clean_title, details or "", start_time, end_time
            )
        except StorageError:
            logger.warning("add abandoned title=%r", clean_title)
            await self.load()
            return None

        await self.load()
        return task

    async def update(self, task: Task) -> bool:
        """
        Persist every mutable field of `task` (looked up by id) and refresh.

        Raises InvalidTaskError, DuplicateTitleError or TaskNotFoundError.
        Returns False if the write was abandoned because of a storage failure.
        """
        clean_title = (task.title or "").strip()
        if not clean_title:
            raise InvalidTaskError("title must not be empty")

        try:
            await asyncio.to_thread(self._write_task, dataclasses.replace(task, title=clean_title))
        except StorageError:
            logger.warning("update abandoned task_id=%s", task.id)
            await self.load()
            return False

        await self.load()
        return True

    async def toggle_completion(self, task: Task) -> bool:
        """
        Flip completion and refresh. Failures are logged, never raised.

        The view is reloaded from the store either way, so after a failed write
        it shows the stored (unchanged) completion state.
        """
        toggled = dataclasses.replace(task, is_completed=not task.is_completed)
        ok = True
        try:
            await asyncio.to_thread(self._write_task, toggled)
        except TaskError as e:
            ok = False
            logger.warning("Toggle completion failed task_id=%s: %s", task.id, e)

        await self.load()
        return ok

    async def delete(self, task: Task) -> None:
        """Delete by id, then refresh (also when nothing was deleted)."""
        try:
            await asyncio.to_thread(self._store.delete, task.id)
        except StorageError:
            logger.warning("delete abandoned task_id=%s", task.id)
        await self.load()

    def _write_task(self, task: Task) -> None:
        self._store.update(
            task.id,
            title=task.title,
            details=task.details,
            start_time=task.start_time,
            end_time=task.end_time,
            is_completed=task.is_completed,
        )

    # ---- projections ----

    def set_sort_order(self, order: SortOrder | str) -> None:
        """Change the order and re-sort the cached view in place (no store access)."""
        self._sort_order = SortOrder(order)
        self._tasks = sort_tasks(self._tasks, self._sort_order)

    def filtered_view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
        return filter_tasks(self._tasks, TaskFilter(task_filter))

    def counts(self) -> dict[TaskFilter, int]:
        return count_by_filter(self._tasks)
