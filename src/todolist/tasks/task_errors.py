# src/todolist/tasks/task_errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task-management failures."""


class InvalidTaskError(TaskError, ValueError):
    pass


class DuplicateTitleError(TaskError):
    def __init__(self, title: str) -> None:
        super().__init__(f"A task titled {title!r} already exists")
        self.title = title


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} does not exist")
        self.task_id = task_id


class StorageError(TaskError):
    """A read/write against the local database failed; the operation was abandoned."""


class StoreOpenError(StorageError):
    """The local database could not be opened or migrated. Not recoverable at runtime."""


class RemoteImportError(TaskError):
    pass


class ImportNetworkError(RemoteImportError):
    pass


class ImportDecodeError(RemoteImportError):
    pass
