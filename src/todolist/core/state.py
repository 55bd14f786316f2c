# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.bootstrap_state import BootstrapState
from ..tasks.task_importer import RemoteTaskImporter
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are kept on the state for easy access by the embedding shell.
    settings: Any

    task_store: TaskStore
    bootstrap: BootstrapState
    importer: RemoteTaskImporter | None
    service: TaskService
