# src/todolist/app/bootstrap.py

"""
Composition root.

- loads settings once (or takes them injected),
- configures logging,
- ensures local (gitignored) directories exist,
- wires the store, bootstrap flag, importer and service into AppState.

A database that cannot be opened aborts startup with StoreOpenError;
there is no in-memory fallback.
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_settings
from ..core.state import AppState
from ..logging_setup import level_from_name, setup_logging
from ..tasks.bootstrap_state import BootstrapState
from ..tasks.task_importer import RemoteTaskImporter
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    configure_logging: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings(). `transport` is handed to
    the importer's HTTP client (tests pass httpx.MockTransport).
    """
    if settings is None:
        settings = get_settings()

    if configure_logging:
        setup_logging(
            log_dir=settings.data_dir,
            console_level=level_from_name(getattr(settings, "log_level", "INFO")),
            log_to_file=bool(getattr(settings, "log_to_file", True)),
        )

    _ensure_local_dirs(settings)
    logger.info("Starting %s...", getattr(settings, "app_name", "todolist"))

    # Both raise StoreOpenError on a corrupt/inaccessible database; let it propagate.
    task_store = TaskStore(settings.tasks_db_path)
    bootstrap = BootstrapState(settings.tasks_db_path)

    importer: RemoteTaskImporter | None = None
    if settings.import_enabled:
        importer = RemoteTaskImporter(
            task_store,
            url=settings.import_url,
            timeout_seconds=settings.import_timeout_seconds,
            transport=transport,
        )

    service = TaskService(task_store, bootstrap, importer)

    return AppState(
        settings=settings,
        task_store=task_store,
        bootstrap=bootstrap,
        importer=importer,
        service=service,
    )
