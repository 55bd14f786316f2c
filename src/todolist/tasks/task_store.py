# src/todolist/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from .task_errors import DuplicateTitleError, StorageError, StoreOpenError, TaskNotFoundError
from .task_models import Task, new_task_id

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Concurrency:
    - each method opens its own SQLite connection
    - every mutation runs under one process-wide lock, inside a single
      BEGIN IMMEDIATE transaction, so readers never see half of a write
    - reads take no lock

    Title uniqueness is a case-sensitive exact match (SQLite BINARY collation).
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._write_lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (sqlite3.Error, OSError) as e:
            logger.critical("Cannot open task database db=%s: %s", self._db_path, e)
            raise StoreOpenError(f"cannot open task database at {self._db_path}") from e

        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly by _write_txn.
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _write_txn(self, op: str) -> Iterator[sqlite3.Connection]:
        """
        Serialized write transaction.

        Task errors raised inside the block roll back and propagate unchanged;
        sqlite failures roll back and surface as StorageError.
        """
        with self._write_lock:
            try:
                conn = self._get_conn()
            except sqlite3.Error as e:
                logger.exception("%s: cannot connect to db=%s", op, self._db_path)
                raise StorageError(f"{op} failed") from e
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                with contextlib.suppress(sqlite3.Error):
                    conn.execute("ROLLBACK")
                logger.exception("%s failed; change abandoned", op)
                raise StorageError(f"{op} failed") from e
            except BaseException:
                with contextlib.suppress(sqlite3.Error):
                    conn.execute("ROLLBACK")
                raise
            finally:
                conn.close()

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    details TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            # Databases created before time-boxing lack these.
            add_col("start_time", "REAL")
            add_col("end_time", "REAL")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_title ON tasks(title)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            details=str(row["details"] or ""),
            created_at=float(row["created_at"] or 0.0),
            start_time=float(row["start_time"]) if row["start_time"] is not None else None,
            end_time=float(row["end_time"]) if row["end_time"] is not None else None,
            is_completed=bool(row["is_completed"]),
        )

    @staticmethod
    def _title_taken(conn: sqlite3.Connection, title: str, *, exclude_id: str | None = None) -> bool:
        if exclude_id is None:
            cur = conn.execute("SELECT 1 FROM tasks WHERE title = ? LIMIT 1", (title,))
        else:
            cur = conn.execute(
                "SELECT 1 FROM tasks WHERE title = ? AND id != ? LIMIT 1",
                (title, exclude_id),
            )
        return cur.fetchone() is not None

    @staticmethod
    def _insert_row(conn: sqlite3.Connection, task: Task) -> None:
        conn.execute(
            """
            INSERT INTO tasks(id, title, details, created_at, start_time, end_time, is_completed)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.title,
                task.details,
                float(task.created_at),
                task.start_time,
                task.end_time,
                int(bool(task.is_completed)),
            ),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        try:
            conn = self._get_conn()
            try:
                (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
                return int(n)
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("count_tasks failed")
            return 0

    def list_all(self) -> list[Task]:
        """Every stored task. Read failures degrade to an empty list."""
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM tasks ORDER BY created_at DESC").fetchall()
                return [self._row_to_task(r) for r in rows]
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("list_all failed; returning no tasks")
            return []

    def get(self, task_id: str) -> Task | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
                return self._row_to_task(row) if row else None
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("get failed task_id=%s", task_id)
            return None

    def insert(
        self,
        title: str,
        details: str = "",
        start_time: float | None = None,
        end_time: float | None = None,
    ) -> Task:
        """
        Create a task with a fresh id and created_at.

        Raises DuplicateTitleError if any stored task already has this exact title.
        """
        task = Task(
            id=new_task_id(),
            title=title,
            details=details or "",
            created_at=time.time(),
            start_time=start_time,
            end_time=end_time,
            is_completed=False,
        )

        with self._write_txn("insert") as conn:
            if self._title_taken(conn, title):
                logger.info("Insert rejected: duplicate title=%r", title)
                raise DuplicateTitleError(title)
            self._insert_row(conn, task)

        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task

    def update(
        self,
        task_id: str,
        *,
        title: str,
        details: str,
        start_time: float | None,
        end_time: float | None,
        is_completed: bool,
    ) -> None:
        """
        Overwrite every mutable field of the task with this id.

        Raises TaskNotFoundError for an unknown id and DuplicateTitleError when
        another task already uses the title.
        """
        with self._write_txn("update") as conn:
            exists = conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if exists is None:
                raise TaskNotFoundError(task_id)
            if self._title_taken(conn, title, exclude_id=task_id):
                logger.info("Update rejected: duplicate title=%r task_id=%s", title, task_id)
                raise DuplicateTitleError(title)
            conn.execute(
                """
                UPDATE tasks
                SET title = ?,
                    details = ?,
                    start_time = ?,
                    end_time = ?,
                    is_completed = ?
                WHERE id = ?
                """,
                (title, details or "", start_time, end_time, int(bool(is_completed)), task_id),
            )

        logger.debug("Task updated id=%s completed=%s", task_id, is_completed)

    def delete(self, task_id: str) -> None:
        """Remove the task if present. A missing id is logged and ignored."""
        with self._write_txn("delete") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            removed = cur.rowcount

        if removed:
            logger.debug("Task deleted id=%s", task_id)
        else:
            logger.info("Delete ignored: no task with id=%s", task_id)

    def bulk_insert_if_absent(self, tasks: Iterable[Task]) -> int:
        """
        Insert imported tasks, skipping any whose title is already stored
        (including titles inserted earlier in the same batch).

        Returns the number of rows actually inserted.
        """
        inserted = 0
        skipped = 0
        with self._write_txn("bulk_insert_if_absent") as conn:
            for task in tasks:
                if self._title_taken(conn, task.title):
                    skipped += 1
                    continue
                self._insert_row(conn, task)
                inserted += 1

        logger.info("Bulk insert done inserted=%s skipped_duplicates=%s", inserted, skipped)
        return inserted
