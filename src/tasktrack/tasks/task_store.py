# src/tasktrack/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

from .task_models import (
    Task,
    TaskStatus,
    UpdatableField,
    coerce_date,
    format_date,
    normalize_field_value,
    parse_date,
)
from .task_results import StoreResult

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    SQLite task store (the system of record).

    Every public call opens its own connection, runs parameterized
    statements, commits and closes. Storage errors are logged and returned
    as StoreResult.failure(); nothing raises past the public API.

    Column names in UPDATE statements come only from UpdatableField.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("SqliteTaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    due_date TEXT,
                    category TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'Pending'
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due_status ON tasks(status, due_date)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _date_text(value: date | None) -> str | None:
        return format_date(value) if value is not None else None

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        raw_due = row["due_date"]
        due = parse_date(raw_due) if raw_due not in (None, "") else None
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            due_date=due,
            category=str(row["category"] or ""),
            status=TaskStatus.from_raw(row["status"]).value,
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def insert(
        self,
        title: str,
        description: str,
        due_date: date | str | None,
        category: str,
        status: str | None = None,
    ) -> StoreResult:
        if not title or not title.strip():
            return StoreResult.failure("title is required")
        try:
            due = coerce_date(due_date)
        except ValueError:
            logger.warning("Rejected insert title=%r: bad due date %r", title, due_date)
            return StoreResult.failure(f"invalid due date: {due_date!r}")

        try:
            conn = self._get_conn()
            try:
                cur = conn.execute(
                    """
                    INSERT INTO tasks(title, description, due_date, category, status)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        title.strip(),
                        description or "",
                        self._date_text(due),
                        category or "",
                        TaskStatus.from_raw(status).value,
                    ),
                )
                conn.commit()
                task_id = cur.lastrowid
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Task insert failed title=%r", title)
            return StoreResult.failure(f"insert failed: {e}")

        if task_id is None:
            return StoreResult.failure("SQLite did not return lastrowid for task insert")
        logger.info("Task added id=%s title=%r due=%s", task_id, title, due)
        return StoreResult.success(rowcount=1, task_id=int(task_id))

    def fetch_all(self) -> StoreResult:
        """
        Return every row ordered by id.

        A row whose due_date text does not parse is skipped and logged; the
        remaining rows are still returned (`skipped` counts the dropped ones).
        """
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Task fetch failed db=%s", self._db_path)
            return StoreResult.failure(f"fetch failed: {e}")

        tasks: list[Task] = []
        skipped = 0
        for row in rows:
            try:
                tasks.append(self._row_to_task(row))
            except ValueError:
                skipped += 1
                logger.warning("Skipping task id=%s: unparseable due_date %r", row["id"], row["due_date"])
        return StoreResult.success(tasks=tasks, rowcount=len(tasks), skipped=skipped)

    def get_by_id(self, task_id: int) -> Task | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            finally:
                conn.close()
            return self._row_to_task(row) if row else None
        except (sqlite3.Error, ValueError):
            logger.exception("Task lookup failed id=%s", task_id)
            return None

    def update_field(self, task_id: int, field: UpdatableField | str, new_value: Any) -> StoreResult:
        parsed = UpdatableField.parse(field)
        if parsed is None:
            logger.warning("Rejected update id=%s: unknown field %r", task_id, field)
            return StoreResult.failure(f"unknown field: {field!r}")
        try:
            value = normalize_field_value(parsed, new_value)
        except ValueError as e:
            logger.warning("Rejected update id=%s field=%s: %s", task_id, parsed.value, e)
            return StoreResult.failure(f"invalid value for {parsed.value}: {e}")

        if parsed is UpdatableField.DUE_DATE:
            value = self._date_text(value)
        return self._execute_update(
            f"UPDATE tasks SET {parsed.column} = ? WHERE id = ?",
            (value, int(task_id)),
            what=f"{parsed.value} id={task_id}",
        )

    def update_status(self, task_id: int, new_status: str) -> StoreResult:
        return self._execute_update(
            "UPDATE tasks SET status = ? WHERE id = ?",
            (TaskStatus.from_raw(new_status).value, int(task_id)),
            what=f"status id={task_id}",
        )

    def delete_by_id(self, task_id: int) -> StoreResult:
        return self._execute_update(
            "DELETE FROM tasks WHERE id = ?",
            (int(task_id),),
            what=f"delete id={task_id}",
        )

    def _execute_update(self, sql: str, params: tuple[Any, ...], *, what: str) -> StoreResult:
        try:
            conn = self._get_conn()
            try:
                cur = conn.execute(sql, params)
                conn.commit()
                rowcount = cur.rowcount
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Task update failed (%s)", what)
            return StoreResult.failure(f"update failed: {e}")

        if rowcount < 1:
            logger.info("Task not found (%s)", what)
            return StoreResult.missing("task not found")
        logger.debug("Task updated (%s)", what)
        return StoreResult.success(rowcount=rowcount)

    # ---- TaskStore port ----

    def read_all(self) -> StoreResult:
        return self.fetch_all()

    def write_all(self, tasks: Sequence[Task]) -> StoreResult:
        """
        Replace the table contents in one transaction; ids > 0 are kept.

        The result carries copies of the written tasks with their stored ids,
        so callers can learn the ids assigned to tasks that had none.
        """
        written: list[Task] = []
        try:
            conn = self._get_conn()
            try:
                with conn:
                    conn.execute("DELETE FROM tasks")
                    for task in tasks:
                        cur = conn.execute(
                            """
                            INSERT INTO tasks(id, title, description, due_date, category, status)
                            VALUES (?, ?, ?, ?, ?, ?)
                            """,
                            (
                                task.id if task.id > 0 else None,
                                task.title,
                                task.description or "",
                                self._date_text(task.due_date),
                                task.category or "",
                                TaskStatus.from_raw(task.status).value,
                            ),
                        )
                        written.append(replace(task, id=int(cur.lastrowid or task.id), tags=list(task.tags)))
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Task write_all failed db=%s", self._db_path)
            return StoreResult.failure(f"write failed: {e}")

        logger.info("Replaced %d tasks in db=%s", len(written), self._db_path)
        return StoreResult.success(tasks=written, rowcount=len(written))

    def apply_field(self, task_id: int, field: UpdatableField | str, value: Any) -> StoreResult:
        return self.update_field(task_id, field, value)

