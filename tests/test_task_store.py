# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path

from tasktrack.tasks.task_models import Task, UpdatableField
from tasktrack.tasks.task_results import ResultKind
from tasktrack.tasks.task_store import SqliteTaskStore


def _raw_insert(db: Path, title: str, due: str | None, status: str | None) -> None:
    conn = sqlite3.connect(str(db))
    try:
        conn.execute(
            "INSERT INTO tasks(title, description, due_date, category, status) VALUES (?, '', ?, 'Work', ?)",
            (title, due, status if status is not None else ""),
        )
        conn.commit()
    finally:
        conn.close()


def test_insert_fetch_update_delete(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")

    res = store.insert("Pay rent", "flat", date(2026, 11, 1), "Personal", "")
    assert res.ok
    assert res.task_id and res.task_id > 0

    fetched = store.fetch_all()
    assert fetched.ok
    assert len(fetched.tasks) == 1
    task = fetched.tasks[0]
    assert task.id == res.task_id
    assert task.title == "Pay rent"
    assert task.due_date == date(2026, 11, 1)
    assert task.status == "Pending"

    assert store.update_field(task.id, UpdatableField.TITLE, "Pay the rent").ok
    assert store.update_field(task.id, "due date", "2026-12-01").ok
    assert store.update_status(task.id, "completed").ok

    again = store.get_by_id(task.id)
    assert again is not None
    assert again.title == "Pay the rent"
    assert again.due_date == date(2026, 12, 1)
    assert again.status == "Completed"

    assert store.delete_by_id(task.id).ok
    assert store.fetch_all().tasks == []
    assert store.count_tasks() == 0


def test_due_date_is_stored_as_canonical_text(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    store.insert("a", "", "2026-01-05", "Study")

    conn = sqlite3.connect(str(db))
    try:
        (raw,) = conn.execute("SELECT due_date FROM tasks").fetchone()
    finally:
        conn.close()
    assert raw == "2026-01-05"


def test_insert_rejects_blank_title_and_bad_date(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    assert store.insert("  ", "", "2026-01-01", "").kind is ResultKind.FAILED
    assert store.insert("x", "", "01/02/2026", "").kind is ResultKind.FAILED
    assert store.count_tasks() == 0


def test_blank_stored_status_reads_as_pending(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    _raw_insert(db, "legacy", "2026-02-02", "")
    assert store.fetch_all().tasks[0].status == "Pending"


def test_bad_due_date_row_is_skipped_not_fatal(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    store.insert("good one", "", "2026-02-01", "Work")
    _raw_insert(db, "broken", "March 3rd", "Pending")
    store.insert("good two", "", "2026-02-03", "Work")

    res = store.fetch_all()
    assert res.ok
    assert res.skipped == 1
    assert [t.title for t in res.tasks] == ["good one", "good two"]


def test_update_field_refuses_unknown_columns(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    task_id = store.insert("t", "", "2026-01-01", "Work").task_id
    assert task_id is not None

    res = store.update_field(task_id, "title = 'pwned', status", "x")
    assert res.kind is ResultKind.FAILED
    assert store.update_field(task_id, "id", "99").kind is ResultKind.FAILED
    assert store.update_field(task_id, UpdatableField.DUE_DATE, "soon").kind is ResultKind.FAILED
    assert store.get_by_id(task_id).title == "t"


def test_missing_rows_are_reported(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    assert store.update_status(404, "Completed").kind is ResultKind.MISSING
    assert store.update_field(404, UpdatableField.CATEGORY, "Work").kind is ResultKind.MISSING
    assert store.delete_by_id(404).kind is ResultKind.MISSING
    assert store.get_by_id(404) is None


def test_write_all_replaces_contents_and_keeps_ids(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    store.insert("old", "", "2026-01-01", "")

    res = store.write_all(
        [
            Task(id=10, title="kept id", due_date=date(2026, 1, 2)),
            Task(title="new id", due_date=None, status="Completed"),
        ]
    )
    assert res.ok
    tasks = store.read_all().tasks
    assert [t.title for t in tasks] == ["kept id", "new id"]
    assert tasks[0].id == 10
    assert tasks[1].id > 10
    assert tasks[1].due_date is None
    assert tasks[1].status == "Completed"


def test_write_all_is_atomic_on_failure(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    store.insert("survivor", "", "2026-01-01", "")

    res = store.write_all([Task(id=1, title="a"), Task(id=1, title="dup")])
    assert res.kind is ResultKind.FAILED
    assert [t.title for t in store.fetch_all().tasks] == ["survivor"]


def test_unreachable_database_degrades_to_failure(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    db.unlink()
    db.mkdir()  # a directory where the db file should be

    assert store.fetch_all().kind is ResultKind.FAILED
    assert store.insert("x", "", "2026-01-01", "").kind is ResultKind.FAILED


def test_typo_year_is_stored_padded_and_reads_back(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    task_id = store.insert("typo", "", "0202-05-01", "").task_id
    assert task_id is not None

    res = store.fetch_all()
    assert res.skipped == 0
    assert res.tasks[0].due_date == date(202, 5, 1)

    assert store.update_field(task_id, UpdatableField.DUE_DATE, date(999, 1, 2)).ok
    assert store.get_by_id(task_id).due_date == date(999, 1, 2)


def test_write_all_reports_assigned_ids(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    offline = Task(title="offline", tags=["x"])

    res = store.write_all([Task(id=3, title="known"), offline])

    assert [t.title for t in res.tasks] == ["known", "offline"]
    assert res.tasks[0].id == 3
    assert res.tasks[1].id == store.read_all().tasks[1].id
    assert res.tasks[1].tags == ["x"]
    assert offline.id == 0
