# tests/test_task_backup.py

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from tasktrack.tasks.task_backup import JsonBackupStore
from tasktrack.tasks.task_models import Task, UpdatableField
from tasktrack.tasks.task_results import ResultKind


def _sample() -> list[Task]:
    return [
        Task(id=1, title="Gym", due_date=date(2026, 1, 31), category="Personal", tags=["health"]),
        Task(
            title="Thesis draft",
            description="chapter 2: сноски",
            due_date=date(2024, 2, 29),
            category="Study",
            status="Completed",
            tags=["uni", "writing"],
            assigned_user="alice",
        ),
    ]


def test_save_then_load_gives_back_the_same_tasks(tmp_path: Path) -> None:
    store = JsonBackupStore(tmp_path / "tasks.json")
    tasks = _sample()

    assert store.save(tasks).ok
    loaded = store.load()

    assert loaded.kind is ResultKind.OK
    assert loaded.tasks == tasks


def test_missing_file_is_empty_not_an_error(tmp_path: Path) -> None:
    res = JsonBackupStore(tmp_path / "nope.json").load()
    assert res.kind is ResultKind.MISSING
    assert res.tasks == []


def test_corrupt_file_is_a_failure_with_no_tasks(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("[{not json", "utf-8")
    res = JsonBackupStore(path).load()
    assert res.kind is ResultKind.FAILED
    assert res.tasks == []

    path.write_text('{"title": "not an array"}', "utf-8")
    assert JsonBackupStore(path).load().kind is ResultKind.FAILED


def test_bad_records_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"title": "ok", "due_date": "2026-01-01"},
                {"title": "bad date", "due_date": "Jan 1, 2026, 12:00:00 AM"},
                {"description": "no title"},
                "junk",
            ]
        ),
        "utf-8",
    )
    res = JsonBackupStore(path).load()
    assert res.ok
    assert [t.title for t in res.tasks] == ["ok"]
    assert res.skipped == 3


def test_save_overwrites_previous_content(tmp_path: Path) -> None:
    store = JsonBackupStore(tmp_path / "tasks.json")
    store.save(_sample())
    store.save([Task(title="only one", due_date=date(2026, 1, 1))])
    assert [t.title for t in store.load().tasks] == ["only one"]
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_save_failure_is_reported_and_keeps_old_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = JsonBackupStore(path)
    store.save(_sample())

    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory", "utf-8")
    bad = JsonBackupStore(blocker / "tasks.json")
    assert bad.save(_sample()).kind is ResultKind.FAILED

    assert len(store.load().tasks) == 2


def test_dates_are_written_in_canonical_format(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    JsonBackupStore(path).save(_sample())
    raw = json.loads(path.read_text("utf-8"))
    assert [r["due_date"] for r in raw] == ["2026-01-31", "2024-02-29"]


def test_apply_field_changes_one_task(tmp_path: Path) -> None:
    store = JsonBackupStore(tmp_path / "tasks.json")
    store.save(_sample())

    assert store.apply_field(1, UpdatableField.CATEGORY, "Work").ok
    assert store.apply_field(99, "category", "Work").kind is ResultKind.MISSING
    assert store.apply_field(1, "tags", "x").kind is ResultKind.FAILED

    assert store.load().tasks[0].category == "Work"


def test_early_year_due_date_survives_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = JsonBackupStore(path)
    store.save([Task(title="ancient", due_date=date(999, 1, 2))])

    assert json.loads(path.read_text("utf-8"))[0]["due_date"] == "0999-01-02"
    res = store.load()
    assert res.skipped == 0
    assert [t.due_date for t in res.tasks] == [date(999, 1, 2)]
