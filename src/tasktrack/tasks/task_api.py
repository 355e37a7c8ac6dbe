# src/tasktrack/tasks/task_api.py

"""
Helpers that touch both backends.

The durable store (SQLite) and the repository's JSON backup are independent
channels; nothing keeps them in sync automatically. The functions here are
the explicit, on-demand reconciliation points used by the console.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path

from ..core.state import AppState
from .task_models import Task, coerce_date
from .task_results import StoreResult

logger = logging.getLogger(__name__)


def create_task(
    state: AppState,
    *,
    title: str,
    due_date: date | str | None,
    category: str = "",
    description: str = "",
    tags: Iterable[str] = (),
) -> StoreResult:
    """
    Insert into the durable store, then add the same task (with its new id)
    to the repository. Nothing reaches the repository if the insert fails.
    """
    result = state.task_store.insert(title, description, due_date, category)
    if not result.ok:
        return result

    task = Task(
        id=result.task_id or 0,
        title=title.strip(),
        description=description,
        due_date=coerce_date(due_date),
        category=category,
        tags=list(tags),
        assigned_user=state.user.username if state.user else None,
    )
    backup_result = state.repository.add(task)
    if not backup_result.ok:
        logger.warning("Task id=%s stored in db but backup failed: %s", task.id, backup_result.error)
    return result


def backup_database(state: AppState) -> StoreResult:
    """Copy every database task into the JSON backup and reload the repository from it."""
    fetched = state.task_store.read_all()
    if not fetched.ok:
        return fetched

    # Tags and owners only live in the backup; keep them for tasks with a known id.
    known = {t.id: t for t in state.repository.tasks if t.id > 0}
    for task in fetched.tasks:
        prev = known.get(task.id)
        if prev is not None:
            task.tags = list(prev.tags)
            task.assigned_user = prev.assigned_user

    saved = state.backup.write_all(fetched.tasks)
    if not saved.ok:
        return saved

    state.repository.restore_from(state.backup)
    logger.info("Backed up %d database tasks (skipped=%d)", len(fetched.tasks), fetched.skipped)
    return StoreResult.success(rowcount=len(fetched.tasks), skipped=fetched.skipped)


def restore_database(state: AppState) -> StoreResult:
    """
    Replace the database contents with the repository's collection.

    Tasks that had no id yet get the one the database assigned, and the
    backup is rewritten so a later backup_database() matches them by id.
    """
    tasks = state.repository.tasks
    result = state.task_store.write_all(tasks)
    if not result.ok:
        return result

    renumbered = 0
    for task, stored in zip(tasks, result.tasks):
        if task.id != stored.id:
            task.id = stored.id
            renumbered += 1
    if renumbered:
        saved = state.repository.save_all()
        if not saved.ok:
            logger.warning("Database restored but new ids not saved to backup: %s", saved.error)

    logger.info("Restored %d tasks into the database (new ids=%d)", result.rowcount, renumbered)
    return result


def render_report(tasks: Sequence[Task]) -> str:
    lines = ["Task List:", "==========================="]
    for task in tasks:
        lines.append(f"Title: {task.title}")
        lines.append(f"Description: {task.description}")
        lines.append(f"Due Date: {task.formatted_due_date() if task.due_date else '-'}")
        lines.append(f"Category: {task.category}")
        lines.append(f"Status: {task.status}")
        lines.append(f"Tags: {task.formatted_tags()}")
        lines.append("---------------------------")
    return "\n".join(lines) + "\n"


def export_report(tasks: Sequence[Task], path: str | Path) -> StoreResult:
    path = Path(path)
    if not tasks:
        return StoreResult.missing("no tasks to export")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_report(tasks), "utf-8")
    except OSError as e:
        logger.exception("Failed to export tasks to %s", path)
        return StoreResult.failure(f"export failed: {e}")
    logger.info("Exported %d tasks to %s", len(tasks), path)
    return StoreResult.success(rowcount=len(tasks))
