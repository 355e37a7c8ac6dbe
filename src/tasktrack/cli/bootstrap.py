# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store, the JSON backup and the repository into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_backup import JsonBackupStore
from ..tasks.task_models import User
from ..tasks.task_repository import TaskRepository
from ..tasks.task_store import SqliteTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.backup_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    backup = JsonBackupStore(settings.backup_path)
    repository = TaskRepository(backup)
    if not repository.load_result.ok:
        logger.info("Backup not loaded (%s): %s", repository.load_result.kind.value, repository.load_result.error)

    username = str(getattr(settings, "username", "") or "").strip()
    user = User(username=username, role=str(getattr(settings, "user_role", "user"))) if username else None

    return AppState(
        settings=settings,
        task_store=SqliteTaskStore(settings.tasks_db_path),
        backup=backup,
        repository=repository,
        user=user,
    )
