# src/tasktrack/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.task_backup import JsonBackupStore
from ..tasks.task_models import User
from ..tasks.task_repository import TaskRepository
from ..tasks.task_store import SqliteTaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: SqliteTaskStore
    backup: JsonBackupStore
    repository: TaskRepository
    user: User | None = None

    # Serializes repository access between the console and anything else.
    lock: threading.Lock = field(default_factory=threading.Lock)
