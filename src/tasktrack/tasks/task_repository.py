# src/tasktrack/tasks/task_repository.py

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from ..core.ports import TaskStore
from .task_models import MissingDueDateError, Task, is_completed
from .task_results import StoreResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    due_today: int
    by_category: dict[str, int] = field(default_factory=dict)

    @property
    def completed_pct(self) -> float:
        return self.completed * 100.0 / self.total if self.total else 0.0

    @property
    def pending_pct(self) -> float:
        return self.pending * 100.0 / self.total if self.total else 0.0


class TaskRepository:
    """
    In-memory owner of the task collection.

    Loads once from the backup store, then writes the whole collection back
    after every mutation (write-through). Each save is O(n) in the number of
    tasks, which is fine for a personal list of a few thousand tasks.

    Not thread-safe: callers serialize access (the console holds state.lock).
    """

    def __init__(self, backup: TaskStore) -> None:
        self._backup = backup
        self.load_result: StoreResult = backup.read_all()
        self._tasks: list[Task] = list(self.load_result.tasks)
        self.last_write: StoreResult | None = None
        logger.info(
            "TaskRepository ready tasks=%d load=%s",
            len(self._tasks),
            self.load_result.kind.value,
        )

    # ---- collection access ----

    @property
    def tasks(self) -> list[Task]:
        return self._tasks

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- mutations (write-through) ----

    def add(self, task: Task) -> StoreResult:
        self._tasks.append(task)
        return self.save_all()

    def remove_by_title(self, title: str) -> int:
        before = len(self._tasks)
        self._tasks[:] = [t for t in self._tasks if t.title != title]
        removed = before - len(self._tasks)
        self.save_all()
        logger.debug("Removed %d task(s) titled %r", removed, title)
        return removed

    def mark_completed_by_title(self, title: str) -> bool:
        task = self.find_by_title(title)
        if task is None:
            return False
        task.mark_completed()
        self.save_all()
        return True

    def save_all(self) -> StoreResult:
        self.last_write = self._backup.write_all(self._tasks)
        if not self.last_write.ok:
            logger.warning("Write-through failed: %s", self.last_write.error)
        return self.last_write

    def replace_all(self, tasks: Iterable[Task]) -> None:
        self._tasks[:] = list(tasks)

    def restore_from(self, store: TaskStore) -> StoreResult:
        """Replace the collection with everything `store` holds (no save)."""
        result = store.read_all()
        if result.ok:
            self.replace_all(result.tasks)
            logger.info("Restored %d tasks", len(result.tasks))
        else:
            logger.warning("Restore skipped (%s): %s", result.kind.value, result.error)
        return result

    # ---- queries ----

    def find_by_title(self, title: str) -> Task | None:
        for task in self._tasks:
            if task.title == title:
                return task
        return None

    def sort_by_due_date(self) -> None:
        missing = [t.title for t in self._tasks if t.due_date is None]
        if missing:
            raise MissingDueDateError(f"cannot sort, no due date on: {', '.join(missing)}")
        self._tasks.sort(key=lambda t: t.due_date)

    def filter_completed(self) -> list[Task]:
        return [t for t in self._tasks if is_completed(t.status)]

    def filter_pending(self) -> list[Task]:
        return [t for t in self._tasks if not is_completed(t.status)]

    def filter_due_today(self, today: date | None = None) -> list[Task]:
        today = today or date.today()
        return [t for t in self._tasks if t.due_date == today]

    def filter_overdue(self, today: date | None = None) -> list[Task]:
        today = today or date.today()
        return [
            t
            for t in self._tasks
            if t.due_date is not None and t.due_date < today and not is_completed(t.status)
        ]

    def filter_by_category(self, category: str) -> list[Task]:
        wanted = (category or "").casefold()
        return [t for t in self._tasks if (t.category or "").casefold() == wanted]

    def filter_by_tag(self, tag: str) -> list[Task]:
        return [t for t in self._tasks if tag in t.tags]

    def stats(self, today: date | None = None) -> TaskStats:
        today = today or date.today()
        completed = len(self.filter_completed())
        return TaskStats(
            total=len(self._tasks),
            completed=completed,
            pending=len(self._tasks) - completed,
            overdue=len(self.filter_overdue(today)),
            due_today=len(self.filter_due_today(today)),
            by_category=dict(Counter(t.category or "Uncategorized" for t in self._tasks)),
        )
