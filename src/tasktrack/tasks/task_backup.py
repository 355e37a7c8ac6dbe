# src/tasktrack/tasks/task_backup.py

"""
JSON backup of the whole task collection.

The file is a pretty-printed JSON array of task records, rewritten in full on
every save (temp file + os.replace, so a failed write never truncates the
previous backup). A missing file means "no tasks yet"; a corrupt file yields
an empty collection with ResultKind.FAILED so callers can tell the two apart.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .task_models import Task, UpdatableField, normalize_field_value
from .task_results import StoreResult

logger = logging.getLogger(__name__)


class JsonBackupStore:
    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, tasks: Sequence[Task]) -> StoreResult:
        try:
            payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to back up tasks to %s", self._path)
            return StoreResult.failure(f"backup write failed: {e}")

        logger.debug("Backed up %d tasks to %s", len(tasks), self._path)
        return StoreResult.success(rowcount=len(tasks))

    def load(self) -> StoreResult:
        if not self._path.exists():
            logger.info("No task backup at %s; starting empty.", self._path)
            return StoreResult.missing(f"{self._path} not found")

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Failed to read task backup %s: %s", self._path, e)
            return StoreResult.failure(f"backup unreadable: {e}")

        if not isinstance(data, list):
            logger.error("Task backup %s is not a JSON array; ignoring it.", self._path)
            return StoreResult.failure("backup is not a JSON array")

        tasks: list[Task] = []
        skipped = 0
        for i, record in enumerate(data):
            if not isinstance(record, dict):
                skipped += 1
                logger.warning("Skipping backup record #%d: not an object", i)
                continue
            try:
                tasks.append(Task.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                skipped += 1
                logger.warning("Skipping backup record #%d: %s", i, e)

        logger.info("Loaded %d tasks from %s (skipped=%d)", len(tasks), self._path, skipped)
        return StoreResult.success(tasks=tasks, rowcount=len(tasks), skipped=skipped)

    # ---- TaskStore port ----

    def read_all(self) -> StoreResult:
        return self.load()

    def write_all(self, tasks: Sequence[Task]) -> StoreResult:
        return self.save(tasks)

    def apply_field(self, task_id: int, field: UpdatableField | str, value: Any) -> StoreResult:
        parsed = UpdatableField.parse(field)
        if parsed is None:
            return StoreResult.failure(f"unknown field: {field!r}")
        try:
            normalize_field_value(parsed, value)
        except ValueError as e:
            return StoreResult.failure(f"invalid value for {parsed.value}: {e}")

        loaded = self.load()
        if not loaded.ok:
            return loaded
        if loaded.skipped:
            # Rewriting would silently drop the records we could not parse.
            return StoreResult.failure("backup has unreadable records; not rewriting it")
        for task in loaded.tasks:
            if task.id == int(task_id):
                task.apply(parsed, value)
                saved = self.save(loaded.tasks)
                return StoreResult.success(rowcount=1) if saved.ok else saved
        return StoreResult.missing("task not found")
