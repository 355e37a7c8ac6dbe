# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The repository and the console depend on this Protocol rather than on a
concrete backend, so the SQLite store and the JSON backup are swappable and
tests can pass an in-memory fake.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..tasks.task_models import Task, UpdatableField
from ..tasks.task_results import StoreResult


class TaskStore(Protocol):
    """Whole-collection read/write plus a single-field change, by task id."""

    def read_all(self) -> StoreResult: ...

    def write_all(self, tasks: Sequence[Task]) -> StoreResult: ...

    def apply_field(
            self,
            task_id: int,
            field: UpdatableField | str,
            value: Any,
    ) -> StoreResult: ...
