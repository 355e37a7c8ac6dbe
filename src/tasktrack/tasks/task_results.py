# src/tasktrack/tasks/task_results.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .task_models import Task


class ResultKind(StrEnum):
    OK = "ok"
    MISSING = "missing"  # no backup file yet / no row with that id
    FAILED = "failed"  # unreadable storage, corrupt data or rejected input


@dataclass(frozen=True, slots=True)
class StoreResult:
    """
    Outcome of a storage call.

    Stores never raise past their public methods; callers check `kind`
    to tell "nothing stored yet" apart from "could not read/write".
    """

    kind: ResultKind
    tasks: list[Task] = field(default_factory=list)
    rowcount: int = 0
    task_id: int | None = None
    skipped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def success(
        cls,
        *,
        tasks: list[Task] | None = None,
        rowcount: int = 0,
        task_id: int | None = None,
        skipped: int = 0,
    ) -> StoreResult:
        return cls(
            kind=ResultKind.OK,
            tasks=list(tasks or []),
            rowcount=rowcount,
            task_id=task_id,
            skipped=skipped,
        )

    @classmethod
    def missing(cls, error: str | None = None) -> StoreResult:
        return cls(kind=ResultKind.MISSING, error=error)

    @classmethod
    def failure(cls, error: str) -> StoreResult:
        return cls(kind=ResultKind.FAILED, error=error)
