# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktrack.cli.bootstrap import create_initial_state
from tasktrack.core.state import AppState


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasktrack-test",
        log_level="DEBUG",
        console_enabled=False,
        echo_enabled=False,
        echo_host="127.0.0.1",
        echo_port=0,
        username="alice",
        user_role="admin",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        backup_path=tmp_path / "tasks.json",
        export_path=tmp_path / "tasks.txt",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired exactly like the CLI does it.

    NOTE: We keep the real SQLite store and JSON backup here because
    their behavior is part of what we want to test.
    """
    return create_initial_state(settings=settings)
