# src/tasktrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a local default.
- Modules receive settings explicitly; get_settings() is for the entrypoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKTRACK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool
    echo_enabled: bool
    echo_host: str
    echo_port: int

    # ---- Current user (carried, not enforced) ----
    username: str
    user_role: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    backup_path: Path
    export_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasktrack") or "tasktrack"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        echo_enabled = _env_bool(_k("ECHO_ENABLED"), False)
        echo_host = _env(_k("ECHO_HOST"), "127.0.0.1").strip() or "127.0.0.1"
        echo_port = _env_int(_k("ECHO_PORT"), 5000)

        username = (_env(_k("USER"), "") or os.getenv("USER") or "local").strip()
        user_role = _env(_k("USER_ROLE"), "user").strip() or "user"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasktrack"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        backup_path = _env_path(_k("BACKUP_PATH"), data_dir / "tasks.json")
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks.txt")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            echo_enabled=echo_enabled,
            echo_host=echo_host,
            echo_port=echo_port,
            username=username,
            user_role=user_role,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            backup_path=backup_path,
            export_path=export_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
