# src/tasktrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

ECHO_LOGGER_PREFIX = "tasktrack.connectors.echo_"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable while the user types commands.

    The echo listener logs from its own thread on every client line, which
    would interleave with the prompt; only its warnings reach the console.
    Everything outside the tasktrack namespace (asyncio, py.warnings) is
    shown at ERROR only. The log file still receives all of it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(ECHO_LOGGER_PREFIX):
            return record.levelno >= logging.WARNING
        if name.startswith("tasktrack."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasktrack",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send filtered logs to stderr and full logs to <log_dir>/tasktrack.log.

    Must run before the stores are built so their "ready" lines are captured.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasktrack.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
