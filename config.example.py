# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific paths in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKTRACK_APP_NAME": "App display name (default: tasktrack).",
    "TASKTRACK_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "TASKTRACK_CONSOLE_ENABLED": "Enable console connector (true/false).",
    "TASKTRACK_ECHO_ENABLED": "Enable the line-echo demo listener (true/false, default: false).",
    "TASKTRACK_ECHO_HOST": "Echo listener bind address (default: 127.0.0.1).",
    "TASKTRACK_ECHO_PORT": "Echo listener TCP port (default: 5000).",
    # Current user
    "TASKTRACK_USER": "Username stamped on new tasks (default: $USER, else 'local').",
    "TASKTRACK_USER_ROLE": "Role shown by /whoami (default: user).",
    # Paths (gitignored)
    "TASKTRACK_DATA_DIR": "Local data directory (default: .local/tasktrack).",
    "TASKTRACK_TASKS_DB_PATH": "SQLite database path (default: <data_dir>/tasks.sqlite3).",
    "TASKTRACK_BACKUP_PATH": "JSON backup file path (default: <data_dir>/tasks.json).",
    "TASKTRACK_EXPORT_PATH": "Text report path for /export (default: <data_dir>/tasks.txt).",
}
