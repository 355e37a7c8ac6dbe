# src/tasktrack/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import DATE_FORMAT, DEFAULT_CATEGORIES, MissingDueDateError, Task, UpdatableField
from ..tasks.task_results import ResultKind, StoreResult

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are split on single spaces, so " ".join(args) gives back
        the text after the command name exactly (titles may contain runs of
        spaces).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1].rstrip() if len(parts) > 1 else ""
        args = rest.split(" ") if rest else []

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _pipe_args(args: list[str]) -> list[str]:
    """'/add Buy milk | 2026-01-02 | Personal' -> ['Buy milk', '2026-01-02', 'Personal']"""
    return [p.strip() for p in " ".join(args).split("|")]


def _format_tasks(tasks: Sequence[Task], empty: str) -> str:
    if not tasks:
        return empty
    lines = []
    for i, t in enumerate(tasks, start=1):
        ref = f"#{t.id} " if t.id else ""
        lines.append(f"{i}. {ref}{t}")
    return "\n".join(lines)


def _describe(result: StoreResult, done: str) -> str:
    if result.ok:
        return done
    if result.kind is ResultKind.MISSING:
        return f"Not found: {result.error or 'no matching task'}."
    return f"Failed: {result.error}."


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    load = state.repository.load_result
    last = state.repository.last_write
    return (
        "Status:\n"
        f"  Tasks in memory: {len(state.repository)} (backup load: {load.kind.value})\n"
        f"  Last backup write: {last.kind.value if last else 'none yet'}\n"
        f"  Backup file: {getattr(settings, 'backup_path', '?')}\n"
        f"  Database: {state.task_store.db_path} ({state.task_store.count_tasks()} rows)"
    )


def cmd_whoami(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return "No current user."
    return f"{state.user.username} (role: {state.user.role})"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> all tasks
    /list done       -> completed
    /list pending    -> not completed
    /list today      -> due today
    /list overdue    -> past due and not completed
    """
    repo = state.repository
    sub = args[0].lower() if args else "all"
    if sub == "all":
        return _format_tasks(repo.all_tasks(), "No tasks yet.")
    if sub in ("done", "completed"):
        return _format_tasks(repo.filter_completed(), "No completed tasks found.")
    if sub == "pending":
        return _format_tasks(repo.filter_pending(), "No pending tasks found.")
    if sub == "today":
        return _format_tasks(repo.filter_due_today(), "Nothing is due today.")
    if sub == "overdue":
        return _format_tasks(repo.filter_overdue(), "No overdue tasks.")
    return "Usage: /list [all|done|pending|today|overdue]"


def cmd_add(state: AppState, args: list[str]) -> str:
    parts = _pipe_args(args)
    if len(parts) < 2 or not parts[0]:
        return f"Usage: /add title | due ({DATE_FORMAT}) | category | description"
    title, due = parts[0], parts[1]
    category = parts[2] if len(parts) > 2 else ""
    description = parts[3] if len(parts) > 3 else ""
    result = task_api.create_task(
        state, title=title, due_date=due, category=category, description=description
    )
    return _describe(result, f"Added '{title}' (#{result.task_id}).")


def cmd_done(state: AppState, args: list[str]) -> str:
    title = " ".join(args).strip()
    if not title:
        return "Usage: /done title"
    if state.repository.mark_completed_by_title(title):
        return f"Marked '{title}' as completed."
    return f"No task titled '{title}'."


def cmd_rm(state: AppState, args: list[str]) -> str:
    title = " ".join(args).strip()
    if not title:
        return "Usage: /rm title"
    removed = state.repository.remove_by_title(title)
    return f"Removed {removed} task(s) titled '{title}'."


def cmd_sort(state: AppState, args: list[str]) -> str:
    try:
        state.repository.sort_by_due_date()
    except MissingDueDateError as e:
        return f"Cannot sort: {e}"
    return _format_tasks(state.repository.tasks, "No tasks yet.")


def cmd_cat(state: AppState, args: list[str]) -> str:
    category = " ".join(args).strip()
    if not category:
        return f"Usage: /cat name (suggested: {', '.join(DEFAULT_CATEGORIES)})"
    return _format_tasks(state.repository.filter_by_category(category), f"No tasks in '{category}'.")


def cmd_tag(state: AppState, args: list[str]) -> str:
    tag = " ".join(args).strip()
    if not tag:
        return "Usage: /tag name"
    return _format_tasks(state.repository.filter_by_tag(tag), f"No tasks tagged '{tag}'.")


def cmd_tag_add(state: AppState, args: list[str]) -> str:
    parts = _pipe_args(args)
    if len(parts) != 2 or not all(parts):
        return "Usage: /tag+ title | tag"
    title, tag = parts
    task = state.repository.find_by_title(title)
    if task is None:
        return f"No task titled '{title}'."
    task.add_tag(tag)
    state.repository.save_all()
    return f"'{title}' tags: {task.formatted_tags()}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.repository.stats()
    lines = [
        f"Total Tasks: {s.total}",
        f"Completed: {s.completed} ({s.completed_pct:.2f}%)",
        f"Pending: {s.pending} ({s.pending_pct:.2f}%)",
        f"Overdue: {s.overdue}",
        f"Due today: {s.due_today}",
    ]
    if s.by_category:
        lines.append("By category:")
        for name, n in sorted(s.by_category.items()):
            lines.append(f"  {name}: {n}")
    return "\n".join(lines)


def cmd_db(state: AppState, args: list[str]) -> str:
    """
    /db list                       -> rows in the database
    /db add title | due | category | description
    /db done <id>                  -> set status Completed
    /db rm <id>                    -> delete row
    /db set <id> <field> <value>   -> field: title|description|due_date|category|status
    """
    store = state.task_store
    if not args:
        return (
            "Database commands:\n"
            "  /db list\n"
            "  /db add title | due | category | description\n"
            "  /db done <id>\n"
            "  /db rm <id>\n"
            f"  /db set <id> <{'|'.join(f.value for f in UpdatableField)}> <value>"
        )

    sub = args[0].lower()
    if sub == "list":
        result = store.fetch_all()
        if not result.ok:
            return _describe(result, "")
        out = _format_tasks(result.tasks, "No tasks in the database.")
        if result.skipped:
            out += f"\n({result.skipped} row(s) skipped: unreadable due date)"
        return out

    if sub == "add":
        parts = _pipe_args(args[1:])
        if len(parts) < 2 or not parts[0]:
            return "Usage: /db add title | due | category | description"
        result = store.insert(
            parts[0],
            parts[3] if len(parts) > 3 else "",
            parts[1],
            parts[2] if len(parts) > 2 else "",
        )
        return _describe(result, f"Inserted #{result.task_id}.")

    if sub in ("done", "rm", "set"):
        # <id> <field> <value>; the value keeps its inner spacing.
        rest = " ".join(args[1:]).split(maxsplit=2)
        if not rest or not rest[0].isdigit():
            return f"Usage: /db {sub} <id> ..."
        task_id = int(rest[0])
        if sub == "done":
            return _describe(store.update_status(task_id, "Completed"), f"#{task_id} completed.")
        if sub == "rm":
            return _describe(store.delete_by_id(task_id), f"#{task_id} deleted.")
        if len(rest) < 3:
            return "Usage: /db set <id> <field> <value>"
        field = UpdatableField.parse(rest[1])
        if field is None:
            return f"Unknown field '{rest[1]}'. Use one of: {', '.join(f.value for f in UpdatableField)}"
        value = rest[2]
        return _describe(store.update_field(task_id, field, value), f"#{task_id} {field.value} updated.")

    return "Unknown /db subcommand. Use /db for usage."


def cmd_backup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("[BACKUP] Copying database tasks into the backup file...")
    result = task_api.backup_database(state)
    return _describe(result, f"Backed up {result.rowcount} task(s) (skipped {result.skipped}).")


def cmd_restore(state: AppState, args: list[str]) -> str:
    result = task_api.restore_database(state)
    return _describe(result, f"Database now holds {result.rowcount} task(s) from the backup.")


def cmd_export(state: AppState, args: list[str]) -> str:
    path = " ".join(args).strip() or str(getattr(state.settings, "export_path", "tasks.txt"))
    result = task_api.export_report(state.repository.all_tasks(), path)
    return _describe(result, f"Exported {result.rowcount} task(s) to {path}.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage status.")
registry.register("whoami", cmd_whoami, help_text="Show the current user.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|done|pending|today|overdue].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add title | due | category | description.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done title.")
registry.register("rm", cmd_rm, help_text="Remove tasks by title: /rm title.")
registry.register("sort", cmd_sort, help_text="Sort tasks by due date.")
registry.register("cat", cmd_cat, help_text="Tasks in a category: /cat name.")
registry.register("tag", cmd_tag, help_text="Tasks with a tag: /tag name.")
registry.register("tag+", cmd_tag_add, help_text="Tag a task: /tag+ title | tag.")
registry.register("stats", cmd_stats, help_text="Completion statistics.")
registry.register("db", cmd_db, help_text="Database commands: /db list|add|done|rm|set.")
registry.register("backup", cmd_backup, help_text="Copy database tasks into the backup file.")
registry.register("restore", cmd_restore, help_text="Replace database tasks with the backup.")
registry.register("export", cmd_export, help_text="Write a text report: /export [path].")
