"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, UpdatableField, User) and date helpers
- task_results.py: StoreResult / ResultKind returned by every storage call
- task_store.py: SQLite-backed durable store
- task_backup.py: whole-collection JSON backup
- task_repository.py: in-memory collection with write-through, filters and stats
- task_api.py: helpers that move tasks between the two backends
"""
