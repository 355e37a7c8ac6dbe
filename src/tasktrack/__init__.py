"""Personal task tracker: SQLite system of record, JSON backup, console front-end."""
