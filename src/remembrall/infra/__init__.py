"""Infrastructure layer — external system integration.

This layer wraps all interaction with SQLite and the operating system.
Every raw ``sqlite3`` or ``OSError`` exception must be caught here and
re-raised as a :class:`~remembrall.exceptions.RemembrallError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from remembrall.infra.data_dir import database_path, ensure_data_dir, resolve_data_dir
from remembrall.infra.sqlite_store import SqliteMemoryStore

__all__: list[str] = [
    "SqliteMemoryStore",
    "database_path",
    "ensure_data_dir",
    "resolve_data_dir",
]
