"""SQLite backed implementation of :class:`~remembrall.core.protocols.MemoryStore`.

This module is the **only** place in the codebase that imports
``sqlite3``.  All ``sqlite3`` exceptions are caught here and re-raised
as typed :class:`~remembrall.exceptions.StoreError` subclasses — nothing
raw escapes the infrastructure boundary.

The connection runs in autocommit mode: every statement commits on its
own and the only explicit transaction is the dry-run rehearsal, which
is always rolled back.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

from remembrall.core.models import Memory
from remembrall.exceptions import (
    QueryError,
    SchemaError,
    StoreOpenError,
    TransactionError,
)

_COLUMNS = "id, task, project, created_at"
_NEWEST_FIRST = "ORDER BY created_at DESC, id DESC"

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS memories("
    "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,"
    "task TEXT NOT NULL,"
    "project TEXT DEFAULT '' NOT NULL,"
    "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL);"
)


class SqliteMemoryStore:
    """Concrete :class:`MemoryStore` backed by a single SQLite file.

    Usage::

        with SqliteMemoryStore.open(path) as store:
            store.ensure_schema()
            store.insert("water the plants", "")

    Parameters
    ----------
    connection:
        An open connection in autocommit mode (``isolation_level=None``).
    trace:
        Optional callable receiving one line per statement and
        transaction event.  Used by the CLI for ``--verbose`` output.
    ordered_delete:
        Delete the most recent memory with a single ordered statement
        instead of the select-then-delete sequence.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        trace: Callable[[str], None] | None = None,
        ordered_delete: bool = False,
    ) -> None:
        self._conn: sqlite3.Connection | None = connection
        self._conn.row_factory = sqlite3.Row
        self._trace: Callable[[str], None] | None = trace
        self.supports_ordered_delete: bool = ordered_delete

    @classmethod
    def open(
        cls,
        path: Path | str,
        *,
        trace: Callable[[str], None] | None = None,
        ordered_delete: bool = False,
    ) -> SqliteMemoryStore:
        """Open (creating if needed) the database at *path*.

        Raises
        ------
        StoreOpenError
            When SQLite cannot open or create the file.
        """
        try:
            connection = sqlite3.connect(str(path), isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreOpenError(f"Database connection failed: {exc}") from exc
        return cls(connection, trace=trace, ordered_delete=ordered_delete)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create the ``memories`` table unless it already exists."""
        try:
            self._connection.execute(_SCHEMA)
        except sqlite3.Error as exc:
            raise SchemaError(f"SQL error: {exc}") from exc

    def close(self) -> None:
        """Close the connection.  Safe to call more than once."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None

    @property
    def closed(self) -> bool:
        return self._conn is None

    def __enter__(self) -> SqliteMemoryStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreOpenError("Database connection is closed.")
        return self._conn

    # ------------------------------------------------------------------
    # Rehearsal transaction
    # ------------------------------------------------------------------

    @contextmanager
    def rehearsal(self) -> Iterator[None]:
        """Run the enclosed statements in a transaction that never commits.

        ``ROLLBACK`` is issued on every exit path, including when the
        enclosed block raises.  In that case the block's exception is
        what propagates; a failing rollback is only reported to the
        trace.
        """
        self._transaction("BEGIN TRANSACTION;", "Failed to begin transaction")
        self._emit("Begin transaction...")
        try:
            yield
        except BaseException:
            try:
                self._rollback()
            except TransactionError as rollback_exc:
                self._emit(str(rollback_exc))
            raise
        self._rollback()

    def _rollback(self) -> None:
        self._transaction("ROLLBACK;", "Failed to rollback transaction")
        self._emit("Rollback transaction...")

    def _transaction(self, statement: str, failure: str) -> None:
        try:
            self._connection.execute(statement)
        except sqlite3.Error as exc:
            raise TransactionError(f"{failure}: {exc}") from exc

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def insert(self, task: str, project: str) -> Memory:
        rows = self._run(
            f"INSERT INTO memories (task, project) VALUES (?, ?) RETURNING {_COLUMNS};",
            (task, project),
            "Failed to remember",
        )
        return _to_memory(rows[0])

    def select_recent(self, project: str | None, *, limit: int | None) -> tuple[Memory, ...]:
        sql = f"SELECT {_COLUMNS} FROM memories"
        params: list[Any] = []
        if project is not None:
            sql += " WHERE project = ?"
            params.append(project)
        sql += f" {_NEWEST_FIRST}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        rows = self._run(sql + ";", params, "Failed to recall memories")
        return tuple(_to_memory(row) for row in rows)

    def delete_by_id(self, memory_id: int) -> tuple[Memory, ...]:
        rows = self._run(
            f"DELETE FROM memories WHERE id = ? RETURNING {_COLUMNS};",
            (memory_id,),
            "Failed to forget memories",
        )
        return tuple(_to_memory(row) for row in rows)

    def delete_matching(self, project: str | None) -> tuple[Memory, ...]:
        if project is None:
            sql = f"DELETE FROM memories RETURNING {_COLUMNS};"
            params: tuple[Any, ...] = ()
        else:
            sql = f"DELETE FROM memories WHERE project = ? RETURNING {_COLUMNS};"
            params = (project,)
        rows = self._run(sql, params, "Failed to forget memories")
        return tuple(_to_memory(row) for row in rows)

    def delete_most_recent(self, project: str | None) -> tuple[Memory, ...]:
        where = "" if project is None else " WHERE project = ?"
        params: tuple[Any, ...] = () if project is None else (project,)
        rows = self._run(
            "DELETE FROM memories WHERE id = ("
            f"SELECT id FROM memories{where} {_NEWEST_FIRST} LIMIT 1"
            f") RETURNING {_COLUMNS};",
            params,
            "Failed to forget memories",
        )
        return tuple(_to_memory(row) for row in rows)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, sql: str, params: Sequence[Any], failure: str) -> list[sqlite3.Row]:
        """Execute *sql* and fetch every row.

        Rows are always drained so that ``RETURNING`` statements run to
        completion before the cursor is discarded.
        """
        self._emit(f"Query: {sql} {tuple(params)!r}" if params else f"Query: {sql}")
        try:
            return self._connection.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise QueryError(f"{failure}: {exc}") from exc

    def _emit(self, line: str) -> None:
        if self._trace is not None:
            self._trace(line)


def _to_memory(row: sqlite3.Row) -> Memory:
    return Memory(
        id=int(row["id"]),
        task=row["task"],
        project=row["project"],
        created_at=str(row["created_at"]),
    )
