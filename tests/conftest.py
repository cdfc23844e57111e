"""Shared pytest fixtures and configuration for the remembrall test suite.

Guidelines
----------
* Never touch the user's real data directory — ``RMBRL_DATA_DIR`` is
  always pointed at ``tmp_path``.
* Store tests run against real SQLite files, not mocks.
* Core tests may use in-memory fakes of :class:`MemoryStore`.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from remembrall.infra.sqlite_store import SqliteMemoryStore
from remembrall.utils import DATA_DIR_ENV, DB_FILENAME


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated data directory used by every CLI invocation."""
    path = tmp_path / "data"
    monkeypatch.setenv(DATA_DIR_ENV, str(path))
    # Keep Rich output free of escape codes when stderr is captured.
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
    return path


@pytest.fixture
def db_file(data_dir: Path) -> Path:
    return data_dir / DB_FILENAME


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqliteMemoryStore]:
    """A freshly created store with the schema in place."""
    with SqliteMemoryStore.open(tmp_path / "store.db") as opened:
        opened.ensure_schema()
        yield opened


def read_rows(path: Path) -> list[tuple[str, str]]:
    """Return ``(task, project)`` pairs straight from the database file."""
    if not path.exists():
        return []
    conn = sqlite3.connect(str(path))
    try:
        return [
            (row[0], row[1])
            for row in conn.execute("SELECT task, project FROM memories ORDER BY id")
        ]
    finally:
        conn.close()


def count_memories(store: SqliteMemoryStore) -> int:
    """Number of memories visible through *store*'s own connection."""
    return len(store.select_recent(None, limit=None))
