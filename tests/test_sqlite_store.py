"""Tests for the SQLite store (infra/sqlite_store.py).

Every test runs against a real database file under ``tmp_path``.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from conftest import count_memories
from remembrall.core.models import Memory
from remembrall.exceptions import QueryError, StoreOpenError, TransactionError
from remembrall.infra.sqlite_store import SqliteMemoryStore


def _insert_at(store_path: Path, task: str, project: str, created_at: str) -> None:
    conn = sqlite3.connect(str(store_path))
    try:
        conn.execute(
            "INSERT INTO memories (task, project, created_at) VALUES (?, ?, ?)",
            (task, project, created_at),
        )
        conn.commit()
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_open_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "new.db"
        with SqliteMemoryStore.open(path) as store:
            store.ensure_schema()
        assert path.exists()

    def test_ensure_schema_is_idempotent(self, store: SqliteMemoryStore) -> None:
        store.ensure_schema()
        store.ensure_schema()
        assert count_memories(store) == 0

    def test_open_missing_directory_fails(self, tmp_path: Path) -> None:
        with pytest.raises(StoreOpenError, match="Database connection failed"):
            SqliteMemoryStore.open(tmp_path / "missing" / "dir" / "x.db")

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        store = SqliteMemoryStore.open(tmp_path / "x.db")
        store.close()
        store.close()
        assert store.closed

    def test_context_manager_closes(self, tmp_path: Path) -> None:
        with SqliteMemoryStore.open(tmp_path / "x.db") as store:
            assert not store.closed
        assert store.closed

    def test_use_after_close_is_a_store_error(self, tmp_path: Path) -> None:
        store = SqliteMemoryStore.open(tmp_path / "x.db")
        store.close()
        with pytest.raises(StoreOpenError):
            store.ensure_schema()

    def test_statement_without_schema_is_query_error(self, tmp_path: Path) -> None:
        with SqliteMemoryStore.open(tmp_path / "x.db") as store:
            with pytest.raises(QueryError, match="Failed to remember: no such table"):
                store.insert("task", "")


# ---------------------------------------------------------------------------
# Insert / select
# ---------------------------------------------------------------------------

class TestInsertAndSelect:
    def test_insert_returns_stored_row(self, store: SqliteMemoryStore) -> None:
        memory = store.insert("water plants", "home")
        assert isinstance(memory, Memory)
        assert memory.id == 1
        assert memory.task == "water plants"
        assert memory.project == "home"
        assert len(memory.created_at) == 19

    def test_select_on_empty_store(self, store: SqliteMemoryStore) -> None:
        assert store.select_recent(None, limit=None) == ()

    def test_newest_first_with_id_tiebreak(self, store: SqliteMemoryStore) -> None:
        for task in ("one", "two", "three"):
            store.insert(task, "")
        tasks = [m.task for m in store.select_recent(None, limit=None)]
        assert tasks == ["three", "two", "one"]

    def test_created_at_orders_before_id(self, tmp_path: Path) -> None:
        path = tmp_path / "ordered.db"
        with SqliteMemoryStore.open(path) as store:
            store.ensure_schema()
        _insert_at(path, "newer", "", "2025-02-01 00:00:00")
        _insert_at(path, "older", "", "2024-01-01 00:00:00")

        with SqliteMemoryStore.open(path) as store:
            assert store.select_recent(None, limit=1)[0].task == "newer"

    def test_limit(self, store: SqliteMemoryStore) -> None:
        store.insert("a", "")
        store.insert("b", "")
        assert [m.task for m in store.select_recent(None, limit=1)] == ["b"]

    def test_project_filter(self, store: SqliteMemoryStore) -> None:
        store.insert("a", "work")
        store.insert("b", "")
        store.insert("c", "home")
        assert [m.task for m in store.select_recent("work", limit=None)] == ["a"]
        assert [m.task for m in store.select_recent("", limit=None)] == ["b"]
        assert len(store.select_recent(None, limit=None)) == 3

    def test_values_are_bound_not_interpolated(self, store: SqliteMemoryStore) -> None:
        store.insert("x'); DROP TABLE memories; --", "p'q")
        assert store.select_recent("p'q", limit=None)[0].task.startswith("x');")


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_by_id_returns_row(self, store: SqliteMemoryStore) -> None:
        first = store.insert("a", "")
        store.insert("b", "")
        deleted = store.delete_by_id(first.id)
        assert [m.task for m in deleted] == ["a"]
        assert [m.task for m in store.select_recent(None, limit=None)] == ["b"]

    def test_delete_by_unknown_id(self, store: SqliteMemoryStore) -> None:
        assert store.delete_by_id(99) == ()

    def test_delete_matching_project(self, store: SqliteMemoryStore) -> None:
        store.insert("a", "P")
        store.insert("b", "Q")
        store.insert("c", "P")
        store.insert("d", "")
        deleted = store.delete_matching("P")
        assert sorted(m.task for m in deleted) == ["a", "c"]
        assert sorted(m.task for m in store.select_recent(None, limit=None)) == ["b", "d"]

    def test_delete_matching_everything(self, store: SqliteMemoryStore) -> None:
        store.insert("a", "P")
        store.insert("b", "")
        assert len(store.delete_matching(None)) == 2
        assert count_memories(store) == 0

    def test_delete_most_recent(self, store: SqliteMemoryStore) -> None:
        store.insert("a", "P")
        store.insert("b", "P")
        store.insert("c", "Q")
        assert [m.task for m in store.delete_most_recent("P")] == ["b"]
        assert [m.task for m in store.delete_most_recent(None)] == ["c"]
        assert [m.task for m in store.select_recent(None, limit=None)] == ["a"]

    def test_delete_most_recent_on_empty(self, store: SqliteMemoryStore) -> None:
        assert store.delete_most_recent(None) == ()


# ---------------------------------------------------------------------------
# Rehearsal
# ---------------------------------------------------------------------------

class TestRehearsal:
    def test_insert_is_rolled_back(self, store: SqliteMemoryStore) -> None:
        with store.rehearsal():
            store.insert("temp", "")
            assert count_memories(store) == 1
        assert count_memories(store) == 0

    def test_delete_is_rolled_back(self, store: SqliteMemoryStore) -> None:
        store.insert("keep", "")
        with store.rehearsal():
            store.delete_matching(None)
            assert count_memories(store) == 0
        assert count_memories(store) == 1

    def test_rolled_back_when_block_raises(self, store: SqliteMemoryStore) -> None:
        with pytest.raises(RuntimeError):
            with store.rehearsal():
                store.insert("temp", "")
                raise RuntimeError("boom")
        assert count_memories(store) == 0

    def test_block_error_wins_over_failed_rollback(self, tmp_path: Path) -> None:
        lines: list[str] = []
        with SqliteMemoryStore.open(tmp_path / "r.db", trace=lines.append) as store:
            store.ensure_schema()
            with pytest.raises(QueryError, match="Failed to remember"):
                with store.rehearsal():
                    # End the transaction early so that ROLLBACK has nothing to undo.
                    store._connection.execute("COMMIT;")
                    store.insert("x", "")
                    raise QueryError("Failed to remember: disk I/O error")
        assert any(line.startswith("Failed to rollback transaction") for line in lines)

    def test_failed_rollback_without_block_error_raises(self, store: SqliteMemoryStore) -> None:
        with pytest.raises(TransactionError, match="Failed to rollback transaction"):
            with store.rehearsal():
                store._connection.execute("COMMIT;")

    def test_statements_outside_rehearsal_autocommit(self, tmp_path: Path) -> None:
        path = tmp_path / "commit.db"
        with SqliteMemoryStore.open(path) as store:
            store.ensure_schema()
            store.insert("persisted", "")
        with SqliteMemoryStore.open(path) as store:
            assert count_memories(store) == 1

    def test_nested_rehearsal_is_a_transaction_error(self, store: SqliteMemoryStore) -> None:
        with store.rehearsal():
            with pytest.raises(TransactionError, match="Failed to begin transaction"):
                with store.rehearsal():
                    pass  # pragma: no cover


# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------

class TestTrace:
    def test_trace_receives_queries_and_transaction_events(self, tmp_path: Path) -> None:
        lines: list[str] = []
        with SqliteMemoryStore.open(tmp_path / "t.db", trace=lines.append) as store:
            store.ensure_schema()
            with store.rehearsal():
                store.insert("traced", "proj")

        assert lines[0] == "Begin transaction..."
        assert lines[1].startswith("Query: INSERT INTO memories")
        assert "'traced', 'proj'" in lines[1]
        assert lines[-1] == "Rollback transaction..."
