"""Core add service — remembers a single memory.

Guarantees
----------
* Pure orchestration — no ``print()``, no direct ``sqlite3`` access.
* A dry run performs the insert inside a rehearsal and leaves the
  store unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import nullcontext

from remembrall.core.models import Command, Memory
from remembrall.core.protocols import MemoryStore
from remembrall.core.validation import validate_add


class AddService:
    """Stateless service that drives the ``add`` command.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`MemoryStore` protocol.
    """

    def __init__(self, store: MemoryStore) -> None:
        self._store: MemoryStore = store

    def remember(
        self,
        command: Command,
        *,
        on_rehearsal: Callable[[], None] | None = None,
    ) -> Memory:
        """Insert the task of *command* and return the stored row.

        Parameters
        ----------
        command:
            An ``add`` command.
        on_rehearsal:
            Optional callable invoked once validation has passed and
            before a dry run opens its rehearsal.

        Raises
        ------
        MissingTaskError
            When the command carries no task.
        FieldTooLongError
            When the task or project exceeds the byte limit.
        InvalidEncodingError
            When the task or project is not valid UTF-8.
        StoreError
            When the store rejects the insert.
        """
        task = validate_add(command)
        if command.dry_run and on_rehearsal is not None:
            on_rehearsal()
        scope = self._store.rehearsal() if command.dry_run else nullcontext()
        with scope:
            return self._store.insert(task, command.project or "")
