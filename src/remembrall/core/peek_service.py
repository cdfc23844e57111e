"""Core peek service — reads memories without touching them."""

from __future__ import annotations

from remembrall.core.models import Command, Memory
from remembrall.core.protocols import MemoryStore
from remembrall.core.validation import validate_project


class PeekService:
    """Stateless service that drives the ``peek`` command."""

    def __init__(self, store: MemoryStore) -> None:
        self._store: MemoryStore = store

    def recall(self, command: Command) -> tuple[Memory, ...]:
        """Return the memories *command* asks for, newest first.

        Without ``--all`` only the most recent matching memory is
        returned.  An empty store yields an empty tuple.  ``--dry-run``
        is irrelevant here since nothing is mutated.
        """
        validate_project(command)
        limit = None if command.all else 1
        return self._store.select_recent(command.project, limit=limit)
