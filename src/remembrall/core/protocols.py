"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from remembrall.core.models import Memory


class MemoryStore(Protocol):
    """Contract for memory persistence backends.

    Any object that implements the methods below with the correct
    signatures satisfies this protocol structurally (no explicit
    inheritance required).  Implementations must map every
    backend-specific exception to a
    :class:`~remembrall.exceptions.StoreError` subclass.
    """

    supports_ordered_delete: bool
    """Whether :meth:`delete_most_recent` is available.

    Backends without it force ``clear`` to resolve the target row with
    a separate select before deleting by id.
    """

    def rehearsal(self) -> AbstractContextManager[None]:
        """Return a scope whose mutations are always rolled back on exit."""
        ...  # pragma: no cover

    def insert(self, task: str, project: str) -> Memory:
        """Persist one memory and return the stored row."""
        ...  # pragma: no cover

    def select_recent(self, project: str | None, *, limit: int | None) -> tuple[Memory, ...]:
        """Return memories newest first, optionally filtered and limited.

        ``project=None`` disables filtering; ``limit=None`` returns every
        matching row.
        """
        ...  # pragma: no cover

    def delete_by_id(self, memory_id: int) -> tuple[Memory, ...]:
        """Delete one memory by id and return the deleted rows."""
        ...  # pragma: no cover

    def delete_matching(self, project: str | None) -> tuple[Memory, ...]:
        """Delete every memory matching *project* (all when ``None``)."""
        ...  # pragma: no cover

    def delete_most_recent(self, project: str | None) -> tuple[Memory, ...]:
        """Delete the newest matching memory in a single statement.

        Only called when :attr:`supports_ordered_delete` is true.
        """
        ...  # pragma: no cover
