"""Core clear service — forgets memories.

Deleting only the most recent memory needs a store that can order a
``DELETE``.  SQLite builds usually cannot, so the service first resolves
the target row and then deletes it by id.  The sequence is modelled as a
small state machine so that a backend with native ordered delete can
skip the resolution phase entirely.

Phases
------
IDLE → RESOLVING_TARGET → DELETING → ROLLED_BACK → DONE

``RESOLVING_TARGET`` is skipped for ``--all`` and for stores with
ordered delete; ``ROLLED_BACK`` is only entered on dry runs.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum

from remembrall.core.models import Command, Memory
from remembrall.core.protocols import MemoryStore
from remembrall.core.validation import validate_project
from remembrall.exceptions import MemoryNotFoundError


class ClearPhase(Enum):
    IDLE = "idle"
    RESOLVING_TARGET = "resolving-target"
    DELETING = "deleting"
    ROLLED_BACK = "rolled-back"
    DONE = "done"


_TRANSITIONS: dict[ClearPhase, frozenset[ClearPhase]] = {
    ClearPhase.IDLE: frozenset({ClearPhase.RESOLVING_TARGET, ClearPhase.DELETING}),
    ClearPhase.RESOLVING_TARGET: frozenset({ClearPhase.DELETING}),
    ClearPhase.DELETING: frozenset({ClearPhase.ROLLED_BACK, ClearPhase.DONE}),
    ClearPhase.ROLLED_BACK: frozenset({ClearPhase.DONE}),
    ClearPhase.DONE: frozenset(),
}


@dataclass(frozen=True, slots=True)
class ClearOutcome:
    """Result of a finished ``clear`` run."""

    target: Memory | None
    """Row resolved before deletion, ``None`` when no resolution happened."""

    forgotten: tuple[Memory, ...]
    """Rows returned by the delete statement."""

    phases: tuple[ClearPhase, ...]
    """Every phase the run passed through, in order."""


@dataclass(slots=True)
class _ClearRun:
    """Mutable bookkeeping for one in-flight ``clear``."""

    phase: ClearPhase = ClearPhase.IDLE
    history: list[ClearPhase] = field(default_factory=lambda: [ClearPhase.IDLE])
    target: Memory | None = None
    forgotten: tuple[Memory, ...] = ()

    def advance(self, phase: ClearPhase) -> None:
        if phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(f"illegal clear transition {self.phase.value} -> {phase.value}")
        self.phase = phase
        self.history.append(phase)

    def outcome(self) -> ClearOutcome:
        return ClearOutcome(
            target=self.target,
            forgotten=self.forgotten,
            phases=tuple(self.history),
        )


class ClearService:
    """Service that drives the ``clear`` command.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`MemoryStore` protocol.
    """

    def __init__(self, store: MemoryStore) -> None:
        self._store: MemoryStore = store

    def forget(
        self,
        command: Command,
        *,
        on_rehearsal: Callable[[], None] | None = None,
        on_target_resolved: Callable[[Memory], None] | None = None,
    ) -> ClearOutcome:
        """Delete the memories selected by *command*.

        Parameters
        ----------
        command:
            A ``clear`` command.
        on_rehearsal:
            Optional callable invoked once validation has passed and
            before a dry run opens its rehearsal.
        on_target_resolved:
            Optional callable invoked with the most recent matching
            memory once it has been found and before it is deleted.

        Raises
        ------
        FieldTooLongError
            When the project filter exceeds the byte limit.
        InvalidEncodingError
            When the project filter is not valid UTF-8.
        MemoryNotFoundError
            When no memory matches and ``--all`` was not given.
        StoreError
            When any statement fails.
        """
        validate_project(command)
        if command.dry_run and on_rehearsal is not None:
            on_rehearsal()
        run = _ClearRun()

        # The rehearsal covers both the select and the delete.
        scope = self._store.rehearsal() if command.dry_run else nullcontext()
        with scope:
            if command.all or self._store.supports_ordered_delete:
                run.advance(ClearPhase.DELETING)
            else:
                run.advance(ClearPhase.RESOLVING_TARGET)
                run.target = self._resolve_target(command)
                if on_target_resolved is not None:
                    on_target_resolved(run.target)
                run.advance(ClearPhase.DELETING)
            run.forgotten = self._delete(command, run.target)

        if command.dry_run:
            run.advance(ClearPhase.ROLLED_BACK)
        run.advance(ClearPhase.DONE)
        return run.outcome()

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _resolve_target(self, command: Command) -> Memory:
        found = self._store.select_recent(command.project, limit=1)
        if not found:
            raise _not_found()
        return found[0]

    def _delete(self, command: Command, target: Memory | None) -> tuple[Memory, ...]:
        if target is not None:
            return self._store.delete_by_id(target.id)
        if command.all:
            return self._store.delete_matching(command.project)
        forgotten = self._store.delete_most_recent(command.project)
        if not forgotten:
            raise _not_found()
        return forgotten


def _not_found() -> MemoryNotFoundError:
    return MemoryNotFoundError(
        "Failed to find memory to delete",
        hint="Run `rmbrl peek --all` to see what is remembered.",
    )
