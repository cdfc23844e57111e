"""Domain models for remembrall.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and must remain pure
across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Command vocabulary
# ---------------------------------------------------------------------------

class CommandFunction(Enum):
    """The operation requested by the first command-line argument."""

    ADD = "add"
    PEEK = "peek"
    CLEAR = "clear"


class Verbosity(Enum):
    """Output level selected by ``--silent`` / ``--verbose``."""

    NORMAL = "normal"
    SILENT = "silent"
    VERBOSE = "verbose"


# ---------------------------------------------------------------------------
# Parsed command
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Command:
    """A validated command-line invocation.

    Built once from the process arguments and consumed by exactly one
    executor.
    """

    function: CommandFunction
    """Which operation to run."""

    project: str | None = None
    """Project tag (``add``) or filter (``peek``/``clear``).

    ``None`` means *no filter*; an empty string filters on untagged
    memories.
    """

    task: str | None = None
    """Task description, required for ``add`` only."""

    all: bool = False
    """Apply to every matching memory instead of only the most recent."""

    dry_run: bool = False
    """Roll back any mutation once it has been performed."""

    verbosity: Verbosity = Verbosity.NORMAL

    @property
    def is_verbose(self) -> bool:
        return self.verbosity is Verbosity.VERBOSE

    @property
    def is_silent(self) -> bool:
        return self.verbosity is Verbosity.SILENT


# ---------------------------------------------------------------------------
# Persisted memory
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Memory:
    """One row of the ``memories`` table."""

    id: int
    """Store-assigned primary key."""

    task: str
    """What to remember."""

    project: str
    """Project tag.  Empty string when untagged."""

    created_at: str
    """Insertion timestamp as stored (``YYYY-MM-DD HH:MM:SS``)."""

    @property
    def created_on(self) -> str:
        """Calendar date portion of :attr:`created_at`."""
        return self.created_at[:10]
