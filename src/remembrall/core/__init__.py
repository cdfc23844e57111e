"""Core / service layer — pure business logic.

Rules
-----
* No ``print()`` calls.
* No filesystem or database access except through :class:`MemoryStore`.
* No imports from ``cli`` or ``infra``.
"""

from remembrall.core.add_service import AddService
from remembrall.core.clear_service import ClearOutcome, ClearPhase, ClearService
from remembrall.core.models import Command, CommandFunction, Memory, Verbosity
from remembrall.core.peek_service import PeekService
from remembrall.core.protocols import MemoryStore

__all__: list[str] = [
    "AddService",
    "ClearOutcome",
    "ClearPhase",
    "ClearService",
    "Command",
    "CommandFunction",
    "Memory",
    "MemoryStore",
    "PeekService",
    "Verbosity",
]
