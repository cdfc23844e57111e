"""Custom exception hierarchy for remembrall.

All exceptions that cross layer boundaries must inherit from
:class:`RemembrallError`.  Raw ``sqlite3`` and ``OSError`` exceptions
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
RemembrallError
├── ValidationError
│   ├── UnknownCommandError
│   ├── MissingTaskError
│   ├── MissingProjectNameError
│   ├── FieldTooLongError
│   └── InvalidEncodingError
├── StoreError
│   ├── StoreOpenError
│   ├── SchemaError
│   ├── TransactionError
│   ├── QueryError
│   └── MemoryNotFoundError
├── DataDirectoryError
└── MissingDependencyError
"""

from __future__ import annotations


class RemembrallError(Exception):
    """Base exception for all remembrall errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class ValidationError(RemembrallError):
    """Raised when the command line or a field value is rejected."""


class UnknownCommandError(ValidationError):
    """Raised when the first argument is not ``add``, ``peek`` or ``clear``."""


class MissingTaskError(ValidationError):
    """Raised when ``add`` is run without a task description."""


class MissingProjectNameError(ValidationError):
    """Raised when ``-p``/``--project`` is not followed by a name."""


class FieldTooLongError(ValidationError):
    """Raised when ``task`` or ``project`` exceeds the byte limit."""

    def __init__(self, field: str, value: str, limit: int) -> None:
        super().__init__(
            f'{field.capitalize()} "{value}" exceeds char limit of {limit} bytes.',
        )
        self.field: str = field
        self.limit: int = limit


class InvalidEncodingError(ValidationError):
    """Raised when a field cannot be encoded as UTF-8.

    Command-line bytes that are not valid UTF-8 reach Python as lone
    surrogates, which neither the byte limit nor SQLite can handle.
    """

    def __init__(self, field: str) -> None:
        super().__init__(
            f"{field.capitalize()} is not valid UTF-8.",
            hint="Re-type the value using UTF-8 encoded text.",
        )
        self.field: str = field


# --- Storage ---------------------------------------------------------------

class StoreError(RemembrallError):
    """Raised when the SQLite store rejects an operation."""


class StoreOpenError(StoreError):
    """Raised when the database file cannot be opened or created."""


class SchemaError(StoreError):
    """Raised when the ``memories`` table cannot be created."""


class TransactionError(StoreError):
    """Raised when a rehearsal transaction cannot begin or roll back."""


class QueryError(StoreError):
    """Raised when a statement fails to execute."""


class MemoryNotFoundError(StoreError):
    """Raised when ``clear`` finds no memory to delete."""


# --- Environment -----------------------------------------------------------

class DataDirectoryError(RemembrallError):
    """Raised when the application data directory cannot be resolved or created."""


class MissingDependencyError(RemembrallError):
    """Raised when an optional runtime dependency is not available."""
