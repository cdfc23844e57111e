"""Field validation shared by the command executors."""

from __future__ import annotations

from remembrall.core.models import Command, CommandFunction
from remembrall.exceptions import FieldTooLongError, InvalidEncodingError, MissingTaskError
from remembrall.utils import MAX_FIELD_BYTES


def check_field_length(field: str, value: str | None, limit: int = MAX_FIELD_BYTES) -> None:
    """Raise :class:`FieldTooLongError` when *value* is over *limit* bytes.

    Length is measured on the UTF-8 encoding, not on code points.
    ``None`` is accepted.  A value holding lone surrogates raises
    :class:`InvalidEncodingError` instead.
    """
    if value is None:
        return
    try:
        encoded = value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidEncodingError(field) from exc
    if len(encoded) > limit:
        raise FieldTooLongError(field, value, limit)


def require_task(command: Command) -> str:
    """Return the task of an ``add`` command or raise :class:`MissingTaskError`."""
    if command.function is CommandFunction.ADD and not command.task:
        raise MissingTaskError(
            'Running "add" command but missing task description',
            hint='Example: rmbrl add "water the plants"',
        )
    return command.task or ""


def validate_project(command: Command) -> None:
    check_field_length("project", command.project)


def validate_add(command: Command) -> str:
    """Validate an ``add`` command and return its task."""
    task = require_task(command)
    check_field_length("task", task)
    validate_project(command)
    return task
