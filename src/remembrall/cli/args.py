"""Command-line scanning for remembrall.

``rmbrl`` has its own small grammar: a command word followed by flags
in any order, where unknown flags are reported and skipped rather than
rejected.  :func:`parse_args` folds the token stream into an immutable
:class:`~remembrall.core.models.Command` plus the list of ignored
tokens; it never prints and never touches the store.

Recognised flags
----------------
``-a, --all``        every matching memory (``peek``/``clear`` only)
``-n, --dry-run``    roll back any change
``-v, --verbose``    verbose output (last of -v/-s wins)
``-s, --silent``     silent output
``-p, --project``    ``-p NAME``, ``-p=NAME``, ``--project NAME``, ``--project=NAME``
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

from remembrall.core.models import Command, CommandFunction, Verbosity
from remembrall.exceptions import MissingProjectNameError, UnknownCommandError

ALL_FLAGS: frozenset[str] = frozenset({"--all", "-a"})
DRY_RUN_FLAGS: frozenset[str] = frozenset({"--dry-run", "-n"})
VERBOSE_FLAGS: frozenset[str] = frozenset({"--verbose", "-v"})
SILENT_FLAGS: frozenset[str] = frozenset({"--silent", "-s"})
PROJECT_FLAGS: tuple[str, ...] = ("--project", "-p")

HELP_FLAGS: frozenset[str] = frozenset({"--help", "-h"})
VERSION_FLAGS: frozenset[str] = frozenset({"--version", "-V"})

_FUNCTIONS: dict[str, CommandFunction] = {f.value: f for f in CommandFunction}


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of a successful scan."""

    command: Command
    ignored: tuple[str, ...] = ()
    """Tokens that matched nothing, in the order they appeared."""

    @property
    def warning(self) -> str | None:
        """The ``Ignoring flags`` message, or ``None`` when nothing was ignored."""
        if not self.ignored:
            return None
        return "Ignoring flags: " + ", ".join(self.ignored)


def parse_args(tokens: Sequence[str]) -> ParseResult:
    """Fold *tokens* (argv without the program name) into a command.

    A missing ``add`` task is not an error here; see
    :func:`remembrall.core.validation.require_task`.

    Raises
    ------
    UnknownCommandError
        When the first token is not ``add``, ``peek`` or ``clear``.
    MissingProjectNameError
        When ``-p``/``--project`` is last or followed by another flag.
    """
    if not tokens:
        raise UnknownCommandError("Missing command")

    function = _FUNCTIONS.get(tokens[0])
    if function is None:
        raise UnknownCommandError(f"Unknown command '{tokens[0]}'")

    result = ParseResult(command=Command(function=function))
    stream = iter(tokens[1:])
    for token in stream:
        result = _consume(result, token, stream)
    return result


def _consume(result: ParseResult, token: str, stream: Iterator[str]) -> ParseResult:
    command = result.command

    # add has no notion of "all"; the flag falls through to the ignored list.
    if token in ALL_FLAGS and command.function is not CommandFunction.ADD:
        return replace(result, command=replace(command, all=True))
    if token in DRY_RUN_FLAGS:
        return replace(result, command=replace(command, dry_run=True))
    if token in VERBOSE_FLAGS:
        return replace(result, command=replace(command, verbosity=Verbosity.VERBOSE))
    if token in SILENT_FLAGS:
        return replace(result, command=replace(command, verbosity=Verbosity.SILENT))

    project = _match_project(token, stream)
    if project is not None:
        return replace(result, command=replace(command, project=project))

    if command.function is CommandFunction.ADD and command.task is None and not token.startswith("-"):
        return replace(result, command=replace(command, task=token))

    return replace(result, ignored=(*result.ignored, token))


def _match_project(token: str, stream: Iterator[str]) -> str | None:
    """Return the project named by *token*, or ``None`` if it is not a project flag.

    The space separated form pulls its value from *stream*.
    """
    for flag in PROJECT_FLAGS:
        if token.startswith(flag + "="):
            return token[len(flag) + 1:]
        if token == flag:
            value = next(stream, None)
            if value is None or value.startswith("-"):
                raise MissingProjectNameError(
                    "Project flag provided but missing project name",
                    hint="Use `--project NAME` or `--project=NAME`.",
                )
            return value
    return None
