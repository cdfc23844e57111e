"""CLI application entry point and command routing for remembrall.

This module is the **sole error boundary** for the entire application.
It catches :class:`~remembrall.exceptions.RemembrallError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; every line goes through
  :mod:`remembrall.cli.console` to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence

from remembrall.cli import exit_codes
from remembrall.cli.args import HELP_FLAGS, VERSION_FLAGS, parse_args
from remembrall.cli.console import console
from remembrall.core.add_service import AddService
from remembrall.core.clear_service import ClearService
from remembrall.core.models import Command, CommandFunction, Memory
from remembrall.core.peek_service import PeekService
from remembrall.core.validation import require_task
from remembrall.exceptions import RemembrallError, UnknownCommandError
from remembrall.infra.data_dir import database_path, ensure_data_dir, resolve_data_dir
from remembrall.infra.sqlite_store import SqliteMemoryStore
from remembrall.version import __version__


# ---------------------------------------------------------------------------
# Help / version
# ---------------------------------------------------------------------------

_EPILOG = """\
Commands:
  add     Add memory to your collection (supports --project)
  peek    Show what you're currently remembering (supports --all, --project)
  clear   Forget memories (supports --all, --project)

Command Flags:
  -p, --project    Tag and filter memories by project name
                   (supported by: add, peek, clear)
  -a, --all        Apply operation to all memories
                   (supported by: peek, clear)

Global Flags:
  -v, --verbose    Enable verbose output
  -s, --silent     Enable silent mode
  -n, --dry-run    Perform dry run without making changes
"""


def _build_parser() -> argparse.ArgumentParser:
    """Construct the parser that renders help and version text.

    Command words and their flags are scanned by
    :func:`remembrall.cli.args.parse_args`; argparse only handles the
    leading ``--help`` / ``--version`` short-circuit.
    """
    parser = argparse.ArgumentParser(
        prog="rmbrl",
        usage="%(prog)s (COMMAND) [FLAGS]",
        description="Remember what you are working on.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"remembrall {__version__}",
    )
    return parser


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_memory(memory: Memory, *, with_date: bool = False) -> str:
    """Render one memory as ``    "task" -- project -- YYYY-MM-DD``.

    The project part is omitted for untagged memories and the date is
    only shown when *with_date* is set.
    """
    line = f'    "{memory.task}"'
    if memory.project:
        line += f" -- {memory.project}"
    if with_date:
        line += f" -- {memory.created_on}"
    return line


def _log_command(command: Command) -> None:
    console.info("Parsed Command Line Args:")
    console.info(f"    function: {command.function.value}")
    console.info(f"    task: {command.task}")
    console.info(f"    project: {command.project}")
    console.info(f"    all: {'true' if command.all else 'false'}")
    console.info(f"    dry-run: {'true' if command.dry_run else 'false'}")
    console.info(f"    verbosity: {command.verbosity.value}")


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_add(command: Command, store: SqliteMemoryStore) -> int:
    """Remember one memory, rolling it back again on ``--dry-run``."""
    memory = AddService(store).remember(
        command,
        on_rehearsal=lambda: console.info("Performing dry run. Memory will NOT be remembered!"),
    )
    console.info(f'"{memory.task}" was added to your memory!')
    return exit_codes.SUCCESS


def _handle_peek(command: Command, store: SqliteMemoryStore) -> int:
    """Show the most recent memory, or all of them with ``--all``."""
    memories = PeekService(store).recall(command)

    if not command.is_silent:
        console.info("Currently Remembering:")
    for memory in memories:
        console.info(format_memory(memory, with_date=command.is_verbose))
    return exit_codes.SUCCESS


def _handle_clear(command: Command, store: SqliteMemoryStore) -> int:
    """Forget the most recent memory, or all matching ones with ``--all``."""

    def _report_found(memory: Memory) -> None:
        console.info("Found Memory:")
        console.info(format_memory(memory, with_date=True))

    outcome = ClearService(store).forget(
        command,
        on_rehearsal=lambda: console.info("Performing dry run. Memory will NOT be forgotten!"),
        on_target_resolved=_report_found if command.is_verbose else None,
    )

    if not command.is_silent:
        console.info("Forgotten Memories:")
    for memory in outcome.forgotten:
        console.info(format_memory(memory, with_date=command.is_verbose))
    return exit_codes.SUCCESS


_HANDLERS: dict[CommandFunction, Callable[[Command, SqliteMemoryStore], int]] = {
    CommandFunction.ADD: _handle_add,
    CommandFunction.PEEK: _handle_peek,
    CommandFunction.CLEAR: _handle_clear,
}


def _run(command: Command) -> int:
    """Open the store, make sure the schema exists and dispatch *command*.

    The store is closed exactly once on every path, including schema
    failures.
    """
    db_path = database_path(ensure_data_dir(resolve_data_dir()))
    if command.is_verbose:
        console.info(f"DB Path: {db_path}")

    trace = console.info if command.is_verbose else None
    with SqliteMemoryStore.open(db_path, trace=trace) as store:
        if command.is_verbose:
            console.info("Database connection successful!")

        store.ensure_schema()
        if command.is_verbose:
            console.info('Table "memories" exists or created successfully!')

        return _HANDLERS[command.function](command, store)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    """Run the remembrall CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.  ``--help`` and ``--version`` return the code
        argparse exits with instead of raising ``SystemExit``.
    """
    tokens = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()

    if not tokens:
        parser.print_help()
        return exit_codes.GENERAL_ERROR

    if tokens[0] in HELP_FLAGS or tokens[0] in VERSION_FLAGS:
        try:
            parser.parse_args(tokens[:1])
        except SystemExit as exc:
            return int(exc.code or 0)
        return exit_codes.SUCCESS

    try:
        parsed = parse_args(tokens)
    except UnknownCommandError as exc:
        console.error(str(exc))
        parser.print_help()
        return exit_codes.GENERAL_ERROR

    command = parsed.command
    if parsed.warning and not command.is_silent:
        console.warning(parsed.warning)
    if command.is_verbose:
        _log_command(command)

    require_task(command)
    return _run(command)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except RemembrallError as exc:
        console.error(str(exc))
        if exc.hint:
            console.hint(exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.warning("Aborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
