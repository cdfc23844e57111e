"""CLI console helpers with optional Rich support.

Every line remembrall prints goes to **stderr** with a level prefix
(``[INFO]``, ``[WARNING]``, ``[ERROR]``).

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import Any

from remembrall.exceptions import MissingDependencyError


class LogLevel(Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_LEVEL_STYLES: dict[LogLevel, str] = {
    LogLevel.INFO: "bold blue",
    LogLevel.WARNING: "bold yellow",
    LogLevel.ERROR: "bold red",
}


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Leveled logger that renders with Rich when available, else plain stderr."""

	def log(self, level: LogLevel, message: str) -> None:
		"""Write one ``[LEVEL] message`` line.

		*message* is rendered verbatim: square brackets in user text are
		never interpreted as Rich markup and long lines are not wrapped.
		"""
		prefix = f"[{level.value}] "
		try:
			rich_console = get_rich_console()
		except MissingDependencyError:
			print(prefix + message, file=sys.stderr)
			return

		from rich.text import Text

		line = Text(prefix, style=_LEVEL_STYLES[level])
		line.append(message)
		rich_console.print(line, soft_wrap=True)

	def info(self, message: str) -> None:
		self.log(LogLevel.INFO, message)

	def warning(self, message: str) -> None:
		self.log(LogLevel.WARNING, message)

	def error(self, message: str) -> None:
		self.log(LogLevel.ERROR, message)

	def hint(self, message: str) -> None:
		"""Write an unprefixed ``Hint:`` line below an error."""
		try:
			rich_console = get_rich_console()
		except MissingDependencyError:
			print(f"Hint: {message}", file=sys.stderr)
			return

		from rich.text import Text

		line = Text("Hint: ", style="yellow")
		line.append(message)
		rich_console.print(line, soft_wrap=True)


console = _ConsoleProxy()
