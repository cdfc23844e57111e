"""remembrall — a tiny command-line memory for the things you are doing.

Memories live in a local SQLite file and are managed through three
commands: ``add``, ``peek`` and ``clear``.
"""

from remembrall.version import __version__

__all__: list[str] = ["__version__"]
