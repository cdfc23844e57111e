"""Allow ``python -m remembrall`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m remembrall`` behaves identically to the ``rmbrl``
console script.
"""

from __future__ import annotations

from remembrall.cli.app import cli

if __name__ == "__main__":
    cli()
