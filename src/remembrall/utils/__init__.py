"""Shared utilities — constants and cross-cutting values.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""

from __future__ import annotations

MAX_FIELD_BYTES: int = 256
"""Upper bound, in UTF-8 bytes, for ``task`` and ``project`` values."""

APP_DIRNAME: str = "rmbrl"
"""Directory created under the platform application-data location."""

DB_FILENAME: str = "rmbrl.db"
"""SQLite database file stored inside the data directory."""

DATA_DIR_ENV: str = "RMBRL_DATA_DIR"
"""Environment variable that overrides the resolved data directory."""
