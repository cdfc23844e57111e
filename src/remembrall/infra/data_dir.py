"""Infrastructure: application data directory resolution.

This module decides where ``rmbrl.db`` lives and makes sure the
directory exists.

Rules
-----
* ``RMBRL_DATA_DIR`` always wins over the platform default.
* Platform detection via :func:`platform.system` only.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from pathlib import Path

from remembrall.exceptions import DataDirectoryError
from remembrall.utils import APP_DIRNAME, DATA_DIR_ENV, DB_FILENAME


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_data_dir(
    env: Mapping[str, str] | None = None,
    system: str | None = None,
) -> Path:
    """Return the directory holding the memories database.

    Parameters
    ----------
    env:
        Environment mapping.  Defaults to :data:`os.environ`.
    system:
        Platform name as reported by :func:`platform.system`.  Defaults
        to the running platform.

    Raises
    ------
    DataDirectoryError
        When the platform is unknown or its base variable is unset.
    """
    env = os.environ if env is None else env
    override = env.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    system = (system or platform.system()).lower()
    if system == "windows":
        return _require_env(env, "APPDATA") / APP_DIRNAME
    if system == "darwin":
        return _require_env(env, "HOME") / "Library" / "Application Support" / APP_DIRNAME
    if system == "linux":
        return _require_env(env, "HOME") / ".local" / "share" / APP_DIRNAME
    raise DataDirectoryError(
        "Running on an unknown operating system.",
        hint=f"Set {DATA_DIR_ENV} to choose where memories are stored.",
    )


def _require_env(env: Mapping[str, str], name: str) -> Path:
    value = env.get(name)
    if not value:
        raise DataDirectoryError(
            f"{name} environment variable not found!",
            hint=f"Set {name} or {DATA_DIR_ENV}.",
        )
    return Path(value)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def ensure_data_dir(path: Path) -> Path:
    """Create *path* (and missing parents) if needed and return it."""
    try:
        path.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise DataDirectoryError(
            f"Failed to create path: {path}\nReason: {exc.strerror or exc}",
        ) from exc
    return path


def database_path(data_dir: Path) -> Path:
    """Return the database file location inside *data_dir*."""
    return data_dir / DB_FILENAME
