"""Locate ``rulectl.toml``.

``RULECTL_CONFIG`` wins when set. Otherwise the search walks up from the
start directory and stops at the first directory holding the file, or at
a repository root (``.git``) so a stray config above the project is
never picked up.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "rulectl.toml"
CONFIG_ENV_VAR = "RULECTL_CONFIG"
ROOT_MARKER = ".git"


def _search_dirs(start: Path) -> Iterator[Path]:
    for directory in (start, *start.parents):
        yield directory
        if (directory / ROOT_MARKER).exists():
            return


def find_config(start: Path | None = None) -> Path | None:
    """Path of the effective config file, or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    for directory in _search_dirs((start or Path.cwd()).resolve()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
