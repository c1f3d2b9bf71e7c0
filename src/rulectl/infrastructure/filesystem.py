"""Filesystem output for generated rules documents.

Pure rendering lives in :mod:`rulectl.services.markdown`. This module
handles actual file I/O and path safety.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rulectl.domain.selection import RulesContent


def resolve_output_path(output_dir: Path, file_name: str) -> Path:
    """Resolve *file_name* inside *output_dir*.

    Raises ``ValueError`` when the name contains a path separator or would
    escape the output directory.
    """
    if not file_name or "/" in file_name or "\\" in file_name or file_name in (".", ".."):
        msg = f"Invalid rules file name: {file_name!r}"
        raise ValueError(msg)

    result = output_dir / file_name
    if not result.resolve().is_relative_to(output_dir.resolve()):
        msg = f"Path escapes output directory: {result}"
        raise ValueError(msg)
    return result


def write_rules_files(output_dir: Path, documents: Iterable[RulesContent]) -> list[Path]:
    """Write each document to ``output_dir/{file_name}``.

    Creates the directory if needed. Returns written paths in input order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for document in documents:
        path = resolve_output_path(output_dir, document.file_name)
        path.write_text(document.markdown, encoding="utf-8")
        written.append(path)
    return written


def write_json(path: Path, payload: Any) -> None:
    """Write *payload* as pretty-printed UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
