"""Jinja2 environments for packaged rules templates.

A project can shadow any packaged template by dropping a file of the same
name in ``<project>/.rulectl/templates/<group>/`` or directly in
``<project>/.rulectl/templates/``. Environments are cached per
``(group, project_root)``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

OVERRIDE_DIR = Path(".rulectl") / "templates"


def override_dirs(group: str, project_root: Path) -> list[Path]:
    """Existing override directories for *group*, most specific first."""
    base = project_root / OVERRIDE_DIR
    return [path for path in (base / group, base) if path.is_dir()]


@lru_cache(maxsize=8)
def build_template_environment(group: str, *, project_root: Path | None = None) -> Environment:
    """Environment for ``templates/<group>`` with project overrides searched first."""
    loaders: list[BaseLoader] = []
    if project_root is not None:
        dirs = override_dirs(group, project_root)
        if dirs:
            loaders.append(FileSystemLoader([str(path) for path in dirs]))
    loaders.append(PackageLoader("rulectl", f"templates/{group}"))
    return Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)
