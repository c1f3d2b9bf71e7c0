"""DependencyService — pre-select libraries from a project's dependency file.

Supported inputs:
- ``package.json`` — dependencies, devDependencies, peerDependencies
- ``requirements*.txt`` — one requirement per line
- ``pyproject.toml`` — ``[project].dependencies`` and optional dependencies
"""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from rulectl.services.base import BaseService
from rulectl.services.result import ServiceResult, failure
from rulectl.services.telemetry import traced

_NPM_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")

# Name portion of a PEP 508 requirement: stops at extras, specifiers, markers, or URLs.
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def parse_package_json(text: str) -> list[str]:
    """Package names declared in a ``package.json`` document."""
    data = json.loads(text)
    if not isinstance(data, dict):
        msg = "package.json must contain a JSON object"
        raise ValueError(msg)
    names: list[str] = []
    for section in _NPM_SECTIONS:
        block = data.get(section) or {}
        if isinstance(block, dict):
            names.extend(str(name) for name in block)
    return _unique(names)


def parse_requirement_line(line: str) -> str | None:
    """Normalized distribution name from one requirement line, if any."""
    line = line.split("#", 1)[0].strip()
    if not line or line.startswith(("-", "git+", "http:", "https:")):
        return None
    match = _REQUIREMENT_NAME.match(line)
    if match is None:
        return None
    return re.sub(r"[-_.]+", "-", match.group(1)).lower()


def parse_requirements(text: str) -> list[str]:
    """Package names listed in a ``requirements.txt`` document."""
    names = (parse_requirement_line(line) for line in text.splitlines())
    return _unique(name for name in names if name)


def parse_pyproject(text: str) -> list[str]:
    """Package names declared in a ``pyproject.toml`` ``[project]`` table."""
    data: dict[str, Any] = tomllib.loads(text)
    project = data.get("project") or {}
    requirements: list[str] = list(project.get("dependencies") or [])
    for group in (project.get("optional-dependencies") or {}).values():
        requirements.extend(group)
    names = (parse_requirement_line(str(req)) for req in requirements)
    return _unique(name for name in names if name)


def _unique(names: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


class DependencyService(BaseService):
    """Map dependency-file packages onto taxonomy libraries."""

    @traced
    def detect(self, path: Path) -> ServiceResult:
        """Detect libraries from the dependency file at *path*."""
        op = "detect_dependencies"
        parser = self._parser_for(path)
        if parser is None:
            return failure(
                op,
                "UNSUPPORTED_FILE",
                f"Unsupported dependency file: {path.name}",
                path=str(path),
                supported=["package.json", "requirements*.txt", "pyproject.toml"],
            )

        try:
            packages = parser(path.read_text(encoding="utf-8"))
        except OSError as exc:
            return failure(op, "READ_FAILED", str(exc), path=str(path))
        except ValueError as exc:
            msg = f"Could not parse {path.name}: {exc}"
            return failure(op, "PARSE_FAILED", msg, path=str(path))

        return ServiceResult(ok=True, op=op, data=self.match_packages(packages, path=path))

    def match_packages(self, packages: list[str], *, path: Path | None = None) -> dict[str, Any]:
        """Split *packages* into matched library ids and unmatched names."""
        matched: set[str] = set()
        unmatched: list[str] = []
        for package in packages:
            library_id = self._taxonomy.find_by_package(package)
            if library_id is None:
                unmatched.append(package)
            else:
                matched.add(library_id)

        data: dict[str, Any] = {
            "libraries": self._taxonomy.sort_libraries(matched),
            "unmatched": unmatched,
            "package_count": len(packages),
        }
        if path is not None:
            data["path"] = str(path)
        return data

    @staticmethod
    def _parser_for(path: Path) -> Callable[[str], list[str]] | None:
        name = path.name.lower()
        if name == "package.json":
            return parse_package_json
        if name == "pyproject.toml":
            return parse_pyproject
        if name.startswith("requirements") and name.endswith(".txt"):
            return parse_requirements
        return None
