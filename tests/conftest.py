"""Shared pytest fixtures for rulectl tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rulectl.domain.taxonomy import Taxonomy
from rulectl.services.telemetry import disable_telemetry

# Backend is declared before frontend on purpose: traversal must follow
# fixed layer order, not file order.
TAXONOMY_DATA: dict[str, Any] = {
    "layers": [
        {
            "id": "backend",
            "stacks": [
                {
                    "id": "node",
                    "name": "Node.js",
                    "libraries": [
                        {
                            "id": "express",
                            "name": "Express",
                            "packages": ["express"],
                            "rules": ["Use express.Router per resource"],
                        }
                    ],
                }
            ],
        },
        {
            "id": "frontend",
            "stacks": [
                {
                    "id": "react",
                    "name": "React",
                    "libraries": [
                        {
                            "id": "react-query",
                            "name": "React Query",
                            "packages": ["@tanstack/react-query"],
                            "rules": [
                                "Use query key factories",
                                "Prefetch in {{project_name}} loaders",
                            ],
                        },
                        {
                            "id": "zustand",
                            "name": "Zustand",
                            "packages": ["zustand"],
                            "rules": ["Create one store per domain"],
                        },
                    ],
                },
                {
                    "id": "vue",
                    "name": "Vue",
                    "libraries": [
                        {
                            "id": "pinia",
                            "name": "Pinia",
                            "packages": ["pinia"],
                            "rules": ["Use setup stores"],
                        }
                    ],
                },
            ],
        },
        {
            "id": "testing",
            "stacks": [
                {
                    "id": "unit",
                    "name": "Unit Testing",
                    "libraries": [
                        {
                            "id": "vitest",
                            "name": "Vitest",
                            "packages": ["vitest"],
                            "rules": ["Mock modules for {{ unknown_key }} with vi.mock"],
                        }
                    ],
                }
            ],
        },
    ]
}


@pytest.fixture
def taxonomy_data() -> dict[str, Any]:
    """A fresh, mutable copy of the test taxonomy document."""
    return copy.deepcopy(TAXONOMY_DATA)


@pytest.fixture
def taxonomy(taxonomy_data: dict[str, Any]) -> Taxonomy:
    """Small validated taxonomy: 3 layers, 4 stacks, 5 libraries."""
    return Taxonomy.from_mapping(taxonomy_data)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no inherited config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    for var in ("RULECTL_CONFIG", "RULECTL_PROJECT__NAME", "RULECTL_RULES__STRATEGY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` enables telemetry for the rest of the thread; switch it back off."""
    yield
    disable_telemetry()


@pytest.fixture
def taxonomy_file(tmp_path: Path) -> Path:
    """The test taxonomy written as a YAML (JSON-flow) file for ``--taxonomy``."""
    path = tmp_path / "taxonomy.yaml"
    path.write_text(json.dumps(TAXONOMY_DATA, indent=2), encoding="utf-8")
    return path
