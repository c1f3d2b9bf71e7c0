"""Tests for selection grouping and traversal."""

from __future__ import annotations

import pytest

from rulectl.domain.selection import (
    ProjectContext,
    RulesContent,
    group_selection,
    iterate_layers_stacks_libraries,
    walk_layers_stacks_libraries,
)
from rulectl.domain.taxonomy import NotFoundError, Taxonomy
from rulectl.domain.types import Layer


class TestGroupSelection:
    def test_groups_by_stack_and_layer(self, taxonomy: Taxonomy) -> None:
        groups = group_selection(taxonomy, ["vitest", "pinia", "react-query"])
        assert groups.stacks_by_layer == {
            Layer.FRONTEND: ("react", "vue"),
            Layer.TESTING: ("unit",),
        }
        assert groups.libraries_by_stack == {
            "react": ("react-query",),
            "vue": ("pinia",),
            "unit": ("vitest",),
        }

    def test_excludes_unselected_stacks_and_layers(self, taxonomy: Taxonomy) -> None:
        groups = group_selection(taxonomy, ["zustand"])
        assert list(groups.stacks_by_layer) == [Layer.FRONTEND]
        assert "vue" not in groups.libraries_by_stack

    def test_libraries_in_taxonomy_order(self, taxonomy: Taxonomy) -> None:
        groups = group_selection(taxonomy, ["zustand", "react-query"])
        assert groups.libraries_by_stack["react"] == ("react-query", "zustand")

    def test_empty_selection(self, taxonomy: Taxonomy) -> None:
        groups = group_selection(taxonomy, [])
        assert groups.is_empty
        assert groups.stacks_by_layer == {}

    def test_unknown_library(self, taxonomy: Taxonomy) -> None:
        with pytest.raises(NotFoundError):
            group_selection(taxonomy, ["redux"])


class TestTraversal:
    def test_layer_order_ignores_mapping_order(self) -> None:
        stacks_by_layer = {Layer.TESTING: ["unit"], Layer.FRONTEND: ["react"]}
        libraries_by_stack = {"unit": ["vitest"], "react": ["zustand"]}
        visited = list(walk_layers_stacks_libraries(stacks_by_layer, libraries_by_stack))
        assert visited == [
            (Layer.FRONTEND, "react", "zustand"),
            (Layer.TESTING, "unit", "vitest"),
        ]

    def test_stack_without_libraries_is_skipped(self) -> None:
        visited = list(walk_layers_stacks_libraries({Layer.BACKEND: ["node"]}, {}))
        assert visited == []

    def test_callback_invoked_per_library(self, taxonomy: Taxonomy) -> None:
        groups = group_selection(taxonomy, ["express", "react-query", "zustand"])
        seen: list[str] = []
        iterate_layers_stacks_libraries(
            groups.stacks_by_layer,
            groups.libraries_by_stack,
            lambda layer, stack, library: seen.append(f"{layer}/{stack}/{library}"),
        )
        assert seen == [
            "frontend/react/react-query",
            "frontend/react/zustand",
            "backend/node/express",
        ]


class TestModels:
    def test_project_placeholders(self) -> None:
        context = ProjectContext(name="Acme", description="Demo")
        assert context.placeholders() == {
            "project_name": "Acme",
            "project_description": "Demo",
        }

    def test_rules_content_to_dict(self) -> None:
        content = RulesContent(markdown="# x\n", label="All Rules", file_name="rules.mdc")
        assert content.to_dict() == {
            "markdown": "# x\n",
            "label": "All Rules",
            "fileName": "rules.mdc",
        }
