"""Tests for TaxonomyService."""

from __future__ import annotations

from rulectl.domain.taxonomy import Taxonomy
from rulectl.services.taxonomy import TaxonomyService


class TestListLayers:
    def test_full_tree(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).list_layers()
        assert result.ok
        assert result.op == "list_taxonomy"
        assert [layer["id"] for layer in result.data["layers"]] == [
            "frontend",
            "backend",
            "testing",
        ]
        assert result.data["library_count"] == 5
        frontend = result.data["layers"][0]
        assert frontend["name"] == "Frontend"
        assert frontend["stacks"][0] == {
            "id": "react",
            "name": "React",
            "libraries": ["react-query", "zustand"],
        }

    def test_filter_by_layer(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).list_layers(layer="backend")
        assert [layer["id"] for layer in result.data["layers"]] == ["backend"]
        assert result.data["library_count"] == 1

    def test_valid_layer_without_stacks(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).list_layers(layer="database")
        assert result.ok
        assert result.data["layers"] == []

    def test_unknown_layer(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).list_layers(layer="mobile")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_LAYER"


class TestDescribeLibrary:
    def test_describe(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).describe_library("react-query")
        assert result.ok
        assert result.data == {
            "id": "react-query",
            "name": "React Query",
            "layer": "frontend",
            "stack": "react",
            "packages": ["@tanstack/react-query"],
            "rules": ["Use query key factories", "Prefetch in {{project_name}} loaders"],
        }

    def test_unknown(self, taxonomy: Taxonomy) -> None:
        result = TaxonomyService(taxonomy).describe_library("redux")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_LIBRARY"
