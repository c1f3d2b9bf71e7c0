"""Tests for RulesService."""

from __future__ import annotations

from pathlib import Path

from rulectl.domain.selection import ProjectContext
from rulectl.domain.taxonomy import Taxonomy
from rulectl.services.rules import RulesService
from rulectl.services.telemetry import enable_telemetry

ACME = ProjectContext(name="Acme", description="Demo")


class TestGenerate:
    def test_single_file(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["react-query"], project=ACME)
        assert result.ok
        assert result.op == "generate_rules"
        assert result.data["strategy"] == "single"
        assert result.data["libraries"] == ["react-query"]
        assert result.data["project"] == {"name": "Acme", "description": "Demo"}
        (document,) = result.data["documents"]
        assert document["fileName"] == "rules.mdc"
        assert document["markdown"].startswith("# AI Rules for Acme\n\nDemo\n\n## Frontend")

    def test_multi_file(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(
            ["express", "pinia"], project=ACME, strategy="multi"
        )
        assert result.ok
        assert [d["fileName"] for d in result.data["documents"]] == [
            "project.mdc",
            "frontend-vue-pinia.mdc",
            "backend-node-express.mdc",
        ]

    def test_libraries_sorted_and_deduplicated(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["vitest", "zustand", "vitest"])
        assert result.data["libraries"] == ["zustand", "vitest"]

    def test_empty_selection(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate([], project=ACME, strategy="multi")
        assert result.ok
        assert [d["fileName"] for d in result.data["documents"]] == ["project.mdc"]

    def test_unknown_library(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["zustand", "redux", "mobx"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_LIBRARY"
        assert result.error.detail["libraries"] == ["mobx", "redux"]

    def test_invalid_strategy(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["zustand"], strategy="zip")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_STRATEGY"

    def test_unresolved_placeholder_warnings(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(
            ["vitest"], project=ACME, warn_unresolved_placeholders=True
        )
        assert result.ok
        assert result.warnings == ["Unresolved placeholder {{unknown_key}} in rules.mdc"]

    def test_placeholders_silent_by_default(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["vitest"], project=ACME)
        assert result.warnings == []

    def test_project_text_never_warns(self, taxonomy: Taxonomy) -> None:
        project = ProjectContext(name="{{brand}}", description="Uses {{ tokens }} literally")
        result = RulesService(taxonomy).generate(
            ["react-query"], project=project, warn_unresolved_placeholders=True
        )
        assert result.ok
        assert result.warnings == []
        assert "# AI Rules for {{brand}}" in result.data["documents"][0]["markdown"]

    def test_multi_file_warning_names_library_file(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(
            ["vitest", "zustand"],
            project=ACME,
            strategy="multi",
            warn_unresolved_placeholders=True,
        )
        assert result.warnings == [
            "Unresolved placeholder {{unknown_key}} in testing-unit-vitest.mdc"
        ]


class TestWriteOutput:
    def test_writes_documents(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        out = tmp_path / "rules"
        result = RulesService(taxonomy).generate(
            ["zustand", "express"], project=ACME, strategy="multi", output_dir=out
        )
        assert result.ok
        assert result.data["files"] == [
            "project.mdc",
            "frontend-react-zustand.mdc",
            "backend-node-express.mdc",
        ]
        assert (out / "project.mdc").read_text(encoding="utf-8") == (
            "# AI Rules for Acme\n\nDemo\n\n"
        )
        assert (out / "backend-node-express.mdc").read_text(encoding="utf-8").startswith(
            "## Backend\n\n"
        )

    def test_write_failure(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        result = RulesService(taxonomy).generate(["zustand"], output_dir=blocker)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"


class TestTemplateOverrides:
    def test_project_template_override(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        templates = tmp_path / ".rulectl" / "templates" / "rules"
        templates.mkdir(parents=True)
        (templates / "project.md.j2").write_text(
            "# {{ name }} conventions\n\n", encoding="utf-8"
        )
        result = RulesService(taxonomy, project_root=tmp_path).generate(
            ["zustand"], project=ACME
        )
        assert result.data["documents"][0]["markdown"].startswith(
            "# Acme conventions\n\n## Frontend"
        )


class TestTelemetry:
    def test_meta_absent_by_default(self, taxonomy: Taxonomy) -> None:
        result = RulesService(taxonomy).generate(["zustand"])
        assert result.meta is None

    def test_span_tree_when_enabled(self, taxonomy: Taxonomy) -> None:
        enable_telemetry()
        result = RulesService(taxonomy).generate(["zustand"])
        assert result.meta is not None
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "RulesService.generate"
        assert [child["name"] for child in telemetry["children"]] == [
            "group_selection",
            "render",
        ]
