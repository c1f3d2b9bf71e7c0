"""Tests for ExportService."""

from __future__ import annotations

import json
from pathlib import Path

from rulectl.domain.selection import RulesContent
from rulectl.domain.taxonomy import Taxonomy
from rulectl.services.export import ExportService


class TestPreparedRules:
    def test_every_library_keyed_in_order(self, taxonomy: Taxonomy) -> None:
        prepared = ExportService(taxonomy).build_prepared_rules()
        assert list(prepared) == list(taxonomy.library_ids)

    def test_entry_shape(self, taxonomy: Taxonomy) -> None:
        entry = ExportService(taxonomy).build_prepared_rules()["express"]
        assert entry == {
            "markdown": (
                "## Backend\n\n### Guidelines for Node.js\n\n"
                "#### Express\n\n- Use express.Router per resource\n\n"
            ),
            "label": "Backend - Node.js - Express",
            "fileName": "backend-node-express.mdc",
            "layer": "backend",
            "stack": "node",
        }

    def test_export_writes_json(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        out = tmp_path / "dist" / "prepared-rules.json"
        result = ExportService(taxonomy).export_prepared_rules(out)
        assert result.ok
        assert result.data["library_count"] == 5
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["pinia"]["fileName"] == "frontend-vue-pinia.mdc"

    def test_export_write_failure(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        result = ExportService(taxonomy).export_prepared_rules(blocker / "rules.json")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"


class TestMarkdownExport:
    def test_all_libraries(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        result = ExportService(taxonomy).export_markdown(tmp_path)
        assert result.ok
        assert result.data["file_count"] == 5
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted(result.data["files"])

    def test_explicit_documents(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        documents = [RulesContent(markdown="# x\n", label="X", file_name="x.mdc")]
        result = ExportService(taxonomy).export_markdown(tmp_path, documents)
        assert result.data["files"] == ["x.mdc"]

    def test_unsafe_file_name(self, taxonomy: Taxonomy, tmp_path: Path) -> None:
        documents = [RulesContent(markdown="", label="X", file_name="../x.mdc")]
        result = ExportService(taxonomy).export_markdown(tmp_path / "out", documents)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"
