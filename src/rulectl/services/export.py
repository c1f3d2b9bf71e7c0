"""ExportService — bulk rules export for offline consumers.

``export_prepared_rules`` renders every library in the taxonomy as a
standalone document and writes one JSON file keyed by library id. A
read-only lookup service can serve rules from that file without loading
the taxonomy or the renderer.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rulectl.domain.selection import RulesContent
from rulectl.infrastructure.filesystem import write_json, write_rules_files
from rulectl.services.base import BaseService
from rulectl.services.result import ServiceResult, failure
from rulectl.services.strategies import MultiFileRulesStrategy
from rulectl.services.telemetry import trace_span, traced


class ExportService(BaseService):
    """Export rules content in portable formats."""

    def library_documents(self) -> list[RulesContent]:
        """Standalone document for every library, in traversal order."""
        strategy = MultiFileRulesStrategy(self._taxonomy)
        documents: list[RulesContent] = []
        for library_id in self._taxonomy.library_ids:
            layer, stack = self._taxonomy.locate(library_id)
            documents.append(strategy.build_rules_content(layer, stack, library_id))
        return documents

    def build_prepared_rules(self) -> dict[str, dict[str, str]]:
        """Render every library in traversal order, keyed by library id."""
        prepared: dict[str, dict[str, str]] = {}
        for library_id, document in zip(
            self._taxonomy.library_ids, self.library_documents(), strict=True
        ):
            layer, stack = self._taxonomy.locate(library_id)
            prepared[library_id] = {
                **document.to_dict(),
                "layer": layer.value,
                "stack": stack,
            }
        return prepared

    @traced
    def export_prepared_rules(self, output_file: Path) -> ServiceResult:
        """Write the prepared rules JSON to *output_file*."""
        op = "export_prepared"
        with trace_span("render_all") as span:
            prepared = self.build_prepared_rules()
            if span is not None:
                span.annotate("libraries", len(prepared))

        try:
            write_json(output_file, prepared)
        except OSError as exc:
            return failure(op, "WRITE_FAILED", str(exc), output_file=str(output_file))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "output_file": str(output_file.resolve()),
                "library_count": len(prepared),
            },
        )

    @traced
    def export_markdown(
        self,
        output_dir: Path,
        documents: Sequence[RulesContent] | None = None,
    ) -> ServiceResult:
        """Write *documents* (default: every library) to ``output_dir/{file_name}``."""
        op = "export_markdown"
        if documents is None:
            documents = self.library_documents()
        try:
            written = write_rules_files(output_dir, documents)
        except (OSError, ValueError) as exc:
            return failure(op, "WRITE_FAILED", str(exc), output_dir=str(output_dir))

        payload: dict[str, Any] = {
            "output_dir": str(output_dir.resolve()),
            "files": [path.name for path in written],
            "file_count": len(written),
        }
        return ServiceResult(ok=True, op=op, data=payload)
