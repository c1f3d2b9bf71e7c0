"""RulesService — generate rules documents for a library selection."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rulectl.domain.selection import ProjectContext, group_selection
from rulectl.domain.taxonomy import library_file_name
from rulectl.domain.types import StrategyKind
from rulectl.infrastructure.filesystem import write_rules_files
from rulectl.infrastructure.templates import build_template_environment
from rulectl.services.base import BaseService
from rulectl.services.markdown import ALL_RULES_FILE_NAME, find_unresolved_placeholders
from rulectl.services.result import ServiceResult, failure
from rulectl.services.strategies import get_strategy
from rulectl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from jinja2 import Environment

    from rulectl.domain.taxonomy import Taxonomy

logger = logging.getLogger(__name__)


class RulesService(BaseService):
    """Run a generation strategy and optionally write the documents to disk."""

    def __init__(self, taxonomy: Taxonomy, *, project_root: Path | None = None) -> None:
        super().__init__(taxonomy)
        self._environment: Environment | None = (
            build_template_environment("rules", project_root=project_root)
            if project_root is not None
            else None
        )

    @traced
    def generate(
        self,
        libraries: Sequence[str],
        *,
        project: ProjectContext | None = None,
        strategy: StrategyKind | str = StrategyKind.SINGLE,
        output_dir: Path | None = None,
        warn_unresolved_placeholders: bool = False,
    ) -> ServiceResult:
        """Generate rules for *libraries*.

        An empty selection yields the single project fallback document.
        """
        op = "generate_rules"
        project = project or ProjectContext()

        try:
            kind = StrategyKind(strategy)
        except ValueError:
            return failure(
                op,
                "INVALID_STRATEGY",
                f"Unknown strategy: {strategy}",
                strategy=str(strategy),
                valid=[k.value for k in StrategyKind],
            )

        rejected = self._unknown_libraries(op, libraries)
        if rejected is not None:
            return rejected

        with trace_span("group_selection"):
            groups = group_selection(self._taxonomy, libraries)
            ordered = self._taxonomy.sort_libraries(libraries)

        generator = get_strategy(kind, self._taxonomy, environment=self._environment)
        with trace_span("render") as span:
            documents = generator.generate_rules(
                project.name,
                project.description,
                ordered,
                groups.stacks_by_layer,
                groups.libraries_by_stack,
            )
            if span is not None:
                span.annotate("documents", len(documents))

        warnings: list[str] = []
        if warn_unresolved_placeholders:
            warnings = self._placeholder_warnings(kind, ordered, project)

        data: dict[str, Any] = {
            "strategy": kind.value,
            "project": project.model_dump(),
            "libraries": ordered,
            "documents": [document.to_dict() for document in documents],
        }

        if output_dir is not None:
            try:
                written = write_rules_files(output_dir, documents)
            except (OSError, ValueError) as exc:
                return failure(op, "WRITE_FAILED", str(exc), output_dir=str(output_dir))
            data["output_dir"] = str(output_dir.resolve())
            data["files"] = [path.name for path in written]

        logger.debug("Generated %d document(s) with %s strategy", len(documents), kind.value)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def _placeholder_warnings(
        self, kind: StrategyKind, libraries: list[str], project: ProjectContext
    ) -> list[str]:
        """Warn about rule placeholders no project value fills.

        Only rule fragments are scanned, never project text, and each key is
        reported once per output file.
        """
        known = project.placeholders()
        seen: dict[str, list[str]] = {}
        for library_id in libraries:
            entry = self._taxonomy.library(library_id)
            file_name = (
                ALL_RULES_FILE_NAME
                if kind is StrategyKind.SINGLE
                else library_file_name(entry.layer, entry.stack, entry.id)
            )
            keys = seen.setdefault(file_name, [])
            for rule in entry.rules:
                keys.extend(
                    key for key in find_unresolved_placeholders(rule, known) if key not in keys
                )
        return [
            f"Unresolved placeholder {{{{{key}}}}} in {file_name}"
            for file_name, keys in seen.items()
            for key in keys
        ]
