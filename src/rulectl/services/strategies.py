"""Rules generation strategies.

Both strategies implement the :class:`RulesGenerationStrategy` protocol and
are pure functions of their arguments: the same selection always yields
byte-identical documents, whatever order the libraries were picked in.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from rulectl.domain.selection import (
    LibrariesByStack,
    ProjectContext,
    RulesContent,
    StacksByLayer,
    iterate_layers_stacks_libraries,
)
from rulectl.domain.types import StrategyKind
from rulectl.services.markdown import (
    ALL_RULES_FILE_NAME,
    ALL_RULES_LABEL,
    create_empty_project_rules_content,
    create_library_file_metadata,
    create_project_markdown,
    create_project_rules_content,
    render_library_section,
)

if TYPE_CHECKING:
    from jinja2 import Environment

    from rulectl.domain.taxonomy import Taxonomy
    from rulectl.domain.types import Layer


class RulesGenerationStrategy(Protocol):
    """Turns a grouped selection into an ordered list of rules documents."""

    def generate_rules(
        self,
        project_name: str,
        project_description: str,
        selected_libraries: Sequence[str],
        stacks_by_layer: StacksByLayer,
        libraries_by_stack: LibrariesByStack,
    ) -> list[RulesContent]: ...


class SingleFileRulesStrategy:
    """Everything in one ``rules.mdc`` document with de-duplicated headings."""

    def __init__(self, taxonomy: Taxonomy, *, environment: Environment | None = None) -> None:
        self._taxonomy = taxonomy
        self._environment = environment

    def generate_rules(
        self,
        project_name: str,
        project_description: str,
        selected_libraries: Sequence[str],
        stacks_by_layer: StacksByLayer,
        libraries_by_stack: LibrariesByStack,
    ) -> list[RulesContent]:
        if not selected_libraries:
            return create_empty_project_rules_content(
                project_name, project_description, environment=self._environment
            )

        context = ProjectContext(name=project_name, description=project_description)
        markdown = create_project_markdown(
            project_name, project_description, environment=self._environment
        ) + self._library_markdown(context, stacks_by_layer, libraries_by_stack)
        return [
            RulesContent(markdown=markdown, label=ALL_RULES_LABEL, file_name=ALL_RULES_FILE_NAME)
        ]

    def _library_markdown(
        self,
        context: ProjectContext,
        stacks_by_layer: StacksByLayer,
        libraries_by_stack: LibrariesByStack,
    ) -> str:
        parts: list[str] = []
        previous_layer: str | None = None
        previous_stack: str | None = None

        def on_library(layer: Layer, stack: str, library: str) -> None:
            nonlocal previous_layer, previous_stack
            include_layer_header = layer != previous_layer
            include_stack_header = stack != previous_stack

            # Separate stacks inside the same layer; a layer header already spaces itself.
            if include_stack_header and not include_layer_header and previous_stack:
                parts.append("\n")

            parts.append(
                render_library_section(
                    self._taxonomy,
                    layer,
                    stack,
                    library,
                    include_layer_header=include_layer_header,
                    include_stack_header=include_stack_header,
                    context=context,
                )
            )
            previous_layer = layer
            previous_stack = stack

        iterate_layers_stacks_libraries(stacks_by_layer, libraries_by_stack, on_library)
        return "".join(parts)


class MultiFileRulesStrategy:
    """A project document plus one standalone document per library."""

    def __init__(self, taxonomy: Taxonomy, *, environment: Environment | None = None) -> None:
        self._taxonomy = taxonomy
        self._environment = environment

    def generate_rules(
        self,
        project_name: str,
        project_description: str,
        selected_libraries: Sequence[str],
        stacks_by_layer: StacksByLayer,
        libraries_by_stack: LibrariesByStack,
    ) -> list[RulesContent]:
        if not selected_libraries:
            return create_empty_project_rules_content(
                project_name, project_description, environment=self._environment
            )

        context = ProjectContext(name=project_name, description=project_description)
        documents = [
            create_project_rules_content(
                project_name, project_description, environment=self._environment
            )
        ]

        def on_library(layer: Layer, stack: str, library: str) -> None:
            documents.append(self.build_rules_content(layer, stack, library, context=context))

        iterate_layers_stacks_libraries(stacks_by_layer, libraries_by_stack, on_library)
        return documents

    def build_rules_content(
        self,
        layer: Layer,
        stack: str,
        library: str,
        *,
        context: ProjectContext | None = None,
    ) -> RulesContent:
        """Standalone document for one library, with both headings."""
        label, file_name = create_library_file_metadata(self._taxonomy, layer, stack, library)
        markdown = render_library_section(
            self._taxonomy,
            layer,
            stack,
            library,
            include_layer_header=True,
            include_stack_header=True,
            context=context,
        )
        return RulesContent(markdown=markdown, label=label, file_name=file_name)


def get_strategy(
    kind: StrategyKind | str,
    taxonomy: Taxonomy,
    *,
    environment: Environment | None = None,
) -> RulesGenerationStrategy:
    """Return the strategy registered for *kind*.

    Raises ``ValueError`` for an unknown kind.
    """
    factory = _STRATEGIES[StrategyKind(kind)]
    return factory(taxonomy, environment=environment)


_STRATEGIES: dict[StrategyKind, type[SingleFileRulesStrategy] | type[MultiFileRulesStrategy]] = {
    StrategyKind.SINGLE: SingleFileRulesStrategy,
    StrategyKind.MULTI: MultiFileRulesStrategy,
}
