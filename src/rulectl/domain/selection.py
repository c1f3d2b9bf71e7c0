"""Selection model — project context, generated documents, and groupings.

``group_selection`` is the only way derived groupings are produced: it
recomputes ``stacks_by_layer`` and ``libraries_by_stack`` from the
taxonomy and the raw selection on every call.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import BaseModel

from rulectl.domain.types import Layer

if TYPE_CHECKING:
    from rulectl.domain.taxonomy import Taxonomy

StacksByLayer = Mapping[Layer, Sequence[str]]
LibrariesByStack = Mapping[str, Sequence[str]]


class ProjectContext(BaseModel):
    """Caller-supplied project details substituted into rule placeholders."""

    model_config = {"frozen": True}

    name: str = ""
    description: str = ""

    def placeholders(self) -> dict[str, str]:
        return {"project_name": self.name, "project_description": self.description}


class RulesContent(BaseModel):
    """One generated rules document."""

    model_config = {"frozen": True}

    markdown: str
    label: str
    file_name: str

    def to_dict(self) -> dict[str, str]:
        """Serialized shape with the ``fileName`` key used by consumers."""
        return {"markdown": self.markdown, "label": self.label, "fileName": self.file_name}


@dataclass(frozen=True)
class SelectionGroups:
    """Derived views of a selection, in taxonomy order."""

    stacks_by_layer: dict[Layer, tuple[str, ...]] = field(default_factory=dict)
    libraries_by_stack: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.libraries_by_stack


def group_selection(taxonomy: Taxonomy, library_ids: Iterable[str]) -> SelectionGroups:
    """Group selected libraries by stack and stacks by layer.

    Only stacks with at least one selected library appear, and only
    layers with at least one such stack. Raises ``NotFoundError`` for
    identifiers outside the taxonomy.
    """
    ordered = taxonomy.sort_libraries(library_ids)

    libraries_by_stack: dict[str, list[str]] = {}
    for library_id in ordered:
        libraries_by_stack.setdefault(taxonomy.stack_of(library_id), []).append(library_id)

    stacks_by_layer: dict[Layer, tuple[str, ...]] = {}
    for layer in taxonomy.layers:
        stacks = tuple(s for s in taxonomy.stacks_of(layer) if s in libraries_by_stack)
        if stacks:
            stacks_by_layer[layer] = stacks

    return SelectionGroups(
        stacks_by_layer=stacks_by_layer,
        libraries_by_stack={stack: tuple(libs) for stack, libs in libraries_by_stack.items()},
    )


def walk_layers_stacks_libraries(
    stacks_by_layer: StacksByLayer,
    libraries_by_stack: LibrariesByStack,
) -> Iterator[tuple[Layer, str, str]]:
    """Yield ``(layer, stack, library)`` for every grouped library.

    Layers are visited in :class:`Layer` declaration order regardless of
    mapping order; stacks and libraries keep their sequence order.
    """
    for layer in Layer:
        for stack in stacks_by_layer.get(layer, ()):
            for library in libraries_by_stack.get(stack, ()):
                yield layer, stack, library


def iterate_layers_stacks_libraries(
    stacks_by_layer: StacksByLayer,
    libraries_by_stack: LibrariesByStack,
    on_library: Callable[[Layer, str, str], None],
) -> None:
    """Invoke *on_library* once per grouped library in traversal order."""
    for layer, stack, library in walk_layers_stacks_libraries(stacks_by_layer, libraries_by_stack):
        on_library(layer, stack, library)
