"""TaxonomyService — read-only views of the technology catalog."""

from __future__ import annotations

from typing import Any

from rulectl.domain.taxonomy import NotFoundError
from rulectl.domain.types import layer_display_name
from rulectl.services.base import BaseService
from rulectl.services.result import ServiceResult, failure
from rulectl.services.telemetry import traced


class TaxonomyService(BaseService):
    """List layers, stacks, and libraries."""

    @traced
    def list_layers(self, *, layer: str | None = None) -> ServiceResult:
        """Return the catalog tree, optionally restricted to one layer."""
        op = "list_taxonomy"
        layers = self._taxonomy.layers
        if layer is not None:
            try:
                self._taxonomy.stacks_of(layer)
            except NotFoundError as exc:
                return failure(op, "UNKNOWN_LAYER", str(exc), layer=layer)
            layers = tuple(item for item in layers if item == layer)

        items: list[dict[str, Any]] = []
        for item in layers:
            stacks = []
            for stack_id in self._taxonomy.stacks_of(item):
                stack = self._taxonomy.stack(stack_id)
                stacks.append(
                    {
                        "id": stack.id,
                        "name": stack.name,
                        "libraries": list(stack.libraries),
                    }
                )
            items.append({"id": item.value, "name": layer_display_name(item), "stacks": stacks})

        library_count = sum(
            len(stack["libraries"]) for entry in items for stack in entry["stacks"]
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"layers": items, "library_count": library_count},
        )

    @traced
    def describe_library(self, library_id: str) -> ServiceResult:
        """Return one library with its place in the taxonomy and its rules."""
        op = "describe_library"
        try:
            library = self._taxonomy.library(library_id)
        except NotFoundError as exc:
            return failure(op, "UNKNOWN_LIBRARY", str(exc), libraries=[library_id])

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": library.id,
                "name": library.name,
                "layer": library.layer.value,
                "stack": library.stack,
                "packages": list(library.packages),
                "rules": list(library.rules),
            },
        )
