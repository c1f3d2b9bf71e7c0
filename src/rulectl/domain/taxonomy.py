"""Taxonomy catalog — Layer → Stack → Library containment and lookups.

The taxonomy is a closed, read-only catalog. It is built once from a
plain mapping (usually parsed from the packaged ``taxonomy.yaml``) and
validated structurally at construction time.

INVARIANT: ``stack_of(library)`` and ``layer_of(stack)`` are total over
the catalog. Lookups outside the catalog raise :class:`NotFoundError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from rulectl.domain.types import Layer

ID_PATTERN = re.compile(r"^[a-z0-9]+(?:[-.][a-z0-9]+)*$")

RULES_FILE_EXTENSION = ".mdc"


class NotFoundError(LookupError):
    """An identifier outside the closed taxonomy was looked up."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind}: {identifier!r}")


class TaxonomyError(ValueError):
    """The taxonomy data is structurally inconsistent."""


class Library(BaseModel):
    """A selectable technology carrying rule-content fragments."""

    model_config = {"frozen": True}

    id: str
    name: str
    stack: str
    layer: Layer
    rules: tuple[str, ...]
    packages: tuple[str, ...] = Field(default_factory=tuple)


class Stack(BaseModel):
    """A technology grouping nested under exactly one layer."""

    model_config = {"frozen": True}

    id: str
    name: str
    layer: Layer
    libraries: tuple[str, ...]


def library_file_name(layer: str, stack: str, library: str) -> str:
    """Stable, filesystem-safe rules file name for one library."""
    return f"{layer}-{stack}-{library}{RULES_FILE_EXTENSION}"


class Taxonomy:
    """Immutable Layer → Stack → Library catalog with O(1) lookups.

    Layers are always ordered by :class:`Layer` declaration order; stacks
    and libraries keep the order in which they were declared.
    """

    def __init__(self, stacks: Iterable[Stack], libraries: Iterable[Library]) -> None:
        self._stacks: dict[str, Stack] = {}
        self._libraries: dict[str, Library] = {}
        self._stacks_by_layer: dict[Layer, tuple[str, ...]] = {}

        for stack in stacks:
            if stack.id in self._stacks:
                msg = f"Duplicate stack identifier: {stack.id!r}"
                raise TaxonomyError(msg)
            self._stacks[stack.id] = stack

        for library in libraries:
            if library.id in self._libraries:
                msg = f"Duplicate library identifier: {library.id!r}"
                raise TaxonomyError(msg)
            self._libraries[library.id] = library

        self._validate()

        grouped: dict[Layer, list[str]] = {}
        for stack in self._stacks.values():
            grouped.setdefault(stack.layer, []).append(stack.id)
        self._stacks_by_layer = {
            layer: tuple(grouped[layer]) for layer in Layer if layer in grouped
        }
        self._positions: dict[str, int] = {
            library_id: position for position, library_id in enumerate(self._walk())
        }

    # ── Construction ──────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Taxonomy:
        """Build a taxonomy from the ``layers: [...]`` document shape.

        Raises :class:`TaxonomyError` on any structural problem.
        """
        raw_layers = data.get("layers")
        if not isinstance(raw_layers, list):
            msg = "Taxonomy must define a 'layers' list"
            raise TaxonomyError(msg)

        stacks: list[Stack] = []
        libraries: list[Library] = []
        seen_layers: set[Layer] = set()

        for raw_layer in raw_layers:
            layer_id = _require_str(raw_layer, "id", "layer")
            try:
                layer = Layer(layer_id)
            except ValueError:
                msg = f"Unknown layer: {layer_id!r}"
                raise TaxonomyError(msg) from None
            if layer in seen_layers:
                msg = f"Duplicate layer identifier: {layer_id!r}"
                raise TaxonomyError(msg)
            seen_layers.add(layer)

            for raw_stack in raw_layer.get("stacks") or []:
                stack_id = _require_id(raw_stack, "stack")
                library_ids: list[str] = []
                for raw_library in raw_stack.get("libraries") or []:
                    library_id = _require_id(raw_library, "library")
                    rules = raw_library.get("rules") or []
                    if not isinstance(rules, list) or not all(isinstance(r, str) for r in rules):
                        msg = f"Library {library_id!r} rules must be a list of strings"
                        raise TaxonomyError(msg)
                    libraries.append(
                        Library(
                            id=library_id,
                            name=str(raw_library.get("name") or library_id),
                            stack=stack_id,
                            layer=layer,
                            rules=tuple(rules),
                            packages=tuple(str(p) for p in raw_library.get("packages") or []),
                        )
                    )
                    library_ids.append(library_id)
                stacks.append(
                    Stack(
                        id=stack_id,
                        name=str(raw_stack.get("name") or stack_id),
                        layer=layer,
                        libraries=tuple(library_ids),
                    )
                )

        return cls(stacks, libraries)

    def _validate(self) -> None:
        file_names: dict[str, str] = {}
        for stack in self._stacks.values():
            if not ID_PATTERN.match(stack.id):
                msg = f"Malformed stack identifier: {stack.id!r}"
                raise TaxonomyError(msg)
            for library_id in stack.libraries:
                library = self._libraries.get(library_id)
                if library is None or library.stack != stack.id:
                    msg = f"Stack {stack.id!r} lists library {library_id!r} it does not own"
                    raise TaxonomyError(msg)

        for library in self._libraries.values():
            if not ID_PATTERN.match(library.id):
                msg = f"Malformed library identifier: {library.id!r}"
                raise TaxonomyError(msg)
            stack = self._stacks.get(library.stack)
            if stack is None:
                msg = f"Library {library.id!r} references unknown stack {library.stack!r}"
                raise TaxonomyError(msg)
            if stack.layer != library.layer:
                msg = (
                    f"Library {library.id!r} layer {library.layer.value!r} does not match "
                    f"stack {stack.id!r} layer {stack.layer.value!r}"
                )
                raise TaxonomyError(msg)
            if library.id not in stack.libraries:
                msg = f"Library {library.id!r} is not listed by stack {stack.id!r}"
                raise TaxonomyError(msg)
            if not library.rules:
                msg = f"Library {library.id!r} has no rules"
                raise TaxonomyError(msg)

            file_name = library_file_name(library.layer, library.stack, library.id)
            other = file_names.get(file_name)
            if other is not None:
                msg = f"Libraries {other!r} and {library.id!r} share file name {file_name!r}"
                raise TaxonomyError(msg)
            file_names[file_name] = library.id

    def _walk(self) -> Iterable[str]:
        for stack_ids in self._stacks_by_layer.values():
            for stack_id in stack_ids:
                yield from self._stacks[stack_id].libraries

    # ── Lookups ───────────────────────────────────────────────────────

    @property
    def layers(self) -> tuple[Layer, ...]:
        """Layers that declare at least one stack, in fixed layer order."""
        return tuple(self._stacks_by_layer)

    @property
    def library_ids(self) -> tuple[str, ...]:
        """All library identifiers in traversal order."""
        return tuple(self._positions)

    def has_library(self, library_id: str) -> bool:
        return library_id in self._libraries

    def has_stack(self, stack_id: str) -> bool:
        return stack_id in self._stacks

    def library(self, library_id: str) -> Library:
        try:
            return self._libraries[library_id]
        except KeyError:
            raise NotFoundError("library", library_id) from None

    def stack(self, stack_id: str) -> Stack:
        try:
            return self._stacks[stack_id]
        except KeyError:
            raise NotFoundError("stack", stack_id) from None

    def stack_of(self, library_id: str) -> str:
        """Parent stack of a library."""
        return self.library(library_id).stack

    def layer_of(self, stack_id: str) -> Layer:
        """Parent layer of a stack."""
        return self.stack(stack_id).layer

    def locate(self, library_id: str) -> tuple[Layer, str]:
        """Return ``(layer, stack)`` for a library."""
        library = self.library(library_id)
        return library.layer, library.stack

    def stacks_of(self, layer: Layer | str) -> tuple[str, ...]:
        """Ordered stacks declared under *layer*."""
        try:
            key = Layer(layer)
        except ValueError:
            raise NotFoundError("layer", str(layer)) from None
        return self._stacks_by_layer.get(key, ())

    def libraries_of(self, stack_id: str) -> tuple[str, ...]:
        """Ordered libraries declared under *stack_id*."""
        return self.stack(stack_id).libraries

    def sort_libraries(self, library_ids: Iterable[str]) -> list[str]:
        """De-duplicate *library_ids* and order them by taxonomy position."""
        unique = set(library_ids)
        for library_id in unique:
            if library_id not in self._positions:
                raise NotFoundError("library", library_id)
        return sorted(unique, key=self._positions.__getitem__)

    def find_by_package(self, package: str) -> str | None:
        """Return the library whose id or package aliases match *package*."""
        needle = package.strip().lower()
        for library in self._libraries.values():
            if needle == library.id or needle in (p.lower() for p in library.packages):
                return library.id
        return None


def _require_str(raw: Any, key: str, kind: str) -> str:
    if not isinstance(raw, Mapping):
        msg = f"Each {kind} entry must be a mapping"
        raise TaxonomyError(msg)
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        msg = f"Each {kind} needs a string {key!r}"
        raise TaxonomyError(msg)
    return value


def _require_id(raw: Any, kind: str) -> str:
    value = _require_str(raw, "id", kind)
    if not ID_PATTERN.match(value):
        msg = f"Malformed {kind} identifier: {value!r}"
        raise TaxonomyError(msg)
    return value
