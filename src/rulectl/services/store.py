"""SelectionStore — the mutable selection state behind the UI and URL.

State is the raw set of selected library ids plus the baseline captured by
:meth:`SelectionStore.load_original`. Layers, stacks, and the
``stacks_by_layer`` / ``libraries_by_stack`` groupings are recomputed from
scratch after every mutation and never patched incrementally.

INVARIANT: ``is_dirty()`` is a pure set comparison against the baseline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rulectl.domain.selection import SelectionGroups, group_selection
from rulectl.domain.url_state import (
    DEFAULT_PARAM,
    build_share_url,
    decode_selection,
    encode_selection,
    selection_from_url,
    selection_to_query,
)

if TYPE_CHECKING:
    from rulectl.domain.taxonomy import Taxonomy
    from rulectl.domain.types import Layer

logger = logging.getLogger(__name__)


class SelectionStore:
    """Current library selection with derived groupings and dirty tracking."""

    def __init__(
        self,
        taxonomy: Taxonomy,
        libraries: Iterable[str] = (),
        *,
        param: str = DEFAULT_PARAM,
    ) -> None:
        self._taxonomy = taxonomy
        self._param = param
        self._libraries: frozenset[str] = frozenset()
        self._original: frozenset[str] = frozenset()
        self._layers: frozenset[Layer] = frozenset()
        self._stacks: frozenset[str] = frozenset()
        self._groups = SelectionGroups()
        self._replace(libraries)

    # ── Read access ───────────────────────────────────────────────────

    @property
    def selected_libraries(self) -> list[str]:
        """Selected library ids in taxonomy order."""
        return self._taxonomy.sort_libraries(self._libraries)

    @property
    def selected_stacks(self) -> frozenset[str]:
        return self._stacks

    @property
    def selected_layers(self) -> frozenset[Layer]:
        return self._layers

    @property
    def original_libraries(self) -> list[str]:
        return self._taxonomy.sort_libraries(self._original)

    @property
    def stacks_by_layer(self) -> dict[Layer, tuple[str, ...]]:
        return dict(self._groups.stacks_by_layer)

    @property
    def libraries_by_stack(self) -> dict[str, tuple[str, ...]]:
        return dict(self._groups.libraries_by_stack)

    @property
    def groups(self) -> SelectionGroups:
        return self._groups

    def is_layer_selected(self, layer: Layer | str) -> bool:
        return layer in self._layers

    def is_stack_selected(self, stack: str) -> bool:
        return stack in self._stacks

    def is_library_selected(self, library: str) -> bool:
        return library in self._libraries

    def is_dirty(self) -> bool:
        return self._libraries != self._original

    @property
    def added_libraries(self) -> list[str]:
        """Selected now but absent from the baseline."""
        return self._taxonomy.sort_libraries(self._libraries - self._original)

    @property
    def removed_libraries(self) -> list[str]:
        """In the baseline but no longer selected."""
        return self._taxonomy.sort_libraries(self._original - self._libraries)

    # ── Mutations ─────────────────────────────────────────────────────

    def toggle_library(self, library: str) -> bool:
        """Flip membership of *library*. Returns the new membership.

        Raises ``NotFoundError`` for identifiers outside the taxonomy.
        """
        self._taxonomy.library(library)
        if library in self._libraries:
            self._replace(self._libraries - {library})
            return False
        self._replace(self._libraries | {library})
        return True

    def select_library(self, library: str) -> None:
        self._taxonomy.library(library)
        self._replace(self._libraries | {library})

    def unselect_library(self, library: str) -> None:
        self._taxonomy.library(library)
        self._replace(self._libraries - {library})

    def clear(self) -> None:
        self._replace(())

    def set_selection(self, libraries: Iterable[str]) -> list[str]:
        """Replace the selection, dropping unknown ids. Returns the dropped ids."""
        known, unknown = self._partition(libraries)
        self._replace(known)
        return unknown

    def load_original(self, libraries: Iterable[str]) -> list[str]:
        """Adopt *libraries* as both the selection and the saved baseline.

        Unknown ids are dropped and returned. Afterwards ``is_dirty()`` is False.
        """
        known, unknown = self._partition(libraries)
        self._original = frozenset(known)
        self._replace(known)
        return unknown

    def reset_to_original(self) -> None:
        """Discard unsaved changes."""
        self._replace(self._original)

    # ── URL state ─────────────────────────────────────────────────────

    def to_url_state(self) -> str:
        """Encoded parameter value for the current selection."""
        return encode_selection(self._taxonomy, self._libraries)

    def from_url_state(self, value: str | None) -> list[str]:
        """Replace the selection from an encoded value. Returns dropped ids."""
        decoded = decode_selection(self._taxonomy, value)
        self._replace(decoded.libraries)
        return list(decoded.unknown)

    def to_url_query(self) -> str:
        """``param=value`` for the current selection, empty when nothing is selected."""
        return selection_to_query(self._taxonomy, self._libraries, param=self._param)

    def share_url(self, base_url: str) -> str:
        return build_share_url(
            self._taxonomy, self._libraries, base_url=base_url, param=self._param
        )

    def from_url(self, url: str) -> list[str]:
        """Replace the selection from a URL or query string. Returns dropped ids."""
        decoded = selection_from_url(self._taxonomy, url, param=self._param)
        self._replace(decoded.libraries)
        return list(decoded.unknown)

    # ── Internals ─────────────────────────────────────────────────────

    def _partition(self, libraries: Iterable[str]) -> tuple[list[str], list[str]]:
        known: list[str] = []
        unknown: list[str] = []
        for library in libraries:
            (known if self._taxonomy.has_library(library) else unknown).append(library)
        if unknown:
            logger.debug("Dropped unknown libraries: %s", unknown)
        return known, unknown

    def _replace(self, libraries: Iterable[str]) -> None:
        """Swap in a new selection and recompute every derived view."""
        libraries = frozenset(libraries)
        groups = group_selection(self._taxonomy, libraries)
        self._libraries = libraries
        self._groups = groups
        self._stacks = frozenset(groups.libraries_by_stack)
        self._layers = frozenset(groups.stacks_by_layer)
