"""StateService — URL encoding, decoding, and dirty-state comparison.

Thin ServiceResult adapter over :class:`SelectionStore` and the URL codec
for the CLI, which has no long-lived store between invocations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rulectl.domain.url_state import (
    DEFAULT_PARAM,
    DecodedSelection,
    decode_selection,
    selection_from_url,
)
from rulectl.services.base import BaseService
from rulectl.services.result import ServiceResult
from rulectl.services.store import SelectionStore
from rulectl.services.telemetry import traced

if TYPE_CHECKING:
    from rulectl.domain.taxonomy import Taxonomy


class StateService(BaseService):
    """Share-link and saved-selection operations."""

    def __init__(self, taxonomy: Taxonomy, *, param: str = DEFAULT_PARAM) -> None:
        super().__init__(taxonomy)
        self._param = param

    @traced
    def encode(self, libraries: Sequence[str], *, base_url: str | None = None) -> ServiceResult:
        """Encode *libraries* as a URL parameter (and a full link when *base_url* is set)."""
        op = "encode_state"
        rejected = self._unknown_libraries(op, libraries)
        if rejected is not None:
            return rejected

        store = SelectionStore(self._taxonomy, libraries, param=self._param)
        data: dict[str, Any] = {
            "param": self._param,
            "value": store.to_url_state(),
            "libraries": store.selected_libraries,
        }
        if base_url:
            data["url"] = store.share_url(base_url)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def decode(self, value: str) -> ServiceResult:
        """Decode a parameter value, query string, or full URL.

        Unknown ids are dropped and reported as warnings.
        """
        decoded = self.parse(value)
        store = SelectionStore(self._taxonomy, decoded.libraries, param=self._param)
        return ServiceResult(
            ok=True,
            op="decode_state",
            data={
                "libraries": store.selected_libraries,
                "layers": [layer.value for layer in store.stacks_by_layer],
                "stacks_by_layer": {
                    layer.value: list(stacks) for layer, stacks in store.stacks_by_layer.items()
                },
                "libraries_by_stack": {
                    stack: list(libs) for stack, libs in store.libraries_by_stack.items()
                },
                "ignored": list(decoded.unknown),
            },
            warnings=[f"Ignored unknown library: {token}" for token in decoded.unknown],
        )

    @traced
    def diff(self, original: str, current: str) -> ServiceResult:
        """Compare a saved selection against the current one."""
        baseline = self.parse(original)
        latest = self.parse(current)

        store = SelectionStore(self._taxonomy, param=self._param)
        store.load_original(baseline.libraries)
        store.set_selection(latest.libraries)

        ignored = [*baseline.unknown, *(t for t in latest.unknown if t not in baseline.unknown)]
        return ServiceResult(
            ok=True,
            op="diff_state",
            data={
                "dirty": store.is_dirty(),
                "added": store.added_libraries,
                "removed": store.removed_libraries,
                "original": store.original_libraries,
                "current": store.selected_libraries,
            },
            warnings=[f"Ignored unknown library: {token}" for token in ignored],
        )

    def parse(self, value: str) -> DecodedSelection:
        """Decode *value* whether it is a bare parameter value or carries a query."""
        if "=" in value or "?" in value or "://" in value:
            return selection_from_url(self._taxonomy, value, param=self._param)
        return decode_selection(self._taxonomy, value)
