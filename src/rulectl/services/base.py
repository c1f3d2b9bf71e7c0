"""BaseService — foundation for taxonomy-backed services.

Every service receives the :class:`Taxonomy` at construction time.
The taxonomy is an injected, read-only dependency; services never load
it themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rulectl.services.result import ServiceResult, failure

if TYPE_CHECKING:
    from rulectl.domain.taxonomy import Taxonomy

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class RulesService(BaseService):
            def generate(self, ...) -> ServiceResult:
                groups = group_selection(self._taxonomy, libraries)
                ...
    """

    def __init__(self, taxonomy: Taxonomy) -> None:
        self._taxonomy = taxonomy

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def _unknown_libraries(self, op: str, library_ids: Iterable[str]) -> ServiceResult | None:
        """Return an ``UNKNOWN_LIBRARY`` failure if any id is outside the taxonomy."""
        unknown = sorted({i for i in library_ids if not self._taxonomy.has_library(i)})
        if not unknown:
            return None
        logger.debug("Rejected unknown libraries for %s: %s", op, unknown)
        return failure(
            op,
            "UNKNOWN_LIBRARY",
            f"Unknown library: {', '.join(unknown)}",
            libraries=unknown,
        )
