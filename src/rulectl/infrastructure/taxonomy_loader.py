"""Load the taxonomy catalog from YAML (packaged default or user file)."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from rulectl.domain.taxonomy import Taxonomy, TaxonomyError

logger = logging.getLogger(__name__)

BUILTIN_TAXONOMY = "data/taxonomy.yaml"


def parse_taxonomy(text: str, *, source: str = "<string>") -> Taxonomy:
    """Parse and validate a taxonomy YAML document.

    Raises :class:`TaxonomyError` for malformed YAML or inconsistent structure.
    """
    try:
        data = YAML(typ="safe").load(text)
    except YAMLError as exc:
        msg = f"Invalid YAML in {source}: {exc}"
        raise TaxonomyError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Taxonomy document {source} must be a mapping"
        raise TaxonomyError(msg)
    taxonomy = Taxonomy.from_mapping(data)
    logger.debug(
        "Loaded taxonomy from %s (%d libraries)", source, len(taxonomy.library_ids)
    )
    return taxonomy


def load_taxonomy_file(path: Path) -> Taxonomy:
    """Load a user-supplied taxonomy file."""
    return parse_taxonomy(path.read_text(encoding="utf-8"), source=str(path))


@lru_cache(maxsize=1)
def load_builtin_taxonomy() -> Taxonomy:
    """Load the packaged catalog once per process."""
    text = resources.files("rulectl").joinpath(BUILTIN_TAXONOMY).read_text(encoding="utf-8")
    return parse_taxonomy(text, source=BUILTIN_TAXONOMY)


def load_taxonomy(path: Path | None = None) -> Taxonomy:
    """Load *path* when given, otherwise the built-in catalog."""
    if path is None:
        return load_builtin_taxonomy()
    return load_taxonomy_file(path)
