"""URL-safe encoding of a library selection.

The selection travels as one query parameter (``libraries`` by default)
whose value is a comma-separated list of library identifiers in taxonomy
order. Decoding never fails on stale identifiers: unknown ids are dropped
and reported separately so links survive taxonomy changes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

if TYPE_CHECKING:
    from rulectl.domain.taxonomy import Taxonomy

DEFAULT_PARAM = "libraries"
SEPARATOR = ","


@dataclass(frozen=True)
class DecodedSelection:
    """Known library ids in taxonomy order plus any dropped tokens."""

    libraries: tuple[str, ...] = ()
    unknown: tuple[str, ...] = field(default_factory=tuple)


def encode_selection(taxonomy: Taxonomy, library_ids: Iterable[str]) -> str:
    """Encode a selection as a percent-encoded parameter value.

    The value is canonical: the same set always encodes to the same string.
    """
    ordered = taxonomy.sort_libraries(library_ids)
    return quote(SEPARATOR.join(ordered), safe=SEPARATOR)


def decode_selection(taxonomy: Taxonomy, value: str | None) -> DecodedSelection:
    """Decode a parameter value produced by :func:`encode_selection`."""
    if not value:
        return DecodedSelection()

    known: set[str] = set()
    unknown: list[str] = []
    for token in unquote(value).split(SEPARATOR):
        token = token.strip()
        if not token:
            continue
        if taxonomy.has_library(token):
            known.add(token)
        elif token not in unknown:
            unknown.append(token)

    return DecodedSelection(
        libraries=tuple(taxonomy.sort_libraries(known)),
        unknown=tuple(unknown),
    )


def selection_to_query(
    taxonomy: Taxonomy,
    library_ids: Iterable[str],
    *,
    param: str = DEFAULT_PARAM,
) -> str:
    """Render ``param=value`` for a selection (empty string when nothing is selected)."""
    value = encode_selection(taxonomy, library_ids)
    if not value:
        return ""
    return urlencode({param: unquote(value)}, safe=SEPARATOR)


def selection_from_url(
    taxonomy: Taxonomy,
    url: str,
    *,
    param: str = DEFAULT_PARAM,
) -> DecodedSelection:
    """Decode a selection from a full URL or a bare query string.

    Repeated parameters are merged.
    """
    query = urlsplit(url).query if "?" in url or "://" in url else url.lstrip("?")
    values = parse_qs(query, keep_blank_values=False).get(param, [])
    return decode_selection(taxonomy, SEPARATOR.join(values))


def build_share_url(
    taxonomy: Taxonomy,
    library_ids: Iterable[str],
    *,
    base_url: str,
    param: str = DEFAULT_PARAM,
) -> str:
    """Append the encoded selection to *base_url*."""
    query = selection_to_query(taxonomy, library_ids, param=param)
    if not query:
        return base_url
    joiner = "&" if "?" in base_url else "?"
    return f"{base_url}{joiner}{query}"
