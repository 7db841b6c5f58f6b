"""
Header resolution.

Maps free-text header cells of an export onto the logical client schema
using tiered exact, prefix and substring matching.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from clientmap.schemas.fields import CLIENT_SCHEMA, FieldSpec
from clientmap.utils.logging import get_logger

log = get_logger(__name__)

# Substring matching ignores synonyms this short or shorter ("Tel", "Lat", ...)
MIN_SUBSTRING_LENGTH = 3


@dataclass(frozen=True)
class ColumnMapping:
    """
    Logical field name to zero-based header index (None when unresolved).

    Built once per ingestion and read-only afterwards.
    """

    indices: Mapping[str, int | None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", MappingProxyType(dict(self.indices)))

    def index_of(self, name: str) -> int | None:
        return self.indices.get(name)

    def cell(self, row: Sequence[str], name: str) -> str:
        """
        Read a field's raw value from a row.

        Returns an empty string for unresolved fields and short rows.
        """
        index = self.indices.get(name)
        if index is None or index >= len(row):
            return ""
        return row[index]

    @property
    def unresolved(self) -> list[str]:
        return [name for name, index in self.indices.items() if index is None]


def _fold(value: str) -> str:
    return value.strip().casefold()


def _exact(cell: str, synonym: str) -> bool:
    return cell == synonym


def _prefix(cell: str, synonym: str) -> bool:
    return cell.startswith(synonym)


def _substring(cell: str, synonym: str) -> bool:
    return len(synonym) > MIN_SUBSTRING_LENGTH and synonym in cell


_TIERS = (("exact", _exact), ("prefix", _prefix), ("substring", _substring))


def match_header(
    header: Sequence[str],
    synonyms: Iterable[str],
) -> tuple[int, str] | None:
    """
    Find the header column for one logical field.

    Tiers are tried in order (exact, prefix, substring). Within a tier the
    leftmost header cell matching any synonym wins.

    Args:
        header: Header cells as observed.
        synonyms: Candidate labels for the field.

    Returns:
        Tuple of (column index, tier name), or None if no tier matches.
    """
    cells = [_fold(cell) for cell in header]
    candidates = [_fold(synonym) for synonym in synonyms]

    for tier, matches in _TIERS:
        for index, cell in enumerate(cells):
            if any(matches(cell, candidate) for candidate in candidates):
                return index, tier
    return None


def resolve_columns(
    header: Sequence[str],
    schema: Sequence[FieldSpec] = CLIENT_SCHEMA,
) -> ColumnMapping:
    """
    Resolve every logical field of the schema against a header row.

    Args:
        header: Header cells as observed.
        schema: Logical field table (defaults to CLIENT_SCHEMA).

    Returns:
        Immutable column mapping.
    """
    indices: dict[str, int | None] = {}
    tiers: dict[str, str] = {}

    for spec in schema:
        match = match_header(header, spec.synonyms)
        if match is None:
            indices[spec.name] = None
            continue
        indices[spec.name], tiers[spec.name] = match

    mapping = ColumnMapping(indices)
    log.debug("Resolved columns", tiers=tiers, unresolved=mapping.unresolved)
    if mapping.unresolved:
        log.info("Unresolved columns", unresolved=mapping.unresolved)
    return mapping
