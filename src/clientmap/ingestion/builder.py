"""
Record construction from parsed rows.

The builder is stateless apart from its schema and logo override table.
A bad cell degrades to a default; a row without finite coordinates is
dropped. Nothing here raises for a single row.
"""

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from clientmap.normalization.columns import ColumnMapping, resolve_columns
from clientmap.normalization.values import (
    normalize_logo_url,
    parse_int_or_zero,
    parse_locale_float,
)
from clientmap.parsing.delimited import RawTable, parse_delimited
from clientmap.records import ClientRecord
from clientmap.schemas.fields import CLIENT_SCHEMA, COORDINATE_FIELDS, Coercion, FieldSpec
from clientmap.utils.logging import get_logger

log = get_logger(__name__)

# Brand logos forced by division code, regardless of the exported logo cell
DEFAULT_LOGO_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        # Ben Yedder
        "O152": "https://drive.google.com/thumbnail?id=1WLnyAQ0Y2Hv88COFP_0nOpnPnj5s0TfY&sz=w500",
        # Bondin
        "Y150": "https://drive.google.com/thumbnail?id=1vXFeon3UtAJgky8hX7Z9gRGKIBbngxnR&sz=w500",
    }
)


def _coerce(raw: str, coercion: Coercion) -> str | int | float | None:
    if coercion is Coercion.INTEGER:
        return parse_int_or_zero(raw)
    if coercion is Coercion.LOCALE_FLOAT:
        return parse_locale_float(raw)
    if coercion is Coercion.URL:
        return normalize_logo_url(raw)
    return raw


class RecordBuilder:
    """
    Builds typed client records from a RawTable.

    Args:
        schema: Logical field table used for header resolution.
        logo_overrides: Division code to logo URL. Replaces the exported
            logo for matching divisions.
    """

    def __init__(
        self,
        schema: Sequence[FieldSpec] = CLIENT_SCHEMA,
        logo_overrides: Mapping[str, str] | None = None,
    ) -> None:
        self.schema = tuple(schema)
        self.logo_overrides = MappingProxyType(
            dict(DEFAULT_LOGO_OVERRIDES if logo_overrides is None else logo_overrides)
        )

    def build(self, table: RawTable) -> list[ClientRecord]:
        """
        Build records for every usable data row, in input order.

        Args:
            table: Parsed export.

        Returns:
            Records whose coordinates are finite. Other rows are absent.
        """
        if table.is_empty:
            return []

        mapping = resolve_columns(table.header, self.schema)
        records: list[ClientRecord] = []
        dropped = 0

        for position, row in enumerate(table.data_rows, start=1):
            record = self.build_row(row, mapping, position)
            if record is None:
                dropped += 1
                continue
            records.append(record)

        log.info("Built records", records=len(records), dropped=dropped)
        return records

    def build_row(
        self,
        row: Sequence[str],
        mapping: ColumnMapping,
        position: int,
    ) -> ClientRecord | None:
        """
        Build one record, or None if its coordinates are unusable.

        Args:
            row: Field values of one data row.
            mapping: Resolved column mapping.
            position: 1-based position among data rows, used as fallback id.
        """
        values = {
            spec.name: _coerce(mapping.cell(row, spec.name), spec.coercion)
            for spec in self.schema
        }

        if any(values.get(name) is None for name in COORDINATE_FIELDS):
            log.debug("Dropping row without finite coordinates", position=position)
            return None

        division = values.get("division") or ""
        if division in self.logo_overrides:
            values["logo_url"] = self.logo_overrides[division]

        values["id"] = values.get("code") or f"row-{position}"
        return ClientRecord(**values)


def ingest_text(
    text: str,
    *,
    builder: RecordBuilder | None = None,
) -> list[ClientRecord]:
    """
    Parse raw export text and build client records.

    Args:
        text: Raw payload.
        builder: Record builder (defaults to the standard client schema).

    Returns:
        Records in input row order.
    """
    builder = builder or RecordBuilder()
    return builder.build(parse_delimited(text))
