"""
Normalization layer for loosely formatted exports.

Handles header resolution and locale-tolerant value coercion so that
records have a consistent representation regardless of the export's
column order or number format.
"""

from clientmap.normalization.columns import ColumnMapping, match_header, resolve_columns
from clientmap.normalization.values import (
    extract_drive_file_id,
    extract_sheet_id,
    normalize_logo_url,
    parse_int_or_zero,
    parse_locale_float,
)

__all__ = [
    "ColumnMapping",
    "extract_drive_file_id",
    "extract_sheet_id",
    "match_header",
    "normalize_logo_url",
    "parse_int_or_zero",
    "parse_locale_float",
    "resolve_columns",
]
