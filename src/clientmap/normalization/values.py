"""
Cell value coercion.

Coercions never raise: a cell that cannot be read degrades to a default
(None for coordinates, 0 for counts, the input itself for URLs).
"""

import math
import re

# Leading numeric prefix, mirroring tolerant spreadsheet number parsing:
# "48.85", "-2.3e1", ".5", "12 km" all yield a value
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"[+-]?\d+")

_DRIVE_FILE_ID = re.compile(r"(?:drive|docs)\.google\.com/.*?(?:id=|d/)([a-zA-Z0-9_-]+)")
_SHEET_ID = re.compile(r"/d/(.*?)(?:/|$)")

DRIVE_THUMBNAIL_URL = "https://drive.google.com/thumbnail?id={file_id}&sz=w1000"


def parse_locale_float(value: str) -> float | None:
    """
    Parse a number that may use a decimal comma.

    Args:
        value: Raw cell text, e.g. "48,85" or "2.35".

    Returns:
        Finite float, or None if the cell holds no usable number.
    """
    match = _FLOAT_PREFIX.match(value.strip().replace(",", ".", 1))
    if match is None:
        return None
    number = float(match.group())
    return number if math.isfinite(number) else None


def parse_int_or_zero(value: str) -> int:
    """Parse the leading integer of a cell ("3 jours" -> 3), 0 on failure."""
    match = _INT_PREFIX.match(value.strip())
    if match is None:
        return 0
    try:
        return int(match.group())
    except ValueError:
        # Digit strings past the interpreter's conversion limit
        return 0


def extract_drive_file_id(url: str) -> str | None:
    """Extract the file identifier from a Google Drive or Docs link."""
    match = _DRIVE_FILE_ID.search(url)
    return match.group(1) if match else None


def normalize_logo_url(value: str) -> str:
    """
    Turn Drive "view" links into direct thumbnail links.

    Stray wrapping quotes are removed. Links without a Drive file id pass
    through unchanged.
    """
    if not value:
        return ""
    url = value.strip('"').strip()
    file_id = extract_drive_file_id(url)
    if file_id:
        return DRIVE_THUMBNAIL_URL.format(file_id=file_id)
    return url


def extract_sheet_id(url: str) -> str | None:
    """Extract the document id from a ``.../d/<id>/...`` spreadsheet URL."""
    match = _SHEET_ID.search(url)
    return match.group(1) if match and match.group(1) else None
