"""
Delimited-text parsing.

Turns raw spreadsheet exports into rows of string fields.
"""

from clientmap.parsing.delimited import (
    RawTable,
    detect_delimiter,
    parse_delimited,
    split_fields,
)

__all__ = ["RawTable", "detect_delimiter", "parse_delimited", "split_fields"]
