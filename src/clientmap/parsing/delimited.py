"""
Tolerant delimited-text parser.

Spreadsheet exports arrive with either comma or semicolon separators and
with or without quoting. This parser never rejects input: malformed quoting
yields odd field boundaries, not exceptions.
"""

import re
from dataclasses import dataclass, field

from clientmap.utils.logging import get_logger

log = get_logger(__name__)

COMMA = ","
SEMICOLON = ";"
QUOTE = '"'

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class RawTable:
    """
    Parsed rows of a delimited export.

    Attributes:
        rows: All non-blank rows in input order; the first one is the header.
        delimiter: Field delimiter detected from the header line.
    """

    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    delimiter: str = COMMA

    @property
    def header(self) -> tuple[str, ...]:
        """Header row, empty for an empty table."""
        return self.rows[0] if self.rows else ()

    @property
    def data_rows(self) -> tuple[tuple[str, ...], ...]:
        """Rows after the header. May be shorter than the header."""
        return self.rows[1:]

    @property
    def is_empty(self) -> bool:
        return not self.rows


def detect_delimiter(header_line: str) -> str:
    """
    Choose the field delimiter from the header line alone.

    Semicolon wins only if it is strictly more frequent than comma.
    """
    if header_line.count(SEMICOLON) > header_line.count(COMMA):
        return SEMICOLON
    return COMMA


def _unquote(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):
        value = value[1:-1]
    return value.replace(QUOTE * 2, QUOTE).strip()


def split_fields(line: str, delimiter: str) -> list[str]:
    """
    Split one physical line into fields.

    A delimiter preceded by an odd number of quotes on the line sits inside
    a quoted field and is kept as text. Escaped quotes (``""``) toggle twice
    and therefore never change the quoting state.

    Args:
        line: A single line without its line terminator.
        delimiter: Field delimiter.

    Returns:
        Unquoted, trimmed field values.
    """
    fields: list[str] = []
    start = 0
    in_quotes = False

    for pos, char in enumerate(line):
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(line[start:pos])
            start = pos + 1
    fields.append(line[start:])

    return [_unquote(value) for value in fields]


def parse_delimited(text: str) -> RawTable:
    """
    Parse raw export text into a RawTable.

    Lines are split on ``\\n`` or ``\\r\\n`` and blank lines are dropped. The
    delimiter detected on the header line applies to every row.

    Args:
        text: Raw payload.

    Returns:
        Parsed table, empty if the input holds no non-blank line.
    """
    text = text.removeprefix("\ufeff")
    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]

    if not lines:
        log.debug("Empty payload, nothing to parse")
        return RawTable()

    delimiter = detect_delimiter(lines[0])
    rows = tuple(tuple(split_fields(line, delimiter)) for line in lines)

    log.debug(
        "Parsed delimited text",
        delimiter=delimiter,
        columns=len(rows[0]),
        data_rows=len(rows) - 1,
    )
    return RawTable(rows=rows, delimiter=delimiter)
