"""
Record ingestion layer.

All parsed rows become typed records through this module so that
coercion and the coordinate gate are applied consistently.
"""

from clientmap.ingestion.builder import (
    DEFAULT_LOGO_OVERRIDES,
    RecordBuilder,
    ingest_text,
)

__all__ = ["DEFAULT_LOGO_OVERRIDES", "RecordBuilder", "ingest_text"]
