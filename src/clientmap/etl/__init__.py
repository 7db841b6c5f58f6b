"""
Ingestion pipeline for the client export.

Orchestrates retrieval, parsing, record building and the offline snapshot.
"""

from clientmap.etl.export import division_summary, records_to_frame, write_records
from clientmap.etl.pipeline import (
    IngestionPipeline,
    IngestionResult,
    IngestionStatus,
    StrategyAttempt,
    run_ingestion,
)

__all__ = [
    "IngestionPipeline",
    "IngestionResult",
    "IngestionStatus",
    "StrategyAttempt",
    "division_summary",
    "records_to_frame",
    "run_ingestion",
    "write_records",
]
