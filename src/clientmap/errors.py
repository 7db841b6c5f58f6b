"""
Error taxonomy for the ingestion pipeline.

Per-row and per-strategy problems are absorbed where they happen. Only the
pipeline-level outcomes below reach callers, attached to an
``IngestionResult`` rather than raised through it.
"""


class IngestionError(Exception):
    """Base class for ingestion failures."""

    #: Whether the user can reasonably try again without reconfiguring.
    retryable: bool = True


class ConfigurationMissingError(IngestionError):
    """No source document reference was configured."""

    retryable = False


class RetrievalFailedError(IngestionError):
    """A single retrieval strategy failed its transport or plausibility check."""

    def __init__(self, strategy: str, reason: str) -> None:
        super().__init__(f"{strategy}: {reason}")
        self.strategy = strategy
        self.reason = reason


class EmptySchemaMatchError(IngestionError):
    """A payload was retrieved but no row passed the coordinate gate."""


class CacheUnavailableError(IngestionError):
    """Live retrieval failed and no snapshot has ever been stored."""


class CacheCorruptError(IngestionError):
    """A snapshot exists but could not be deserialized."""
