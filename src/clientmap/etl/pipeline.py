"""
Fetch-and-cache ingestion pipeline.

Tries each retrieval strategy in order, builds records from the first
plausible payload, and persists them as the offline snapshot. When no
strategy yields records, the last snapshot is served instead.
"""

import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

import requests

from clientmap.config.settings import AppConfig
from clientmap.errors import (
    CacheCorruptError,
    CacheUnavailableError,
    ConfigurationMissingError,
    EmptySchemaMatchError,
    IngestionError,
    RetrievalFailedError,
)
from clientmap.ingestion.builder import RecordBuilder
from clientmap.parsing.delimited import parse_delimited
from clientmap.records import ClientRecord, format_as_of
from clientmap.retrieval.base import RetrievalStrategy
from clientmap.retrieval.strategies import build_strategies, resolve_source_url
from clientmap.storage.snapshot import SnapshotStore
from clientmap.utils.logging import get_logger, log_context

log = get_logger(__name__)


class IngestionStatus(str, Enum):
    """Pipeline-level outcome."""

    FRESH = "fresh"  # Live retrieval succeeded
    OFFLINE = "offline"  # Served from snapshot
    FAILED = "failed"  # No records available


@dataclass(frozen=True)
class StrategyAttempt:
    """Diagnostics for one retrieval attempt."""

    strategy: str
    succeeded: bool
    error: str | None = None


@dataclass(frozen=True)
class IngestionResult:
    """
    Result of one pipeline invocation.

    Attributes:
        status: Fresh, offline (degraded) or failed.
        records: Records in source row order; empty on failure.
        as_of: Ingestion time of the records (snapshot time when offline).
        strategy: Name of the strategy that produced a fresh payload.
        failure: Why no records could be served (failed status only).
        cause: Why live ingestion did not succeed (offline or failed).
        attempts: Per-strategy diagnostics in the order they ran.
    """

    status: IngestionStatus
    records: tuple[ClientRecord, ...] = ()
    as_of: datetime | None = None
    strategy: str | None = None
    failure: IngestionError | None = None
    cause: IngestionError | None = None
    attempts: tuple[StrategyAttempt, ...] = field(default_factory=tuple)

    @property
    def offline(self) -> bool:
        return self.status is IngestionStatus.OFFLINE

    @property
    def ok(self) -> bool:
        return self.status is not IngestionStatus.FAILED

    @property
    def retryable(self) -> bool:
        """Whether offering a retry makes sense for this outcome."""
        if self.status is IngestionStatus.FRESH:
            return False
        return self.failure is None or self.failure.retryable

    @property
    def as_of_label(self) -> str | None:
        return format_as_of(self.as_of) if self.as_of else None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestionPipeline:
    """
    Ingestion pipeline for the client export.

    Each call to run() is independent: strategies are always tried from the
    first one, and nothing about a previous run is remembered other than the
    snapshot on disk.

    Args:
        config: Application configuration.
        session: HTTP session. A new one is created per run if omitted.
        strategies: Ordered retrieval strategies (defaults from config).
        store: Snapshot store (defaults from config).
        builder: Record builder (defaults from config).
        clock: Returns the current timezone-aware time.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        session: requests.Session | None = None,
        strategies: Sequence[RetrievalStrategy] | None = None,
        store: SnapshotStore | None = None,
        builder: RecordBuilder | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.config = config
        self.session = session
        self.strategies = list(
            strategies if strategies is not None else build_strategies(config.fetch.proxies)
        )
        self.store = store or SnapshotStore(config.snapshot.directory, config.snapshot.key)
        self.builder = builder or RecordBuilder(
            logo_overrides=config.branding.logo_overrides
        )
        self.clock = clock

    def run(self) -> IngestionResult:
        """
        Run the full pipeline once.

        Returns:
            Pipeline outcome. Never raises for retrieval, parsing or
            snapshot problems; those are reported on the result.
        """
        with log_context(run_id=uuid.uuid4().hex[:8]):
            if not self.config.source.is_configured:
                error = ConfigurationMissingError(
                    "No source reference configured (set source.reference or CLIENTMAP_SOURCE)"
                )
                log.error("Source not configured")
                return IngestionResult(status=IngestionStatus.FAILED, failure=error)

            source_url = resolve_source_url(self.config.source.reference)
            log.info("Starting ingestion", strategies=[s.name for s in self.strategies])

            payload, strategy, attempts, cause = self._retrieve(source_url)

            if payload is not None:
                records = self.builder.build(parse_delimited(payload))
                if records:
                    return self._fresh(records, strategy, attempts)
                cause = EmptySchemaMatchError(
                    f"Payload from '{strategy}' produced no record with valid coordinates"
                )
                log.warning("No usable records in payload", strategy=strategy)

            return self._recover(cause, attempts)

    def _retrieve(
        self, source_url: str
    ) -> tuple[str | None, str | None, tuple[StrategyAttempt, ...], IngestionError | None]:
        """Try strategies in order until one returns a plausible payload."""
        attempts: list[StrategyAttempt] = []
        last_error: IngestionError | None = None
        session = self.session or self._new_session()

        try:
            for strategy in self.strategies:
                try:
                    payload = strategy.fetch(
                        source_url,
                        session,
                        timeout=self.config.fetch.timeout_seconds,
                        min_length=self.config.fetch.min_payload_length,
                    )
                except RetrievalFailedError as e:
                    log.warning("Retrieval failed", strategy=strategy.name, reason=e.reason)
                    attempts.append(StrategyAttempt(strategy.name, False, e.reason))
                    last_error = e
                    continue

                log.info("Retrieved payload", strategy=strategy.name, chars=len(payload))
                attempts.append(StrategyAttempt(strategy.name, True))
                return payload, strategy.name, tuple(attempts), None
        finally:
            if self.session is None:
                session.close()

        log.warning("All retrieval strategies failed", attempts=len(attempts))
        return None, None, tuple(attempts), last_error

    def _fresh(
        self,
        records: list[ClientRecord],
        strategy: str | None,
        attempts: tuple[StrategyAttempt, ...],
    ) -> IngestionResult:
        now = self.clock()
        try:
            self.store.save(records, now)
        except OSError as e:
            # Fresh data is still served; only offline recovery is affected
            log.error("Snapshot write failed", path=str(self.store.path), error=str(e))

        log.info("Ingestion succeeded", records=len(records), strategy=strategy)
        return IngestionResult(
            status=IngestionStatus.FRESH,
            records=tuple(records),
            as_of=now,
            strategy=strategy,
            attempts=attempts,
        )

    def _recover(
        self,
        cause: IngestionError | None,
        attempts: tuple[StrategyAttempt, ...],
    ) -> IngestionResult:
        try:
            snapshot = self.store.load()
        except CacheCorruptError as e:
            log.error("Snapshot corrupt, no data available", error=str(e))
            return IngestionResult(
                status=IngestionStatus.FAILED, failure=e, cause=cause, attempts=attempts
            )

        if snapshot is None:
            log.error("No snapshot available, no data available")
            return IngestionResult(
                status=IngestionStatus.FAILED,
                failure=CacheUnavailableError("No data could be retrieved and no snapshot exists"),
                cause=cause,
                attempts=attempts,
            )

        log.warning(
            "Serving snapshot",
            records=len(snapshot.records),
            taken_at=snapshot.taken_at.isoformat(),
        )
        return IngestionResult(
            status=IngestionStatus.OFFLINE,
            records=snapshot.records,
            as_of=snapshot.taken_at,
            cause=cause,
            attempts=attempts,
        )

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": self.config.fetch.user_agent})
        return session


def run_ingestion(config: AppConfig, **kwargs) -> IngestionResult:
    """
    Convenience function to run the ingestion pipeline.

    Args:
        config: Application configuration.
        **kwargs: Passed to IngestionPipeline.

    Returns:
        Pipeline outcome.
    """
    return IngestionPipeline(config, **kwargs).run()
