"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
No source URLs, relays or brand logos are hardcoded in processing code.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clientmap.ingestion.builder import DEFAULT_LOGO_OVERRIDES
from clientmap.retrieval.base import MIN_PAYLOAD_LENGTH
from clientmap.retrieval.strategies import DEFAULT_PROXY_TEMPLATES


class SourceConfig(BaseModel):
    """Source document configuration."""

    model_config = ConfigDict(frozen=True)

    reference: str | None = Field(
        default=None,
        description="Published export URL or bare spreadsheet document id",
    )

    @field_validator("reference")
    @classmethod
    def blank_is_missing(cls, v: str | None) -> str | None:
        """Treat an empty or whitespace-only reference as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def is_configured(self) -> bool:
        return self.reference is not None


class FetchConfig(BaseModel):
    """Retrieval strategy configuration."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(
        default=15.0, gt=0, description="Timeout per retrieval attempt"
    )
    min_payload_length: int = Field(
        default=MIN_PAYLOAD_LENGTH,
        ge=1,
        description="Shorter payloads count as failed retrievals",
    )
    proxies: tuple[str, ...] = Field(
        default=DEFAULT_PROXY_TEMPLATES,
        description="Relay URL templates with a {url} placeholder, in fallback order",
    )
    user_agent: str = Field(default="clientmap", description="HTTP User-Agent header")

    @field_validator("proxies")
    @classmethod
    def validate_proxies(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Every relay template needs a {url} placeholder."""
        for template in v:
            if "{url}" not in template:
                msg = f"Proxy template must contain '{{url}}': {template}"
                raise ValueError(msg)
        return v


class SnapshotConfig(BaseModel):
    """Offline snapshot configuration."""

    model_config = ConfigDict(frozen=True)

    directory: Path = Field(
        default=Path("./.clientmap"), description="Directory holding snapshot files"
    )
    key: str = Field(default="clients", min_length=1, description="Snapshot slot name")


class BrandingConfig(BaseModel):
    """Division-specific presentation overrides."""

    model_config = ConfigDict(frozen=True)

    logo_overrides: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_LOGO_OVERRIDES),
        description="Division code to logo URL",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level")
    json_output: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    source: SourceConfig = Field(default_factory=SourceConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    branding: BrandingConfig = Field(default_factory=BrandingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

