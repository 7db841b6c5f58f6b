"""
Configuration management with typed Pydantic models.

Provides the source reference, retrieval, snapshot and branding settings
with environment-aware configuration loading.
"""

from clientmap.config.loader import SOURCE_ENV_VAR, load_config
from clientmap.config.settings import (
    AppConfig,
    BrandingConfig,
    FetchConfig,
    LoggingConfig,
    SnapshotConfig,
    SourceConfig,
)

__all__ = [
    "SOURCE_ENV_VAR",
    "AppConfig",
    "BrandingConfig",
    "FetchConfig",
    "LoggingConfig",
    "SnapshotConfig",
    "SourceConfig",
    "load_config",
]
