"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
A config file is optional: everything has a default except the source
reference, which may also come from the CLIENTMAP_SOURCE variable.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from clientmap.config.settings import (
    AppConfig,
    BrandingConfig,
    FetchConfig,
    LoggingConfig,
    SnapshotConfig,
    SourceConfig,
)

SOURCE_ENV_VAR = "CLIENTMAP_SOURCE"


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping at the top level"
        raise ValueError(msg)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path | None = None,
    base_path: Path | None = None,
) -> AppConfig:
    """
    Load application configuration from YAML file(s).

    Recognised sections: source, fetch, snapshot, branding, logging. The
    source reference can be given as ``source: <ref>`` or
    ``source: {reference: <ref>}``; the CLIENTMAP_SOURCE environment
    variable fills it in when the files leave it out.

    Args:
        config_path: Path to the main configuration file. None loads defaults.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated AppConfig instance.
    """
    base_data: dict[str, Any] = {}
    if base_path is not None:
        base_data = load_yaml(base_path)
    elif config_path is not None:
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base != config_path:
            base_data = load_yaml(potential_base)

    main_data = load_yaml(config_path) if config_path is not None else {}
    merged = _deep_merge(base_data, main_data)

    source_data = merged.get("source") or {}
    if isinstance(source_data, str):
        source_data = {"reference": source_data}
    reference = source_data.get("reference") or os.environ.get(SOURCE_ENV_VAR)
    source = SourceConfig(reference=reference)

    fetch_data = merged.get("fetch") or {}
    fetch = FetchConfig(**fetch_data)

    snapshot_data = dict(merged.get("snapshot") or {})
    if "directory" in snapshot_data:
        snapshot_data["directory"] = Path(snapshot_data["directory"])
    snapshot = SnapshotConfig(**snapshot_data)

    branding_data = merged.get("branding") or {}
    branding = BrandingConfig(**branding_data)

    logging_data = merged.get("logging") or {}
    logging_config = LoggingConfig(**logging_data)

    return AppConfig(
        source=source,
        fetch=fetch,
        snapshot=snapshot,
        branding=branding,
        logging=logging_config,
    )
