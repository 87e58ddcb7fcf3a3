"""Runtime configuration model for fedstore.

This module owns all environment variable and config file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.constants import (
    DEFAULT_HIDDEN_COLLECTIONS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RANDOM_SEED,
    DEFAULT_SHARD_COUNT,
    SUPPORTED_AUXILIARY_STORES,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import FedConfigError


@dataclass(frozen=True)
class FedStoreConfig:
    """Validated runtime configuration.

    Attributes:
        shard_count: Number of lock shards in the concurrent map.
        hidden_collections: Path suffixes of hidden per-actor collections.
        enabled_stores: Auxiliary stores exposed next to the object store.
        random_seed: Seed used by the fixture generator.
        log_level: Minimum structured log level.
    """

    shard_count: int = DEFAULT_SHARD_COUNT
    hidden_collections: tuple[str, ...] = DEFAULT_HIDDEN_COLLECTIONS
    enabled_stores: tuple[str, ...] = SUPPORTED_AUXILIARY_STORES
    random_seed: int = DEFAULT_RANDOM_SEED
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "FedStoreConfig":
        """Build config from an optional YAML file and environment variables.

        Environment variables take precedence over file values.

        Returns:
            A validated config object.

        Raises:
            FedConfigError: If file or environment values are invalid.
        """
        file_values = _load_config_file(os.getenv("FEDSTORE_CONFIG_FILE"))
        shard_count = _parse_int(
            "FEDSTORE_SHARD_COUNT",
            os.getenv("FEDSTORE_SHARD_COUNT", str(file_values.get("shard_count", DEFAULT_SHARD_COUNT))),
        )
        if shard_count < 1:
            raise FedConfigError(
                f"Invalid FEDSTORE_SHARD_COUNT value: expected a positive integer, got {shard_count}."
            )
        random_seed = _parse_int(
            "FEDSTORE_RANDOM_SEED",
            os.getenv("FEDSTORE_RANDOM_SEED", str(file_values.get("random_seed", DEFAULT_RANDOM_SEED))),
        )
        hidden_collections = _parse_names(
            os.getenv("FEDSTORE_HIDDEN_COLLECTIONS"),
            file_values.get("hidden_collections", DEFAULT_HIDDEN_COLLECTIONS),
        )
        enabled_stores = _parse_names(
            os.getenv("FEDSTORE_ENABLED_STORES"),
            file_values.get("enabled_stores", SUPPORTED_AUXILIARY_STORES),
        )
        _validate_enabled_stores(enabled_stores)
        log_level = str(
            os.getenv("FEDSTORE_LOG_LEVEL", file_values.get("log_level", DEFAULT_LOG_LEVEL))
        ).upper()
        if log_level not in SUPPORTED_LOG_LEVELS:
            raise FedConfigError(
                f"Invalid FEDSTORE_LOG_LEVEL value '{log_level}'. "
                f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
            )
        return cls(
            shard_count=shard_count,
            hidden_collections=hidden_collections,
            enabled_stores=enabled_stores,
            random_seed=random_seed,
            log_level=log_level,
        )


def _load_config_file(config_path: str | None) -> Mapping[str, Any]:
    """Read YAML config values when a config file is configured.

    Args:
        config_path: Optional path from FEDSTORE_CONFIG_FILE.

    Returns:
        Mapping of config keys, empty when no file is configured.

    Raises:
        FedConfigError: If the file is missing or not a YAML mapping.
    """
    if not config_path:
        return {}
    path = Path(config_path).expanduser()
    if not path.exists():
        raise FedConfigError(
            f"Config file not found at {path}. "
            "Fix FEDSTORE_CONFIG_FILE or unset it to use defaults."
        )
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as error:
        raise FedConfigError(f"Failed to parse config file {path}: {error}") from error
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise FedConfigError(
            f"Config file {path} must contain a YAML mapping at the top level."
        )
    return payload


def _parse_int(variable: str, raw_value: str) -> int:
    """Parse an integer config value.

    Args:
        variable: Environment variable name used in error messages.
        raw_value: Raw string value.

    Returns:
        Parsed integer.

    Raises:
        FedConfigError: If value cannot be parsed into int.
    """
    try:
        return int(raw_value)
    except ValueError as error:
        raise FedConfigError(
            f"Invalid {variable} value: expected integer, got '{raw_value}'. "
            f"Set {variable} to a numeric value."
        ) from error


def _parse_names(raw_value: str | None, fallback: object) -> tuple[str, ...]:
    """Parse a comma separated env value, or a YAML list fallback."""
    if raw_value is not None:
        return tuple(name.strip() for name in raw_value.split(",") if name.strip())
    if isinstance(fallback, str):
        return tuple(name.strip() for name in fallback.split(",") if name.strip())
    if isinstance(fallback, (list, tuple)):
        return tuple(str(name).strip() for name in fallback if str(name).strip())
    raise FedConfigError(
        f"Invalid list value {fallback!r}: expected a list or comma separated string."
    )


def _validate_enabled_stores(enabled_stores: tuple[str, ...]) -> None:
    unknown = sorted(set(enabled_stores) - set(SUPPORTED_AUXILIARY_STORES))
    if unknown:
        raise FedConfigError(
            f"Unknown store names in FEDSTORE_ENABLED_STORES: {', '.join(unknown)}. "
            f"Supported: {', '.join(SUPPORTED_AUXILIARY_STORES)}."
        )
