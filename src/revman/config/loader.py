"""Configuration loader with TOML support and merge capability."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from revman.config.schema import RevmanConfig
from revman.core.errors import ConfigError

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = Path.home() / ".config" / "revman" / "config.toml"
LOCAL_CONFIG_NAME = "revman.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"could not read config file {path}: {exc}") from exc


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    model = os.environ.get("REVMAN_MODEL")
    if model:
        overrides.setdefault("model", {})["name"] = model
    level = os.environ.get("REVMAN_LOG_LEVEL")
    if level:
        overrides.setdefault("logging", {})["level"] = level.strip().upper()
    return overrides


def load_config(
    config_path: Path | None = None,
    merge_user: bool = True,
) -> RevmanConfig:
    """Load configuration with precedence.

    Priority (highest to lowest):
    1. REVMAN_MODEL / REVMAN_LOG_LEVEL environment overrides
    2. Provided config_path (or REVMAN_CONFIG_PATH)
    3. ./revman.toml (project defaults)
    4. ~/.config/revman/config.toml (user defaults)
    5. Built-in defaults (schema)

    Args:
        config_path: Explicit path to config file.
        merge_user: Whether to merge user config from ~/.config/revman/.

    Returns:
        Merged RevmanConfig instance.

    Raises:
        ConfigError: If a config file cannot be read or fails validation.
    """
    env_config = os.environ.get("REVMAN_CONFIG_PATH")
    if config_path is None and env_config:
        config_path = Path(env_config).expanduser()

    config_data: dict[str, Any] = {}

    if merge_user and USER_CONFIG_PATH.exists():
        config_data = _deep_merge(config_data, _read_toml(USER_CONFIG_PATH))

    local_path = Path(LOCAL_CONFIG_NAME)
    if local_path.exists():
        config_data = _deep_merge(config_data, _read_toml(local_path))

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"config file not found: {config_path}")
        config_data = _deep_merge(config_data, _read_toml(config_path))

    config_data = _deep_merge(config_data, _env_overrides())

    try:
        return RevmanConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc
