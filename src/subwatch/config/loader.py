"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr, ValidationError

from subwatch.config.models import ConfigError, SubwatchConfig
from subwatch.config.paths import get_config_path

BRIDGE_TOKEN_ENV = "SUBWATCH_BRIDGE_TOKEN"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("subwatch.toml"),  # Current directory
        get_config_path(),  # ~/.subwatch/config.toml (or SUBWATCH_HOME)
        Path("/etc/subwatch/config.toml"),  # System-wide
    ]


def _resolve_env_secrets(config: dict[str, Any]) -> dict[str, Any]:
    """Fill the bridge token from the environment if the file omits it."""
    bridge = config.setdefault("bridge", {})
    if bridge.get("token") is None:
        value = os.environ.get(BRIDGE_TOKEN_ENV)
        if value:
            bridge["token"] = SecretStr(value)
    return config


def find_config_path(path: Path | None = None) -> Path | None:
    """Locate the config file to load.

    Raises:
        FileNotFoundError: If an explicit path was given and does not exist.
    """
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> SubwatchConfig:
    """Load configuration from a TOML file.

    Without an explicit path the default locations are searched and, if none
    exists, the built-in defaults are used.

    Args:
        path: Explicit path to config file.

    Returns:
        Validated SubwatchConfig instance.

    Raises:
        FileNotFoundError: If an explicit config file is missing.
        ConfigError: If the config file is invalid.
    """
    config_path = find_config_path(path)

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _resolve_env_secrets(raw_config)

    try:
        return SubwatchConfig.model_validate(raw_config)
    except ValidationError as e:
        source = config_path or "defaults"
        raise ConfigError(f"Invalid configuration ({source}): {e}") from e
