"""Configuration module."""

from subwatch.config.loader import find_config_path, load_config
from subwatch.config.models import (
    BridgeConfig,
    ConfigError,
    DesktopConfig,
    LoggingConfig,
    SourceConfig,
    SubwatchConfig,
    WatchConfig,
)
from subwatch.config.paths import (
    get_config_path,
    get_database_path,
    get_subwatch_home,
    get_system_timezone,
    get_tracker_dir,
)

__all__ = [
    "BridgeConfig",
    "ConfigError",
    "DesktopConfig",
    "LoggingConfig",
    "SourceConfig",
    "SubwatchConfig",
    "WatchConfig",
    "find_config_path",
    "get_config_path",
    "get_database_path",
    "get_subwatch_home",
    "get_system_timezone",
    "get_tracker_dir",
    "load_config",
]
