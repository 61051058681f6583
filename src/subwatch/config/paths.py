"""Centralized path management for subwatch.

Own state (config, logs) lives under a single base directory which can be
overridden with the SUBWATCH_HOME environment variable. Submarine data is
read from the SubmarineTracker plugin's configuration folder.

Default locations:
- Linux/macOS: ~/.subwatch
- Windows: %USERPROFILE%\\.subwatch
"""

import os
import sys
from functools import lru_cache
from pathlib import Path

ENV_VAR = "SUBWATCH_HOME"

DATABASE_FILENAME = "submarine-sqlite.db"


def get_system_timezone() -> str:
    """Detect system timezone, falling back to UTC.

    Resolution order:
    1. TZ environment variable (if set)
    2. /etc/timezone file (Debian/Ubuntu)
    3. /etc/localtime symlink target (most Linux distros)
    4. Fallback to UTC

    Returns:
        IANA timezone name (e.g., "America/Los_Angeles", "Europe/London", "UTC").
    """
    if tz := os.environ.get("TZ"):
        return tz

    try:
        tz = Path("/etc/timezone").read_text().strip()
        if tz:
            return tz
    except (FileNotFoundError, PermissionError):
        pass

    try:
        link = Path("/etc/localtime").resolve()
        parts = str(link).split("zoneinfo/")
        if len(parts) > 1:
            return parts[1]
    except (FileNotFoundError, PermissionError):
        pass

    return "UTC"


@lru_cache(maxsize=1)
def get_subwatch_home() -> Path:
    """Get the base directory for subwatch's own files."""
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".subwatch"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_subwatch_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_subwatch_home() / "logs"


def get_tracker_dir() -> Path:
    """Get the SubmarineTracker plugin configuration folder."""
    if sys.platform == "win32":
        relative = Path("AppData/Roaming/XIVLauncher/pluginConfigs/SubmarineTracker")
    else:
        relative = Path(".xlcore/pluginConfigs/SubmarineTracker")
    return Path.home() / relative


def get_database_path() -> Path:
    """Get the SubmarineTracker SQLite database path."""
    return get_tracker_dir() / DATABASE_FILENAME
