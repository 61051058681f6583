"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

from subwatch.config.paths import (
    get_database_path,
    get_system_timezone,
    get_tracker_dir,
)


class SourceConfig(BaseModel):
    """Where submarine return times are read from.

    ``sqlite`` reads the SubmarineTracker database directly; ``snapshots``
    watches a directory of per-character JSON files.
    """

    kind: Literal["sqlite", "snapshots"] = "sqlite"
    database_path: Path = Field(default_factory=get_database_path)
    snapshot_dir: Path = Field(default_factory=get_tracker_dir)
    snapshot_pattern: str = "*.json"

    @field_validator("database_path", "snapshot_dir")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()


class WatchConfig(BaseModel):
    """Daemon polling behaviour."""

    poll_interval: float = Field(default=1.0, gt=0)
    # Only push to the bridge when the set of pending returns changed
    skip_unchanged: bool = True
    # None = use the source's default policy
    arm_policy: Literal["fire_late", "future_only"] | None = None
    max_backoff: float = Field(default=60.0, gt=0)


class DesktopConfig(BaseModel):
    """Desktop notification settings."""

    enabled: bool = True
    icon: str = "dialog-information"
    timeout: float = 5.0


class BridgeConfig(BaseModel):
    """Outbound push bridge settings.

    The bridge is only used when ``url`` is set.
    """

    url: str | None = None
    token: SecretStr | None = None
    timeout: float = Field(default=10.0, gt=0)
    window_seconds: int = Field(default=300, gt=0)

    @property
    def enabled(self) -> bool:
        return bool(self.url)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None
    log_to_file: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


class ConfigError(Exception):
    """Configuration error."""

    pass


class SubwatchConfig(BaseModel):
    """Root configuration model."""

    # Display timezone only; return times are always compared in UTC
    timezone: str = Field(default_factory=get_system_timezone)
    source: SourceConfig = Field(default_factory=SourceConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    desktop: DesktopConfig = Field(default_factory=DesktopConfig)
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value
