"""Wiring of config into sources, notifiers and the watcher."""

from __future__ import annotations

from datetime import datetime

from subwatch.config import SubwatchConfig
from subwatch.db import Database
from subwatch.notify import BridgeClient, DesktopNotifier, Notifier, NullNotifier
from subwatch.retry import RetryConfig
from subwatch.tracking import (
    ArmPolicy,
    EventSource,
    NotificationState,
    ReturnWatcher,
    SnapshotSource,
    SqliteSource,
    StorageError,
    Submarine,
)


async def build_source(config: SubwatchConfig) -> EventSource:
    """Create the configured event source (read-only)."""
    if config.source.kind == "snapshots":
        return SnapshotSource(
            config.source.snapshot_dir, pattern=config.source.snapshot_pattern
        )
    database = Database(config.source.database_path, mode="ro")
    await database.connect()
    return SqliteSource(database)


def resolve_policy(config: SubwatchConfig, source: EventSource) -> ArmPolicy:
    if config.watch.arm_policy:
        return ArmPolicy(config.watch.arm_policy)
    return source.default_policy


def build_notifier(config: SubwatchConfig) -> Notifier:
    if not config.desktop.enabled:
        return NullNotifier()
    return DesktopNotifier(icon=config.desktop.icon, timeout=config.desktop.timeout)


def build_bridge(config: SubwatchConfig) -> BridgeClient | None:
    bridge = config.bridge
    if not bridge.enabled or bridge.url is None:
        return None
    token = bridge.token.get_secret_value() if bridge.token else None
    return BridgeClient(bridge.url, token=token, timeout=bridge.timeout)


async def load_submarines(config: SubwatchConfig) -> list[Submarine]:
    """Read every submarine once (one-shot listing)."""
    source = await build_source(config)
    try:
        return await source.poll()
    finally:
        await source.close()


async def update_return_times(config: SubwatchConfig, when: datetime) -> int:
    """Rewrite all return times in the tracker database."""
    if config.source.kind != "sqlite":
        raise StorageError("Return times can only be updated in the sqlite source")
    database = Database(config.source.database_path, mode="rw")
    await database.connect()
    source = SqliteSource(database)
    try:
        return await source.update_return_times(when)
    finally:
        await source.close()


async def run_daemon(config: SubwatchConfig) -> None:
    """Run the watcher until interrupted."""
    source = await build_source(config)
    bridge = build_bridge(config)
    watcher = ReturnWatcher(
        source,
        NotificationState(resolve_policy(config, source)),
        build_notifier(config),
        bridge=bridge,
        poll_interval=config.watch.poll_interval,
        timezone=config.timezone,
        window_ms=config.bridge.window_seconds * 1000,
        skip_unchanged=config.watch.skip_unchanged,
        retry=RetryConfig(max_delay=config.watch.max_backoff),
    )
    try:
        await watcher.run()
    finally:
        await source.close()
        if bridge is not None:
            await bridge.aclose()
