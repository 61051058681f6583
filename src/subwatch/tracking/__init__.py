"""Tracking subsystem: submarine return detection and notification state.

Public API:
- SqliteSource / SnapshotSource: Read submarines from a backing store
- NotificationState: Decides when a submarine's return fires
- group_pending: Batches pending returns into bridge alerts
- ReturnWatcher: Polling loop that dispatches notifications

Types:
- Submarine, Character, NotifyMeta, FireEvent, BridgeAlert, ArmPolicy
"""

from subwatch.tracking.errors import (
    DecodeError,
    InputFormatError,
    PresentationError,
    StorageError,
    SubwatchError,
    TransportError,
)
from subwatch.tracking.grouping import group_pending
from subwatch.tracking.snapshots import SnapshotSource, load_snapshot
from subwatch.tracking.sources import EventSource, SqliteSource
from subwatch.tracking.state import NotificationState
from subwatch.tracking.types import (
    ArmPolicy,
    BridgeAlert,
    Character,
    FireEvent,
    NotifyMeta,
    Submarine,
)
from subwatch.tracking.watcher import ReturnWatcher, TickResult

__all__ = [
    "ArmPolicy",
    "BridgeAlert",
    "Character",
    "DecodeError",
    "EventSource",
    "FireEvent",
    "InputFormatError",
    "NotificationState",
    "NotifyMeta",
    "PresentationError",
    "ReturnWatcher",
    "SnapshotSource",
    "SqliteSource",
    "StorageError",
    "Submarine",
    "SubwatchError",
    "TickResult",
    "TransportError",
    "group_pending",
    "load_snapshot",
]
