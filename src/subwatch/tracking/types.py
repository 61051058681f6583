"""Tracking types.

Public types:
- Submarine: One tracked submarine and its return time
- Character: Owner of a set of submarines
- NotifyMeta: Per-submarine notification state
- FireEvent: Emitted once when an armed return time elapses
- BridgeAlert: One batched alert for the push bridge
- ArmPolicy: How already-past return times are treated on first sight
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

SubmarineKey = tuple[int | str, int | str]


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class ArmPolicy(Enum):
    """Treatment of a return time that is already past when observed.

    FIRE_LATE arms it anyway, so it fires on that observation (database
    backend). FUTURE_ONLY never fires an already-past entry it just loaded
    (snapshot backend).
    """

    FIRE_LATE = "fire_late"
    FUTURE_ONLY = "future_only"


@dataclass(frozen=True)
class Submarine:
    """A submarine and its current voyage return time."""

    id: int | str
    name: str
    return_time: datetime  # aware, UTC
    character_id: int | str
    character_name: str = ""
    tag: str = ""

    @property
    def key(self) -> SubmarineKey:
        """Identity used for notification state (ids are unique per character)."""
        return (self.character_id, self.id)

    @property
    def owner_label(self) -> str:
        return f"{self.character_name} «{self.tag}»"


@dataclass
class Character:
    """A character and the submarines it owns, ordered by return time."""

    id: int | str
    name: str
    tag: str = ""
    submarines: list[Submarine] = field(default_factory=list)


@dataclass
class NotifyMeta:
    """Transient notification state for one submarine."""

    key: SubmarineKey
    will_notify: bool = True
    last_return_time: datetime = EPOCH


@dataclass(frozen=True)
class FireEvent:
    """A submarine whose armed return time has elapsed."""

    submarine: Submarine
    fired_at: datetime


@dataclass(frozen=True)
class BridgeAlert:
    """One coalesced alert sent to the push bridge."""

    title: str
    message: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp,
        }
