"""Batching of pending returns into bridge alerts.

Submarines whose return times are close together are reported as one
alert so the push bridge is not flooded when a whole fleet comes back at
once. A new group starts whenever the gap to the previous return exceeds
the window.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from subwatch.tracking.formatting import format_notification_time
from subwatch.tracking.types import EPOCH, BridgeAlert, Submarine

DEFAULT_WINDOW_MS = 300_000  # 5 minutes


def _epoch_ms(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


@dataclass
class _Group:
    representative: Submarine
    first_return_ms: int
    count: int = 1

    @property
    def group_key(self) -> str:
        return str(self.representative.character_id)

    def to_alert(self, tz: tzinfo) -> BridgeAlert:
        rep = self.representative
        time_str = format_notification_time(rep.return_time, tz)
        if self.count == 1:
            title = f"{rep.name} returned"
            message = f"{rep.name} ({rep.owner_label}) returned on {time_str}"
        else:
            others = self.count - 1
            title = f"{rep.name} (+{others}) returned"
            message = (
                f"{rep.name} ({rep.owner_label}) + {others} others "
                f"returned on {time_str}"
            )
        return BridgeAlert(
            title=title, message=message, timestamp=self.first_return_ms
        )


def group_pending(
    submarines: Iterable[Submarine],
    tz: tzinfo,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> dict[str, BridgeAlert]:
    """Coalesce submarines into alerts keyed by ``"{character_id}-{seq}"``.

    Args:
        submarines: Pending submarines sorted ascending by return time.
        tz: Display timezone for the message text.
        window_ms: Largest gap (inclusive) between consecutive returns that
            still joins the same group.

    Returns:
        Mapping of synthetic group key to alert. Empty input gives an empty
        mapping.
    """
    alerts: dict[str, BridgeAlert] = {}
    current: _Group | None = None
    previous_ms = 0

    def flush(group: _Group) -> None:
        alerts[f"{group.group_key}-{len(alerts)}"] = group.to_alert(tz)

    for sub in submarines:
        return_ms = _epoch_ms(sub.return_time)
        if current is not None and return_ms - previous_ms > window_ms:
            flush(current)
            current = None
        if current is None:
            current = _Group(representative=sub, first_return_ms=return_ms)
        else:
            current.count += 1
            current.first_return_ms = min(current.first_return_ms, return_ms)
        previous_ms = return_ms

    if current is not None:
        flush(current)

    return alerts
