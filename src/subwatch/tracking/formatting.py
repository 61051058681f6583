"""Human-readable rendering of return times.

The display timezone only affects text; comparisons always use UTC.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from subwatch.tracking.errors import InputFormatError
from subwatch.tracking.types import Submarine

logger = logging.getLogger(__name__)


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA name, falling back to UTC for unknown names."""
    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("invalid_timezone", extra={"display.timezone": name})
        return UTC


def _day(value: datetime) -> str:
    # Space-padded day of month, like strftime's %e
    return f"{value.day:2d}"


def format_notification_time(value: datetime, tz: tzinfo) -> str:
    """Format as e.g. ``Nov 14, 2024, 04:59PM``."""
    local = value.astimezone(tz)
    return f"{local:%b} {_day(local)}, {local:%Y, %I:%M%p}"


def format_listing_time(value: datetime, tz: tzinfo) -> str:
    """Format as e.g. ``14 November 2024 at 04:59:00 PM``."""
    local = value.astimezone(tz)
    return f"{_day(local)} {local:%B %Y at %I:%M:%S %p}"


def timezone_abbreviation(tz: tzinfo, at: datetime) -> str:
    return at.astimezone(tz).tzname() or ""


def format_notification(submarine: Submarine, tz: tzinfo) -> tuple[str, str]:
    """Build the (summary, body) pair for a desktop notification."""
    summary = f"{submarine.name} returned"
    time_str = format_notification_time(submarine.return_time, tz)
    body = f"{submarine.name} ({submarine.owner_label}) returned on {time_str}"
    return summary, body


def format_listing(
    submarines: Iterable[Submarine], tz: tzinfo, now: datetime
) -> list[str]:
    """Render submarines grouped by owner, one padded line per submarine.

    Owners appear in order of their earliest return. The timezone
    abbreviation is taken at ``now``.
    """
    subs = list(submarines)
    if not subs:
        return []

    abbr = timezone_abbreviation(tz, now)
    longest_name = max(len(s.name) for s in subs)

    by_owner: dict[str, list[Submarine]] = {}
    for sub in subs:
        by_owner.setdefault(sub.owner_label, []).append(sub)

    lines: list[str] = []
    for owner, owned in by_owner.items():
        lines.append(f"{owner}:")
        for sub in owned:
            padding = " " * (longest_name - len(sub.name))
            time_str = format_listing_time(sub.return_time, tz)
            lines.append(f"  {sub.name}:{padding} {time_str} {abbr}".rstrip())
    return lines


GAME_TIME_FORMAT = "%m/%d/%Y %H:%M"
GAME_TIME_EXAMPLE = "11/14/2024 16:59"


def parse_game_time(text: str, tz: tzinfo) -> datetime:
    """Parse an in-game style local time (``MM/DD/YYYY HH:MM``) to UTC.

    Raises:
        InputFormatError: If the text does not match the format.
    """
    try:
        naive = datetime.strptime(text.strip(), GAME_TIME_FORMAT)
    except ValueError as e:
        raise InputFormatError(
            f"Date format incorrect for '{text}', FFXIV format expected",
            example=GAME_TIME_EXAMPLE,
        ) from e
    return naive.replace(tzinfo=tz).astimezone(UTC)
