"""Notification state machine.

Each submarine is observed once per poll. A submarine is *armed* when its
return time is pending and *fires* once, the first time it is observed at or
after that return time. Changing the return time to a new future value
re-arms it. State lives only in memory and is rebuilt on restart.
"""

import logging
from datetime import datetime

from subwatch.tracking.types import (
    ArmPolicy,
    FireEvent,
    NotifyMeta,
    Submarine,
    SubmarineKey,
)

logger = logging.getLogger(__name__)


class NotificationState:
    """Per-submarine notification state keyed by ``Submarine.key``.

    Example:
        state = NotificationState(ArmPolicy.FIRE_LATE)
        for sub in await source.poll():
            if event := state.observe(sub, utc_now()):
                await notifier.show(...)
    """

    def __init__(self, policy: ArmPolicy = ArmPolicy.FIRE_LATE):
        self._policy = policy
        self._meta: dict[SubmarineKey, NotifyMeta] = {}

    @property
    def policy(self) -> ArmPolicy:
        return self._policy

    def __len__(self) -> int:
        return len(self._meta)

    def __contains__(self, key: object) -> bool:
        return key in self._meta

    def get(self, key: SubmarineKey) -> NotifyMeta | None:
        return self._meta.get(key)

    def observe(self, submarine: Submarine, now: datetime) -> FireEvent | None:
        """Update state for one observation and return a FireEvent if due.

        At most one FireEvent is produced per distinct return time.
        """
        return_time = submarine.return_time
        meta = self._meta.get(submarine.key)
        if meta is None:
            meta = self._first_seen(submarine, now)
            self._meta[submarine.key] = meta

        if meta.last_return_time != return_time:
            if return_time > now:
                meta.last_return_time = return_time
                meta.will_notify = True
                logger.debug(
                    "return_notification_armed",
                    extra={
                        "submarine.name": submarine.name,
                        "submarine.return_time": return_time.isoformat(),
                    },
                )
            elif self._policy is ArmPolicy.FUTURE_ONLY:
                # Reloaded with a time that has already passed
                meta.last_return_time = return_time
                meta.will_notify = False

        if meta.will_notify and return_time <= now:
            meta.will_notify = False
            return FireEvent(submarine=submarine, fired_at=now)

        return None

    def _first_seen(self, submarine: Submarine, now: datetime) -> NotifyMeta:
        if self._policy is ArmPolicy.FUTURE_ONLY:
            return NotifyMeta(
                key=submarine.key,
                will_notify=submarine.return_time > now,
                last_return_time=submarine.return_time,
            )
        return NotifyMeta(key=submarine.key)
