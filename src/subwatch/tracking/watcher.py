"""Return watcher: polls the event source and dispatches notifications.

The watcher owns the polling loop and all per-process state (notification
state, bridge fingerprint). Ticks never overlap.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from subwatch.retry import RetryConfig, calculate_delay
from subwatch.tracking.errors import PresentationError, StorageError, TransportError
from subwatch.tracking.formatting import format_notification, resolve_timezone
from subwatch.tracking.grouping import DEFAULT_WINDOW_MS, group_pending
from subwatch.tracking.sources import EventSource
from subwatch.tracking.state import NotificationState
from subwatch.tracking.types import (
    BridgeAlert,
    FireEvent,
    Submarine,
    SubmarineKey,
    utc_now,
)

if TYPE_CHECKING:
    from subwatch.notify.bridge import BridgeClient
    from subwatch.notify.desktop import Notifier

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL = 300  # polls (~5 min at 1s interval)

Fingerprint = frozenset[tuple[SubmarineKey, datetime]]


@dataclass
class TickResult:
    """What one poll cycle observed and dispatched."""

    submarines: list[Submarine] = field(default_factory=list)
    fired: list[FireEvent] = field(default_factory=list)
    alerts: dict[str, BridgeAlert] = field(default_factory=dict)
    bridge_sent: bool = False


class ReturnWatcher:
    """Watches submarine return times and notifies when they elapse.

    Example:
        source = SqliteSource(Database(get_database_path()))
        watcher = ReturnWatcher(
            source,
            NotificationState(source.default_policy),
            DesktopNotifier(),
        )
        await watcher.run()
    """

    def __init__(
        self,
        source: EventSource,
        state: NotificationState,
        notifier: Notifier,
        bridge: BridgeClient | None = None,
        poll_interval: float = 1.0,
        timezone: str = "UTC",
        window_ms: int = DEFAULT_WINDOW_MS,
        skip_unchanged: bool = True,
        retry: RetryConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._source = source
        self._state = state
        self._notifier = notifier
        self._bridge = bridge
        self._poll_interval = poll_interval
        self._tz = resolve_timezone(timezone)
        self._window_ms = window_ms
        self._skip_unchanged = skip_unchanged
        self._retry = retry or RetryConfig()
        self._clock = clock

        self._last_fingerprint: Fingerprint | None = None
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._running = False
        self._poll_count = 0
        self._failures = 0

    @property
    def state(self) -> NotificationState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    async def tick(self) -> TickResult:
        """Run one poll cycle.

        Raises:
            StorageError: If the source could not be read. Nothing is
                dispatched for this cycle.
        """
        submarines = await self._source.poll()
        now = self._clock()
        result = TickResult(submarines=submarines)

        for sub in submarines:
            event = self._state.observe(sub, now)
            if event is not None:
                result.fired.append(event)

        for event in result.fired:
            await self._present(event)

        if self._bridge is not None:
            pending = [s for s in submarines if s.return_time > now]
            await self._push_pending(self._bridge, pending, result)

        return result

    async def _present(self, event: FireEvent) -> None:
        sub = event.submarine
        summary, body = format_notification(sub, self._tz)
        logger.info(
            "submarine_returned",
            extra={
                "submarine.name": sub.name,
                "character.name": sub.character_name,
                "submarine.return_time": sub.return_time.isoformat(),
            },
        )
        try:
            await self._notifier.show(summary, body)
        except PresentationError as e:
            logger.error(
                "desktop_notification_failed",
                extra={"submarine.name": sub.name, "error.message": str(e)},
            )

    async def _push_pending(
        self, bridge: BridgeClient, pending: list[Submarine], result: TickResult
    ) -> None:
        fingerprint: Fingerprint = frozenset((s.key, s.return_time) for s in pending)
        if self._skip_unchanged and fingerprint == self._last_fingerprint:
            return

        result.alerts = group_pending(pending, self._tz, window_ms=self._window_ms)
        if result.alerts:
            try:
                await bridge.send(result.alerts)
            except TransportError as e:
                logger.error("bridge_send_failed", extra={"error.message": str(e)})
                # Retry on the next tick
                self._last_fingerprint = None
                return
            result.bridge_sent = True
        self._last_fingerprint = fingerprint

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        logger.info(
            "return_watcher_started",
            extra={
                "watch.poll_interval": self._poll_interval,
                "watch.policy": self._state.policy.value,
            },
        )
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Request shutdown and wait for the current tick to finish."""
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._task:
            await self._task
            self._task = None
        logger.info("return_watcher_stopped")

    async def run(self) -> None:
        """Run until SIGINT/SIGTERM or ``stop()``."""
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._stop_event.set)
                installed.append(sig)
            except (NotImplementedError, RuntimeError):
                pass  # Windows event loops
        try:
            await self.start()
            await self._stop_event.wait()
            await self.stop()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    async def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            delay = self._poll_interval
            try:
                self._poll_count += 1
                if self._poll_count % HEARTBEAT_INTERVAL == 0:
                    logger.info(
                        "return_watcher_heartbeat",
                        extra={
                            "poll.count": self._poll_count,
                            "watch.tracked": len(self._state),
                        },
                    )
                await self.tick()
                if self._failures:
                    logger.info(
                        "storage_recovered", extra={"poll.failures": self._failures}
                    )
                self._failures = 0
            except StorageError as e:
                self._failures += 1
                delay = max(delay, calculate_delay(self._failures, self._retry))
                logger.warning(
                    "storage_poll_failed",
                    extra={
                        "error.message": str(e),
                        "poll.failures": self._failures,
                        "poll.retry_in": round(delay, 1),
                    },
                )
            except Exception as e:
                logger.exception("return_check_error", extra={"error.message": str(e)})

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except TimeoutError:
                pass
