"""Desktop notifications via the platform's notification command."""

import asyncio
import logging
import sys
from typing import Protocol

from subwatch.tracking.errors import PresentationError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Presents one notification to the user."""

    async def show(self, summary: str, body: str) -> None: ...


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_command(
    summary: str, body: str, icon: str = "dialog-information", platform: str | None = None
) -> list[str]:
    """Build the notification command line for a platform."""
    platform = platform or sys.platform
    if platform == "darwin":
        script = (
            f"display notification {_applescript_quote(body)} "
            f"with title {_applescript_quote(summary)}"
        )
        return ["osascript", "-e", script]
    return ["notify-send", "--app-name=subwatch", f"--icon={icon}", summary, body]


class DesktopNotifier:
    """Shows notifications with ``notify-send`` (or ``osascript`` on macOS)."""

    def __init__(self, icon: str = "dialog-information", timeout: float = 5.0):
        self._icon = icon
        self._timeout = timeout

    async def show(self, summary: str, body: str) -> None:
        """Show a notification.

        Raises:
            PresentationError: If the command is missing, fails or hangs.
        """
        command = build_command(summary, body, icon=self._icon)
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise PresentationError(f"Cannot run {command[0]}: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise PresentationError(
                f"{command[0]} timed out after {self._timeout}s"
            ) from e

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip() if stderr else ""
            raise PresentationError(
                f"{command[0]} exited with {proc.returncode}: {detail}"
            )


class NullNotifier:
    """Notifier used when desktop notifications are disabled."""

    async def show(self, summary: str, body: str) -> None:
        logger.debug("desktop_notification_skipped", extra={"notification.summary": summary})
