"""Notification collaborators: desktop presentation and the push bridge."""

from subwatch.notify.bridge import BridgeClient
from subwatch.notify.desktop import DesktopNotifier, Notifier, NullNotifier

__all__ = [
    "BridgeClient",
    "DesktopNotifier",
    "Notifier",
    "NullNotifier",
]
