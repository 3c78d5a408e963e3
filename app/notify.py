"""Notification sinks for pipeline events.

The pipeline logs its own events; sinks only carry the user-facing message.
"""

from __future__ import annotations

from typing import List, Protocol

from .models import Notification, NotificationKind


class NotificationSink(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> None:
        ...


class CollectingSink:
    """Keeps notifications in arrival order, e.g. to return them in a response."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.notifications.append(Notification(kind=kind, message=message))
