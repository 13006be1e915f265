"""Per-command collector for validation failures.

A fresh DomainNotificationHandler is created for every command invocation, so
concurrent commands never share validation state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List


@dataclass(frozen=True)
class DomainNotification:
    """A single validation failure."""

    key: str
    value: str
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )


class DomainNotificationHandler:
    """Accumulates DomainNotifications for one command execution."""

    def __init__(self):
        self._notifications: List[DomainNotification] = []

    def add(self, notification: DomainNotification) -> None:
        self._notifications.append(notification)

    def notify(self, key: str, value: str) -> DomainNotification:
        """Build and add a notification in one call."""
        notification = DomainNotification(key=key, value=value)
        self.add(notification)
        return notification

    def has_notifications(self) -> bool:
        return bool(self._notifications)

    def get_notifications(self) -> List[DomainNotification]:
        return list(self._notifications)

    def keys(self) -> List[str]:
        return [n.key for n in self._notifications]

    def values(self) -> List[str]:
        return [n.value for n in self._notifications]

    def clear(self) -> None:
        self._notifications.clear()

    def __iter__(self) -> Iterator[DomainNotification]:
        return iter(list(self._notifications))

    def __len__(self) -> int:
        return len(self._notifications)

    def __repr__(self) -> str:
        return f"<DomainNotificationHandler(count={len(self._notifications)})>"
