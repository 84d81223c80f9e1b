"""Notification Store -- append-ordered notification log with read state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from himma.models import CATEGORY_LABELS, CATEGORY_ORDER, Notification, NotificationType


@dataclass
class NotificationGroup:
    """One category of the grouped notification view."""

    type: NotificationType
    label: str
    items: list[Notification] = field(default_factory=list)

    @property
    def unread(self) -> int:
        return sum(1 for n in self.items if not n.read)


class NotificationStore:
    """Session-scoped log of notifications.

    The underlying log is kept in creation order. Iterating the store yields
    newest first, which is a plain reversal of that log and never a resort,
    so notifications created in the same instant keep their relative order.
    """

    def __init__(self) -> None:
        self._log: list[Notification] = []
        self._by_id: dict[str, Notification] = {}

    def append(self, notification: Notification) -> None:
        """Add a notification to the log."""
        self._log.append(notification)
        self._by_id[notification.id] = notification

    def __iter__(self) -> Iterator[Notification]:
        return reversed(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def items(self, *, unread_only: bool = False, limit: int | None = None) -> list[Notification]:
        """Notifications newest first.

        Args:
            unread_only: Skip notifications already marked read.
            limit: Maximum notifications to return (None = all).
        """
        items = [n for n in self if not (unread_only and n.read)]
        return items if limit is None else items[:limit]

    def log(self) -> list[Notification]:
        """Notifications in creation order."""
        return list(self._log)

    def get(self, notification_id: str) -> Notification | None:
        return self._by_id.get(notification_id)

    def mark_read(self, notification_id: str) -> bool:
        """Mark a single notification as read.

        Returns:
            False if the id is unknown.
        """
        notif = self._by_id.get(notification_id)
        if notif is None:
            return False
        notif.read = True
        return True

    def mark_all_read(self) -> int:
        """Flip every notification to read. Nothing is deleted.

        Returns:
            Number of notifications marked.
        """
        count = 0
        for notif in self._log:
            if not notif.read:
                notif.read = True
                count += 1
        return count

    def unread_count(self) -> int:
        """Count unread notifications."""
        return sum(1 for n in self._log if not n.read)

    def group_by_type(self) -> dict[NotificationType, NotificationGroup]:
        """Group notifications by category.

        Categories always come out in the fixed order assignment, deadline,
        status, system; empty categories are left out. Items keep creation
        order.
        """
        groups = {
            t: NotificationGroup(type=t, label=CATEGORY_LABELS[t]) for t in CATEGORY_ORDER
        }
        for notif in self._log:
            group = groups.get(notif.type)
            if group is not None:
                group.items.append(notif)
        return {t: g for t, g in groups.items() if g.items}

    def clear(self) -> None:
        self._log.clear()
        self._by_id.clear()
