"""Toast Presenter -- transient, self-expiring view over new notifications."""

from __future__ import annotations

import logging
from datetime import timedelta

from himma.engine.scheduler import Scheduler, TimerHandle
from himma.models import Notification, Toast

logger = logging.getLogger("engine.toast_presenter")


class ToastPresenter:
    """Holds the live toasts in arrival order.

    Each toast owns its own expiry timer. Toasts reference notifications by
    id only; dismissing or expiring a toast never touches the notification.
    """

    def __init__(self, scheduler: Scheduler, ttl: float = 5.0) -> None:
        self._scheduler = scheduler
        self._ttl = ttl
        self._toasts: dict[str, Toast] = {}
        self._timers: dict[str, TimerHandle] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def push(self, notification: Notification) -> Toast:
        """Show a toast for a notification and arm its expiry."""
        created = self._scheduler.now()
        toast = Toast(
            id=notification.id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            created_at=created,
            expires_at=created + timedelta(seconds=self._ttl),
        )
        self._toasts[toast.id] = toast
        self._timers[toast.id] = self._scheduler.schedule_once(
            self._ttl, lambda: self._expire(toast.id), name=f"toast:{toast.id}"
        )
        return toast

    def _expire(self, toast_id: str) -> None:
        self._timers.pop(toast_id, None)
        if self._toasts.pop(toast_id, None) is not None:
            logger.debug("Toast %s expired", toast_id)

    def dismiss(self, toast_id: str) -> bool:
        """Remove a toast before it expires.

        Returns:
            False if no such toast is live.
        """
        toast = self._toasts.pop(toast_id, None)
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.cancel()
        return toast is not None

    def list(self) -> list[Toast]:
        """Live toasts, oldest first."""
        return list(self._toasts.values())

    def get(self, toast_id: str) -> Toast | None:
        return self._toasts.get(toast_id)

    def __len__(self) -> int:
        return len(self._toasts)

    def clear(self) -> int:
        """Drop every live toast and cancel its expiry.

        Returns:
            Number of toasts removed.
        """
        for timer in self._timers.values():
            timer.cancel()
        count = len(self._toasts)
        self._timers.clear()
        self._toasts.clear()
        return count
