"""Alert Emitter -- single funnel turning events into notification + toast pairs."""

from __future__ import annotations

import itertools
import logging
import sys
import uuid
from typing import Callable, TextIO

from himma.engine.notification_store import NotificationStore
from himma.engine.scheduler import Scheduler
from himma.engine.toast_presenter import ToastPresenter
from himma.models import Notification, NotificationType

logger = logging.getLogger("engine.alert_emitter")

SoundCue = Callable[[], None]
Listener = Callable[[Notification], None]


def terminal_bell(stream: TextIO | None = None) -> None:
    """Ring the terminal bell. Returns immediately."""
    out = stream or sys.stderr
    out.write("\a")
    out.flush()


def silent() -> None:
    """Sound cue that does nothing."""


class AlertEmitter:
    """Builds notifications and fans them out to the store and the toasts.

    ``emit`` never fails for normal input: the sound cue and listeners are
    best-effort and their errors are logged, not raised.
    """

    def __init__(
        self,
        store: NotificationStore,
        toasts: ToastPresenter,
        scheduler: Scheduler,
        sound: SoundCue | None = None,
    ) -> None:
        self._store = store
        self._toasts = toasts
        self._scheduler = scheduler
        self._sound = sound or terminal_bell
        self._seq = itertools.count(1)
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with every emitted notification."""
        self._listeners.append(listener)

    def emit(
        self,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.SYSTEM,
    ) -> Notification:
        """Create a notification, log it, toast it and play the cue.

        Returns:
            The created Notification.
        """
        seq = next(self._seq)
        notif = Notification(
            id=f"notif-{seq:06d}-{uuid.uuid4().hex[:6]}",
            seq=seq,
            title=title,
            message=message,
            type=NotificationType(type),
            timestamp=self._scheduler.now(),
        )
        self._store.append(notif)
        self._toasts.push(notif)
        self._play_sound()
        logger.info("Emitted %s notification %s: %s", notif.type.value, notif.id, title)

        for listener in self._listeners:
            try:
                listener(notif)
            except Exception as e:
                logger.warning("Notification listener failed for %s: %s", notif.id, e)

        return notif

    def _play_sound(self) -> None:
        try:
            self._sound()
        except Exception as e:
            logger.warning("Audio playback failed: %s", e)
