"""Deadline Scanner -- periodic check of the visible tasks for imminent deadlines."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable

from himma.config import AlertConfig
from himma.engine.alert_emitter import AlertEmitter
from himma.engine.scheduler import Scheduler, TimerHandle
from himma.models import Notification, NotificationType, Task

logger = logging.getLogger("engine.deadline_scanner")

ASSIGNMENT_ALERT_TITLE = "New task!"
ASSIGNMENT_ALERT_MESSAGE = 'The task "Update monthly reports" has just been assigned to you.'


def find_near_deadlines(
    tasks: Iterable[Task], now: datetime, window: timedelta = timedelta(hours=24)
) -> list[Task]:
    """Tasks due strictly after ``now`` and strictly within ``window``."""
    near = []
    for task in tasks:
        remaining = task.due_at() - now
        if timedelta(0) < remaining < window:
            near.append(task)
    return near


class DeadlineScanner:
    """Scans the currently visible tasks on a fixed interval.

    At most one deadline notification is emitted per scan, summarizing the
    count. A one-shot assignment alert is armed alongside the scan. Both
    timers stop with ``stop``.
    """

    def __init__(
        self,
        visible_tasks: Callable[[], list[Task]],
        emitter: AlertEmitter,
        scheduler: Scheduler,
        config: AlertConfig | None = None,
    ) -> None:
        self._visible_tasks = visible_tasks
        self._emitter = emitter
        self._scheduler = scheduler
        self._config = config or AlertConfig()
        self._interval_handle: TimerHandle | None = None
        self._assignment_handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._interval_handle is not None and self._interval_handle.active

    def start(self) -> None:
        """Arm the recurring scan and the one-shot assignment alert."""
        self.stop()
        self._interval_handle = self._scheduler.schedule_repeating(
            self._config.deadline_scan_interval, self.scan, name="deadline-scan"
        )
        if self._config.assignment_alert_enabled:
            self._assignment_handle = self._scheduler.schedule_once(
                self._config.assignment_alert_delay,
                self._assignment_alert,
                name="assignment-alert",
            )
        logger.info(
            "Deadline scanner started (interval=%.0fs)", self._config.deadline_scan_interval
        )

    def stop(self) -> None:
        """Cancel both timers. Safe to call when not running."""
        for handle in (self._interval_handle, self._assignment_handle):
            if handle is not None:
                handle.cancel()
        self._interval_handle = None
        self._assignment_handle = None

    def scan(self) -> Notification | None:
        """Run one scan now.

        Returns:
            The deadline notification, or None when nothing is due soon.
        """
        now = self._scheduler.now()
        window = timedelta(hours=self._config.deadline_window_hours)
        near = find_near_deadlines(self._visible_tasks(), now, window)
        if not near:
            logger.debug("Deadline scan found nothing due within %s", window)
            return None

        count = len(near)
        noun = "task" if count == 1 else "tasks"
        return self._emitter.emit(
            "Deadline alert",
            f"You have {count} {noun} due in less than "
            f"{self._config.deadline_window_hours:g} hours.",
            NotificationType.DEADLINE,
        )

    def _assignment_alert(self) -> None:
        self._emitter.emit(
            ASSIGNMENT_ALERT_TITLE, ASSIGNMENT_ALERT_MESSAGE, NotificationType.ASSIGNMENT
        )
