"""Change Detector -- observes task mutations and raises alerts on transitions."""

from __future__ import annotations

import logging

from himma.engine.alert_emitter import AlertEmitter
from himma.engine.directory import OrgDirectory
from himma.models import NotificationType, Task, TaskStatus

logger = logging.getLogger("engine.change_detector")


class ChangeDetector:
    """Sole entry point for task status changes.

    Lookups run against the full task collection, not the caller's visible
    subset, so changes pushed by other actors are still detected.
    """

    def __init__(self, directory: OrgDirectory, emitter: AlertEmitter) -> None:
        self._directory = directory
        self._emitter = emitter

    def update_task_status(self, task_id: str, new_status: TaskStatus | str) -> Task | None:
        """Apply a status change, alerting only when the status actually differs.

        Repeating the same ``(task_id, status)`` pair is a no-op for alerting.
        Unknown task ids are ignored.

        Returns:
            The task record after the update, or None for an unknown id.
        """
        new_status = TaskStatus(new_status)
        task = self._directory.get_task(task_id)
        if task is None:
            logger.debug("Status update for unknown task %s ignored", task_id)
            return None
        if task.status == new_status:
            return task

        self._emitter.emit(
            "Task status updated",
            f'Task "{task.title}" status changed to {new_status.label}.',
            NotificationType.STATUS,
        )
        logger.info(
            "Task %s: %s -> %s", task_id, task.status.value, new_status.value
        )
        return self._directory.set_status(task_id, new_status)

    def add_task(self, task: Task) -> Task:
        """Register a new task and announce the assignment.

        Raises:
            ValueError: If the task id already exists.
        """
        self._directory.add_task(task)
        self._emitter.emit(
            "Task added",
            f"New task added: {task.title}",
            NotificationType.ASSIGNMENT,
        )
        return task
