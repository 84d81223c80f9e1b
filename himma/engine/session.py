"""Dashboard Session -- explicit lifecycle owning the per-user alerting state."""

from __future__ import annotations

import logging

from himma.config import AlertConfig
from himma.engine.alert_emitter import AlertEmitter, Listener, SoundCue, silent
from himma.engine.change_detector import ChangeDetector
from himma.engine.deadline_scanner import DeadlineScanner
from himma.engine.directory import OrgDirectory
from himma.engine.notification_store import NotificationStore
from himma.engine.scheduler import Scheduler, TimerRegistry
from himma.engine.toast_presenter import ToastPresenter
from himma.engine.visibility import (
    resolve_active_project,
    resolve_visible_projects,
    resolve_visible_tasks,
)
from himma.models import Project, Task, TaskStatus, User

logger = logging.getLogger("engine.session")


class SessionNotActiveError(RuntimeError):
    """Raised when session-scoped state is used with nobody logged in."""


class DashboardSession:
    """Single-user session context.

    ``start(user)`` builds a fresh notification store, toast presenter and
    timer set; ``end()`` cancels every timer and clears the toasts before
    anything else can be armed. Visibility is recomputed on every call.
    """

    def __init__(
        self,
        directory: OrgDirectory,
        scheduler: Scheduler,
        config: AlertConfig | None = None,
        sound: SoundCue | None = None,
    ) -> None:
        self.directory = directory
        self._scheduler = scheduler
        self._config = config or AlertConfig()
        self._sound = sound if self._config.sound_enabled else silent
        self._listeners: list[Listener] = []

        self._user: User | None = None
        self._selected_project_id: str | None = None
        self._timers: TimerRegistry | None = None
        self._store: NotificationStore | None = None
        self._toasts: ToastPresenter | None = None
        self._emitter: AlertEmitter | None = None
        self._detector: ChangeDetector | None = None
        self._scanner: DeadlineScanner | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def active(self) -> bool:
        return self._user is not None

    def start(self, user: User) -> None:
        """Log a user in. An existing session is ended first."""
        if self.active:
            self.end()

        self._user = user
        self._selected_project_id = None
        self._timers = TimerRegistry(self._scheduler)
        self._store = NotificationStore()
        self._toasts = ToastPresenter(self._timers, ttl=self._config.toast_ttl)
        self._emitter = AlertEmitter(self._store, self._toasts, self._timers, sound=self._sound)
        for listener in self._listeners:
            self._emitter.subscribe(listener)
        self._detector = ChangeDetector(self.directory, self._emitter)
        self._scanner = DeadlineScanner(
            self.visible_tasks, self._emitter, self._timers, self._config
        )
        self._scanner.start()
        logger.info("Session started for %s (role=%s)", user.id, user.role.value)

    def end(self) -> None:
        """Log out: stop the scanner, drop toasts and cancel every timer."""
        if not self.active:
            return
        user = self._user
        self._scanner.stop()
        self._toasts.clear()
        cancelled = self._timers.cancel_all()

        self._user = None
        self._selected_project_id = None
        self._timers = None
        self._store = None
        self._toasts = None
        self._emitter = None
        self._detector = None
        self._scanner = None
        logger.info("Session ended for %s (%d timers cancelled)", user.id, cancelled)

    def subscribe(self, listener: Listener) -> None:
        """Receive every notification emitted in this and later sessions."""
        self._listeners.append(listener)
        if self._emitter is not None:
            self._emitter.subscribe(listener)

    def _require(self, component):
        if component is None:
            raise SessionNotActiveError("No active session")
        return component

    @property
    def notifications(self) -> NotificationStore:
        return self._require(self._store)

    @property
    def toasts(self) -> ToastPresenter:
        return self._require(self._toasts)

    @property
    def emitter(self) -> AlertEmitter:
        return self._require(self._emitter)

    @property
    def scanner(self) -> DeadlineScanner:
        return self._require(self._scanner)

    # ── Visibility ────────────────────────────────────────────────────

    def select_project(self, project_id: str | None) -> Project | None:
        """Change the admin's project selection.

        Returns:
            The resulting active project (selection is ignored for non-admins).
        """
        self._require(self._user)
        self._selected_project_id = project_id
        return self.active_project()

    def visible_projects(self) -> list[Project]:
        return resolve_visible_projects(self._user, self.directory.projects)

    def active_project(self) -> Project | None:
        return resolve_active_project(
            self._user, self._selected_project_id, self.visible_projects()
        )

    def visible_tasks(self) -> list[Task]:
        return resolve_visible_tasks(self._user, self.active_project(), self.directory.tasks)

    # ── Mutations ─────────────────────────────────────────────────────

    def update_task_status(self, task_id: str, status: TaskStatus | str) -> Task | None:
        return self._require(self._detector).update_task_status(task_id, status)

    def add_task(self, task: Task) -> Task:
        return self._require(self._detector).add_task(task)
