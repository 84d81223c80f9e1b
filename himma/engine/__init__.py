"""Himma alerting engine -- visibility, detection, notifications, toasts."""

from himma.engine.alert_emitter import AlertEmitter
from himma.engine.change_detector import ChangeDetector
from himma.engine.deadline_scanner import DeadlineScanner, find_near_deadlines
from himma.engine.directory import OrgDirectory
from himma.engine.notification_store import NotificationGroup, NotificationStore
from himma.engine.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
    TimerRegistry,
)
from himma.engine.session import DashboardSession, SessionNotActiveError
from himma.engine.toast_presenter import ToastPresenter
from himma.engine.visibility import (
    resolve_active_project,
    resolve_visible_projects,
    resolve_visible_tasks,
)

__all__ = [
    "AlertEmitter",
    "ChangeDetector",
    "DeadlineScanner",
    "find_near_deadlines",
    "OrgDirectory",
    "NotificationGroup",
    "NotificationStore",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "TimerRegistry",
    "DashboardSession",
    "SessionNotActiveError",
    "ToastPresenter",
    "resolve_active_project",
    "resolve_visible_projects",
    "resolve_visible_tasks",
]
