"""Domain records shared by the visibility resolver and the alerting engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum


# ── Enumerations ──────────────────────────────────────────────────────


class Role(str, Enum):
    ADMIN = "Admin"
    DEPT_HEAD = "DeptHead"
    EMPLOYEE = "Employee"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


_ROLE_LABELS = {
    Role.ADMIN: "General manager",
    Role.DEPT_HEAD: "Department head",
    Role.EMPLOYEE: "Employee",
}


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"

    @property
    def label(self) -> str:
        """Human label used in notification messages."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.OVERDUE: "Overdue",
}


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class NotificationType(str, Enum):
    ASSIGNMENT = "assignment"
    STATUS = "status"
    DEADLINE = "deadline"
    SYSTEM = "system"


# Fixed category order for grouped projections.
CATEGORY_ORDER: tuple[NotificationType, ...] = (
    NotificationType.ASSIGNMENT,
    NotificationType.DEADLINE,
    NotificationType.STATUS,
    NotificationType.SYSTEM,
)

CATEGORY_LABELS: dict[NotificationType, str] = {
    NotificationType.ASSIGNMENT: "New tasks",
    NotificationType.DEADLINE: "Deadline alerts",
    NotificationType.STATUS: "Status updates",
    NotificationType.SYSTEM: "System alerts",
}


# ── Organization ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class User:
    """The authenticated actor of a session. Replaced wholesale on login/logout."""

    id: str
    name: str
    role: Role
    department_id: str | None = None
    project_id: str | None = None
    email: str = ""
    username: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Project:
    """Organizational container for departments and tasks."""

    id: str
    name: str
    description: str = ""
    manager_id: str = ""


@dataclass(frozen=True)
class Task:
    """A unit of work assigned to one employee.

    Records are immutable: a status change swaps in a new record via
    ``dataclasses.replace`` so every transition passes through the change
    detector.
    """

    id: str
    project_id: str
    department_id: str
    employee_id: str
    title: str
    deadline: date | datetime
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    description: str = ""

    def due_at(self) -> datetime:
        """Deadline as an aware UTC instant (calendar dates mean midnight UTC)."""
        if isinstance(self.deadline, datetime):
            if self.deadline.tzinfo is None:
                return self.deadline.replace(tzinfo=timezone.utc)
            return self.deadline
        return datetime.combine(self.deadline, time.min, tzinfo=timezone.utc)


# ── Notifications ─────────────────────────────────────────────────────


@dataclass
class Notification:
    """A session-scoped, read-trackable record of a past event.

    Only ``read`` changes after creation.
    """

    id: str
    seq: int
    title: str
    message: str
    type: NotificationType
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False


@dataclass(frozen=True)
class Toast:
    """Transient presentation of a notification, sharing its id."""

    id: str
    title: str
    message: str
    type: NotificationType
    created_at: datetime
    expires_at: datetime
