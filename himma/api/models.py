"""Pydantic request/response models for the Himma dashboard API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from himma.models import Notification, Priority, Project, Role, Task, TaskStatus, Toast, User


def parse_deadline(value: str) -> date | datetime:
    """Parse an ISO date (``2025-03-01``) or datetime (``2025-03-01T17:00:00Z``)."""
    if "T" in value or " " in value.strip():
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return date.fromisoformat(value)


# ── Session ───────────────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    """The user handed over by the authentication surface."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    role: Role
    department_id: str | None = None
    project_id: str | None = None
    email: str = ""
    username: str = ""

    def to_user(self) -> User:
        return User(**self.model_dump())


class UserResponse(BaseModel):
    id: str
    name: str
    role: Role
    role_label: str
    department_id: str | None = None
    project_id: str | None = None

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            name=user.name,
            role=user.role,
            role_label=user.role.label,
            department_id=user.department_id,
            project_id=user.project_id,
        )


class SessionResponse(BaseModel):
    active: bool
    user: UserResponse | None = None
    active_project_id: str | None = None


# ── Projects ──────────────────────────────────────────────────────────────


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    manager_id: str = ""

    @classmethod
    def from_project(cls, project: Project) -> ProjectResponse:
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            manager_id=project.manager_id,
        )


class SelectProjectRequest(BaseModel):
    project_id: str | None = None


# ── Tasks ─────────────────────────────────────────────────────────────────


class TaskResponse(BaseModel):
    id: str
    project_id: str
    department_id: str
    employee_id: str
    title: str
    description: str = ""
    status: TaskStatus
    status_label: str
    priority: Priority
    deadline: str

    @classmethod
    def from_task(cls, task: Task) -> TaskResponse:
        return cls(
            id=task.id,
            project_id=task.project_id,
            department_id=task.department_id,
            employee_id=task.employee_id,
            title=task.title,
            description=task.description,
            status=task.status,
            status_label=task.status.label,
            priority=task.priority,
            deadline=task.deadline.isoformat(),
        )


class CreateTaskRequest(BaseModel):
    """Request body for adding a task to the active project."""

    title: str = Field(..., min_length=1, max_length=300)
    department_id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    deadline: str
    description: str = ""
    priority: Priority = Priority.MEDIUM

    @field_validator("deadline")
    @classmethod
    def _check_deadline(cls, value: str) -> str:
        parse_deadline(value)
        return value


class StatusUpdateRequest(BaseModel):
    status: TaskStatus


class StatusUpdateResponse(BaseModel):
    task_id: str
    notified: bool
    task: TaskResponse | None = None


# ── Notifications ─────────────────────────────────────────────────────────


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    timestamp: str
    read: bool

    @classmethod
    def from_notification(cls, n: Notification) -> NotificationResponse:
        return cls(
            id=n.id,
            title=n.title,
            message=n.message,
            type=n.type.value,
            timestamp=n.timestamp.isoformat(),
            read=n.read,
        )


class NotificationCountResponse(BaseModel):
    """Unread count with per-type breakdown."""

    count: int
    by_type: dict[str, int] = {}


class NotificationGroupResponse(BaseModel):
    type: str
    label: str
    unread: int
    items: list[NotificationResponse]


class ToastResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    created_at: str
    expires_at: str

    @classmethod
    def from_toast(cls, toast: Toast) -> ToastResponse:
        return cls(
            id=toast.id,
            title=toast.title,
            message=toast.message,
            type=toast.type.value,
            created_at=toast.created_at.isoformat(),
            expires_at=toast.expires_at.isoformat(),
        )


class SystemInfoResponse(BaseModel):
    version: str
    session_active: bool
    unread_notifications: int = 0
    live_toasts: int = 0
