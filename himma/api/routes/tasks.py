"""Task routes -- visible task list, creation and status changes."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException

from himma.api.deps import require_session
from himma.api.models import (
    CreateTaskRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
    TaskResponse,
    parse_deadline,
)
from himma.engine.session import DashboardSession
from himma.models import Task

logger = logging.getLogger("api.tasks")

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    session: DashboardSession = Depends(require_session),
) -> list[TaskResponse]:
    """Tasks of the active project that the current user may see."""
    return [TaskResponse.from_task(t) for t in session.visible_tasks()]


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    req: CreateTaskRequest,
    session: DashboardSession = Depends(require_session),
) -> TaskResponse:
    """Add a task to the active project and announce it."""
    project = session.active_project()
    if project is None:
        raise HTTPException(status_code=400, detail="No active project")

    task = Task(
        id=f"task-{uuid.uuid4().hex[:8]}",
        project_id=project.id,
        department_id=req.department_id,
        employee_id=req.employee_id,
        title=req.title,
        description=req.description,
        priority=req.priority,
        deadline=parse_deadline(req.deadline),
    )
    try:
        session.add_task(task)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info("Task %s added to project %s", task.id, project.id)
    return TaskResponse.from_task(task)


@router.put("/{task_id}/status", response_model=StatusUpdateResponse)
async def update_status(
    task_id: str,
    req: StatusUpdateRequest,
    session: DashboardSession = Depends(require_session),
) -> StatusUpdateResponse:
    """Change a task's status.

    Unknown ids and unchanged statuses are accepted silently; ``notified``
    tells whether a status notification was raised.
    """
    before = session.directory.get_task(task_id)
    after = session.update_task_status(task_id, req.status)
    notified = before is not None and before.status != req.status
    return StatusUpdateResponse(
        task_id=task_id,
        notified=notified,
        task=TaskResponse.from_task(after) if after else None,
    )
