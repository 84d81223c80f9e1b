"""Project visibility routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from himma.api.deps import require_session
from himma.api.models import ProjectResponse, SelectProjectRequest
from himma.engine.session import DashboardSession

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    session: DashboardSession = Depends(require_session),
) -> list[ProjectResponse]:
    """Projects visible to the current user."""
    return [ProjectResponse.from_project(p) for p in session.visible_projects()]


@router.put("/active", response_model=ProjectResponse)
async def select_project(
    req: SelectProjectRequest,
    session: DashboardSession = Depends(require_session),
) -> ProjectResponse:
    """Change the active project.

    Only admins can pick; everyone else always lands on their own project.
    Unknown ids fall back to the first visible project.
    """
    project = session.select_project(req.project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="No visible project")
    return ProjectResponse.from_project(project)
