"""Session routes -- login hand-off and logout."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from himma.api.deps import get_session
from himma.api.models import LoginRequest, SessionResponse, UserResponse
from himma.engine.session import DashboardSession

logger = logging.getLogger("api.session")

router = APIRouter(prefix="/api/session", tags=["session"])


def _session_response(session: DashboardSession) -> SessionResponse:
    if not session.active:
        return SessionResponse(active=False)
    project = session.active_project()
    return SessionResponse(
        active=True,
        user=UserResponse.from_user(session.user),
        active_project_id=project.id if project else None,
    )


@router.get("", response_model=SessionResponse)
async def current_session(
    session: DashboardSession = Depends(get_session),
) -> SessionResponse:
    """Who is logged in, and which project is active."""
    return _session_response(session)


@router.post("/login", response_model=SessionResponse)
async def login(
    req: LoginRequest,
    session: DashboardSession = Depends(get_session),
) -> SessionResponse:
    """Start a session for an already-authenticated user.

    Any previous session is ended (and its timers cancelled) first.
    """
    session.start(req.to_user())
    return _session_response(session)


@router.post("/logout", status_code=204)
async def logout(session: DashboardSession = Depends(get_session)) -> None:
    """End the current session. A no-op when nobody is logged in."""
    session.end()
