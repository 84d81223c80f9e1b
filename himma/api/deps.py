"""FastAPI dependency injection functions for shared state."""

from __future__ import annotations

from fastapi import HTTPException, Request

from himma.engine.directory import OrgDirectory
from himma.engine.session import DashboardSession


def get_session(request: Request) -> DashboardSession:
    """Get the shared DashboardSession from app state."""
    return request.app.state.session


def get_directory(request: Request) -> OrgDirectory:
    """Get the shared OrgDirectory from app state."""
    return request.app.state.session.directory


def require_session(request: Request) -> DashboardSession:
    """Like ``get_session`` but rejects requests when nobody is logged in."""
    session: DashboardSession = request.app.state.session
    if not session.active:
        raise HTTPException(status_code=401, detail="No active session")
    return session
