"""Health and system info routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from himma import __version__
from himma.api.deps import get_session
from himma.api.models import SystemInfoResponse
from himma.engine.session import DashboardSession

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness check -- always returns ok if the server is running."""
    return {"status": "ok"}


@router.get("/info", response_model=SystemInfoResponse)
async def system_info(
    session: DashboardSession = Depends(get_session),
) -> SystemInfoResponse:
    """System information snapshot."""
    if not session.active:
        return SystemInfoResponse(version=__version__, session_active=False)
    return SystemInfoResponse(
        version=__version__,
        session_active=True,
        unread_notifications=session.notifications.unread_count(),
        live_toasts=len(session.toasts),
    )
