"""Toast routes -- live toast stack and manual dismissal."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from himma.api.deps import require_session
from himma.api.models import ToastResponse
from himma.engine.session import DashboardSession

router = APIRouter(prefix="/api/toasts", tags=["toasts"])


@router.get("", response_model=list[ToastResponse])
async def list_toasts(
    session: DashboardSession = Depends(require_session),
) -> list[ToastResponse]:
    """Live toasts, oldest first."""
    return [ToastResponse.from_toast(t) for t in session.toasts.list()]


@router.delete("/{toast_id}", status_code=204)
async def dismiss_toast(
    toast_id: str,
    session: DashboardSession = Depends(require_session),
) -> None:
    """Dismiss a toast. The underlying notification is untouched."""
    if not session.toasts.dismiss(toast_id):
        raise HTTPException(status_code=404, detail=f"Toast '{toast_id}' not found")
