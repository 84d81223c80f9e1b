"""Notification center routes."""

from __future__ import annotations

import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException

from himma.api.deps import require_session
from himma.api.models import (
    NotificationCountResponse,
    NotificationGroupResponse,
    NotificationResponse,
)
from himma.engine.session import DashboardSession

logger = logging.getLogger("api.notifications")

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    unread_only: bool = False,
    limit: int | None = None,
    session: DashboardSession = Depends(require_session),
) -> list[NotificationResponse]:
    """Notifications of the current session, newest first."""
    items = session.notifications.items(unread_only=unread_only, limit=limit)
    return [NotificationResponse.from_notification(n) for n in items]


@router.get("/count", response_model=NotificationCountResponse)
async def notification_count(
    session: DashboardSession = Depends(require_session),
) -> NotificationCountResponse:
    """Unread count with breakdown by type."""
    unread = session.notifications.items(unread_only=True)
    by_type = dict(Counter(n.type.value for n in unread))
    return NotificationCountResponse(count=len(unread), by_type=by_type)


@router.get("/grouped", response_model=list[NotificationGroupResponse])
async def grouped_notifications(
    session: DashboardSession = Depends(require_session),
) -> list[NotificationGroupResponse]:
    """Notifications grouped by category in the fixed category order."""
    return [
        NotificationGroupResponse(
            type=ntype.value,
            label=group.label,
            unread=group.unread,
            items=[NotificationResponse.from_notification(n) for n in group.items],
        )
        for ntype, group in session.notifications.group_by_type().items()
    ]


@router.post("/read-all")
async def mark_all_read(session: DashboardSession = Depends(require_session)) -> dict:
    """Mark all notifications as read."""
    count = session.notifications.mark_all_read()
    logger.info("Marked %d notifications read", count)
    return {"marked": count}


@router.post("/{notification_id}/read", status_code=204)
async def mark_notification_read(
    notification_id: str,
    session: DashboardSession = Depends(require_session),
) -> None:
    """Mark a single notification as read."""
    if not session.notifications.mark_read(notification_id):
        raise HTTPException(
            status_code=404, detail=f"Notification '{notification_id}' not found"
        )
