"""Notifications router -- the acting user's inbox."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from mangafas.auth.models import User
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import ActionResult, CountResult, NotificationResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=list[NotificationResponse],
    summary="Inbox, newest first",
)
async def list_notifications(
    unread_only: bool = False,
    limit: Optional[int] = None,
    offset: int = 0,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    items = platform.notifications.list(user.id, unread_only=unread_only, limit=limit, offset=offset)
    return [NotificationResponse(**n.to_dict()) for n in items]


@router.get("/unread-count", response_model=CountResult, summary="Unread notifications")
async def unread_count(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return CountResult(count=platform.notifications.unread_count(user.id))


@router.post("/read-all", response_model=CountResult, summary="Mark every notification read")
async def mark_all_read(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return CountResult(count=platform.notifications.mark_all_read(user.id))


@router.post(
    "/{notification_id}/read",
    response_model=ActionResult,
    summary="Mark one notification read",
)
async def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return ActionResult(ok=platform.notifications.mark_read(user.id, notification_id), id=notification_id)
