"""Suspensions router -- site bans and comment bans."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from mangafas.auth.models import User
from mangafas.auth.permissions import require_capability
from mangafas.platform import Platform
from mangafas.suspensions.models import Suspension, SuspensionKind
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    IssueSuspensionRequest,
    SuspensionResponse,
    SuspensionStatusResponse,
)

router = APIRouter(prefix="/api/suspensions", tags=["suspensions"])

# Capability needed to issue or lift each kind
_KIND_CAPABILITY = {
    "site": "can_administer",
    "comment": "can_moderate_comments",
}


def _suspension_response(s: Optional[Suspension]) -> Optional[SuspensionResponse]:
    if s is None:
        return None
    return SuspensionResponse(**s.to_dict())


@router.post(
    "",
    response_model=ActionResult,
    summary="Issue a site or comment ban",
)
async def issue_suspension(
    body: IssueSuspensionRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Ban a user. ``ok`` is False if they already hold an active ban of this kind."""
    require_capability(user, _KIND_CAPABILITY[body.kind])
    suspension = platform.suspensions.issue(
        body.user_id, user, body.reason, body.duration, days=body.days, kind=body.kind
    )
    if suspension is None:
        return ActionResult(ok=False)
    return ActionResult(ok=True, id=suspension.id)


@router.delete(
    "/{user_id}",
    response_model=ActionResult,
    summary="Lift a user's active ban",
)
async def lift_suspension(
    user_id: str,
    kind: Literal["site", "comment"] = "site",
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, _KIND_CAPABILITY[kind])
    return ActionResult(ok=platform.suspensions.lift(user_id, user, kind), id=user_id)


@router.get(
    "",
    response_model=list[SuspensionResponse],
    summary="List active suspensions",
)
async def list_active(
    kind: Optional[Literal["site", "comment"]] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return [_suspension_response(s) for s in platform.suspensions.list_active(kind)]


@router.get(
    "/users/{user_id}",
    response_model=SuspensionStatusResponse,
    summary="Ban status of one user",
)
async def suspension_status(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Return the user's active bans, applying expiry first."""
    site = platform.suspensions.check(user_id, SuspensionKind.site)
    comment = platform.suspensions.check(user_id, SuspensionKind.comment)
    return SuspensionStatusResponse(
        user_id=user_id,
        banned=site is not None,
        comment_banned=comment is not None,
        site=_suspension_response(site),
        comment=_suspension_response(comment),
    )


@router.get(
    "/users/{user_id}/history",
    response_model=list[SuspensionResponse],
    summary="Every suspension ever issued to a user",
)
async def suspension_history(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return [_suspension_response(s) for s in platform.suspensions.history(user_id)]
