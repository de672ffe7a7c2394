"""Users router -- registration, profiles, stats and rank management."""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from mangafas.auth.models import Role, User
from mangafas.auth.permissions import get_permissions, require_capability
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    CapabilitySetResponse,
    MeResponse,
    RegisterRequest,
    RoleUpdateRequest,
    UserResponse,
    UserStatsResponse,
)

router = APIRouter(prefix="/api/users", tags=["users"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _user_response(u: User) -> UserResponse:
    return UserResponse(
        id=u.id,
        display_name=u.display_name,
        email=u.email,
        role=u.role.value,
        role_label=u.role.label,
        created_at=u.created_at,
        last_login=u.last_login,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ActionResult,
    summary="Register a new member",
)
async def register(body: RegisterRequest, platform: Platform = Depends(get_platform)):
    """Create a ``member`` account. ``ok`` is False if the email is taken."""
    user = platform.accounts.register(body.display_name, body.email)
    if user is None:
        return ActionResult(ok=False)
    return ActionResult(ok=True, id=user.id)


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Current user, capabilities and inbox state",
)
async def me(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Return the acting user's profile and what they may do."""
    platform.users.touch_login(user.id)
    return MeResponse(
        user=_user_response(user),
        permissions=CapabilitySetResponse(**asdict(get_permissions(user.role))),
        unread_notifications=platform.notifications.unread_count(user.id),
        banned=platform.suspensions.is_banned(user.id),
        comment_banned=platform.suspensions.is_banned_from_commenting(user.id),
    )


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List or search users",
)
async def list_users(
    q: Optional[str] = None,
    role: Optional[str] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """List users (moderators only), optionally filtered by text or role."""
    require_capability(user, "can_moderate_comments")
    found = platform.users.search(q) if q else platform.users.list_users()
    if role:
        try:
            wanted = Role(role)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown role '{role}'",
            )
        found = [u for u in found if u.role == wanted]
    return [_user_response(u) for u in found]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
)
async def get_user(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    found = platform.user(user_id)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' not found",
        )
    return _user_response(found)


@router.get(
    "/{user_id}/stats",
    response_model=UserStatsResponse,
    summary="Favorites, reading, comment and upload counts",
)
async def user_stats(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Users see their own stats; moderators see anyone's."""
    if user_id != user.id:
        require_capability(user, "can_moderate_comments")
    stats = platform.accounts.user_stats(user_id)
    if stats is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' not found",
        )
    return UserStatsResponse(**asdict(stats))


@router.put(
    "/{user_id}/role",
    response_model=ActionResult,
    summary="Change a user's rank",
)
async def change_role(
    user_id: str,
    body: RoleUpdateRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Set a user's rank (administrators only)."""
    require_capability(user, "can_administer")
    updated = platform.accounts.change_role(user_id, body.role, user)
    return ActionResult(ok=updated is not None, id=user_id)


@router.delete(
    "/{user_id}",
    response_model=ActionResult,
    summary="Delete a user and their data",
)
async def delete_user(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_administer")
    return ActionResult(ok=platform.accounts.delete_user(user_id, user), id=user_id)
