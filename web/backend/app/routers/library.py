"""Library router -- the acting user's favorites and reading history."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from mangafas.auth.models import User
from mangafas.auth.permissions import require_capability
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    FavoriteResponse,
    FavoriteStatusResponse,
    HistoryEntryResponse,
    RecordReadRequest,
)

router = APIRouter(prefix="/api/library", tags=["library"])


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


@router.get(
    "/favorites",
    response_model=list[FavoriteResponse],
    summary="Favorite titles, most recently added first",
)
async def list_favorites(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return [FavoriteResponse(**f.to_dict()) for f in platform.library.favorites_of(user.id)]


@router.get(
    "/favorites/{title_id}",
    response_model=FavoriteStatusResponse,
    summary="Whether a title is in the user's favorites",
)
async def favorite_status(
    title_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return FavoriteStatusResponse(title_id=title_id, favorited=platform.library.is_favorited(user.id, title_id))


@router.post(
    "/favorites/{title_id}",
    response_model=ActionResult,
    summary="Add a title to favorites",
)
async def add_favorite(
    title_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """``ok`` is False if the title is already a favorite."""
    require_capability(user, "can_favorite")
    return ActionResult(ok=platform.library.add_favorite(user, title_id), id=title_id)


@router.delete(
    "/favorites/{title_id}",
    response_model=ActionResult,
    summary="Remove a title from favorites",
)
async def remove_favorite(
    title_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_favorite")
    return ActionResult(ok=platform.library.remove_favorite(user, title_id), id=title_id)


# ---------------------------------------------------------------------------
# Reading history
# ---------------------------------------------------------------------------


@router.get(
    "/history",
    response_model=list[HistoryEntryResponse],
    summary="Reading history, most recent first",
)
async def list_history(
    limit: Optional[int] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return [HistoryEntryResponse(**h.to_dict()) for h in platform.library.history_of(user.id, limit=limit)]


@router.post(
    "/history",
    response_model=ActionResult,
    summary="Record a chapter read",
)
async def record_read(
    body: RecordReadRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    entry = platform.library.record_read(
        user, body.title_id, body.chapter_id, body.chapter_number, progress=body.progress
    )
    if entry is None:
        return ActionResult(ok=False)
    return ActionResult(ok=True, id=entry.id)
