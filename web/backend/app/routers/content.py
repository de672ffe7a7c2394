"""Content router -- submissions, the review queue, and the published catalog."""

from __future__ import annotations

from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mangafas.auth.models import User
from mangafas.auth.permissions import has_capability, require_capability, requires_approval
from mangafas.content.models import PendingContent
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    PendingContentResponse,
    ReviewRequest,
    SubmitContentRequest,
    SubmitContentResponse,
)

router = APIRouter(prefix="/api/content", tags=["content"])


def _pending_response(item: PendingContent) -> PendingContentResponse:
    return PendingContentResponse(**item.to_dict(), display_name=item.display_name)


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------


@router.post(
    "/submissions",
    response_model=SubmitContentResponse,
    summary="Submit a title or chapter",
)
async def submit(
    body: SubmitContentRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Queue the upload for review or publish it, depending on rank.

    ``pending`` tells which path was taken; ``id`` is the pending id or the
    published catalog id respectively.
    """
    require_capability(user, "can_upload")
    queued = requires_approval(user)
    result_id = platform.content.submit(body.kind, body.payload, user)
    if result_id is None:
        return SubmitContentResponse(ok=False)
    return SubmitContentResponse(ok=True, id=result_id, pending=queued)


@router.get(
    "/submissions",
    response_model=list[PendingContentResponse],
    summary="List submissions",
)
async def list_submissions(
    status_filter: Optional[Literal["pending", "approved", "rejected"]] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Administrators see every submission; others see their own."""
    items = platform.content.list_all(status_filter)
    if not has_capability(user, "can_administer"):
        items = [i for i in items if i.submitted_by == user.id]
    return [_pending_response(i) for i in items]


@router.get(
    "/submissions/pending",
    response_model=list[PendingContentResponse],
    summary="Review queue",
)
async def review_queue(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_administer")
    return [_pending_response(i) for i in platform.content.list_pending()]


@router.get(
    "/submissions/{pending_id}",
    response_model=PendingContentResponse,
    summary="Get a submission",
)
async def get_submission(
    pending_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    item = platform.content.get(pending_id)
    if item is None or (item.submitted_by != user.id and not has_capability(user, "can_administer")):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Submission '{pending_id}' not found",
        )
    return _pending_response(item)


@router.post(
    "/submissions/{pending_id}/approve",
    response_model=ActionResult,
    summary="Approve and publish a submission",
)
async def approve(
    pending_id: str,
    body: Optional[ReviewRequest] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_administer")
    return ActionResult(ok=platform.content.approve(pending_id, user, body.notes if body else None), id=pending_id)


@router.post(
    "/submissions/{pending_id}/reject",
    response_model=ActionResult,
    summary="Reject a submission",
)
async def reject(
    pending_id: str,
    body: Optional[ReviewRequest] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_administer")
    return ActionResult(ok=platform.content.reject(pending_id, user, body.notes if body else None), id=pending_id)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get("/titles", summary="List published titles")
async def list_titles(platform: Platform = Depends(get_platform)) -> list[dict[str, Any]]:
    return platform.catalog.list_titles()


@router.get("/titles/{title_id}", summary="Get a title with its chapters")
async def get_title(title_id: str, platform: Platform = Depends(get_platform)) -> dict[str, Any]:
    title = platform.catalog.get_title(title_id)
    if title is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Title '{title_id}' not found",
        )
    return {**title, "chapters": platform.catalog.chapters_of(title_id)}
