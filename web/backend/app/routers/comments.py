"""Comments router -- threads, votes, moderation, and comment reports."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from mangafas.auth.models import User
from mangafas.auth.permissions import require_capability
from mangafas.comments.models import Comment
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    AddCommentRequest,
    CommentResponse,
    EditCommentRequest,
    HideCommentRequest,
    ReportRequest,
    ReportResponse,
    VoteResponse,
)

router = APIRouter(prefix="/api/comments", tags=["comments"])


def _comment_response(c: Comment, replies: Optional[list[Comment]] = None) -> CommentResponse:
    return CommentResponse(
        **c.to_dict(),
        replies=[_comment_response(r) for r in replies or []],
    )


def _vote_response(c: Optional[Comment]) -> VoteResponse:
    if c is None:
        return VoteResponse(ok=False)
    return VoteResponse(ok=True, likes=len(c.likes), dislikes=len(c.dislikes))


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=list[CommentResponse],
    summary="Comment thread for a title or chapter",
)
async def list_thread(
    content_id: str,
    chapter_id: Optional[str] = None,
    platform: Platform = Depends(get_platform),
):
    """Visible top-level comments newest first, each with its replies oldest first."""
    service = platform.comments
    return [
        _comment_response(c, service.replies_of(c.id))
        for c in service.top_level(content_id, chapter_id)
    ]


@router.get(
    "/moderated",
    response_model=list[CommentResponse],
    summary="Hidden and deleted comments",
)
async def list_moderated(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return [_comment_response(c) for c in platform.comments.moderated()]


@router.get("/stats", summary="Comment counts by status")
async def comment_stats(
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
) -> dict:
    require_capability(user, "can_moderate_comments")
    return platform.comments.stats()


@router.get(
    "/users/{user_id}",
    response_model=list[CommentResponse],
    summary="Comments written by a user",
)
async def list_by_user(
    user_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    if user_id != user.id:
        require_capability(user, "can_moderate_comments")
    return [_comment_response(c) for c in platform.comments.by_user(user_id)]


@router.get(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Get a comment",
)
async def get_comment(comment_id: str, platform: Platform = Depends(get_platform)):
    comment = platform.comments.get(comment_id)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comment '{comment_id}' not found",
        )
    return _comment_response(comment, platform.comments.replies_of(comment.id))


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ActionResult,
    summary="Post a comment or reply",
)
async def add_comment(
    body: AddCommentRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_comment")
    comment = platform.comments.add_comment(
        body.content_id, user, body.body, chapter_id=body.chapter_id, parent_id=body.parent_id
    )
    return ActionResult(ok=comment is not None, id=comment.id if comment else None)


@router.put(
    "/{comment_id}",
    response_model=ActionResult,
    summary="Edit your comment (once)",
)
async def edit_comment(
    comment_id: str,
    body: EditCommentRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return ActionResult(ok=platform.comments.edit(comment_id, body.body, user), id=comment_id)


@router.delete(
    "/{comment_id}",
    response_model=ActionResult,
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return ActionResult(ok=platform.comments.delete(comment_id, user), id=comment_id)


@router.post("/{comment_id}/like", response_model=VoteResponse, summary="Toggle a like")
async def like_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return _vote_response(platform.comments.toggle_like(comment_id, user))


@router.post("/{comment_id}/dislike", response_model=VoteResponse, summary="Toggle a dislike")
async def dislike_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    return _vote_response(platform.comments.toggle_dislike(comment_id, user))


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------


@router.post(
    "/{comment_id}/hide",
    response_model=ActionResult,
    summary="Hide a comment",
)
async def hide_comment(
    comment_id: str,
    body: HideCommentRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return ActionResult(ok=platform.comments.hide(comment_id, user, body.reason), id=comment_id)


@router.post(
    "/{comment_id}/restore",
    response_model=ActionResult,
    summary="Restore a hidden comment",
)
async def restore_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return ActionResult(ok=platform.comments.restore(comment_id, user), id=comment_id)


@router.post(
    "/{comment_id}/report",
    response_model=ActionResult,
    summary="Report a comment",
)
async def report_comment(
    comment_id: str,
    body: ReportRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """File a report. ``ok`` is False if you already have an open report on it."""
    report = platform.reports.report_comment(comment_id, user, body.reason, body.description)
    return ActionResult(ok=report is not None, id=report.id if report else None)


@router.get(
    "/{comment_id}/reports",
    response_model=list[ReportResponse],
    summary="Reports attached to a comment",
)
async def comment_reports(
    comment_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return [ReportResponse(**r.to_dict()) for r in platform.reports.reports_for_comment(comment_id)]
