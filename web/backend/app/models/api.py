"""Pydantic models for API request/response serialization.

These models mirror the mangafas dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from mangafas.suspensions.engine import MAX_SUSPENSION_DAYS


# ---------------------------------------------------------------------------
# Generic results
# ---------------------------------------------------------------------------


class ActionResult(BaseModel):
    """Outcome of a command. ``ok`` is False for refused business actions."""

    ok: bool
    id: Optional[str] = None


class CountResult(BaseModel):
    ok: bool = True
    count: int = 0


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class CapabilitySetResponse(BaseModel):
    """Mirrors mangafas.auth.models.CapabilitySet."""

    can_read: bool
    can_comment: bool
    can_favorite: bool
    can_upload: bool
    can_moderate_comments: bool
    can_administer: bool
    upload_requires_approval: bool = False


class UserResponse(BaseModel):
    """Mirrors mangafas.auth.models.User."""

    id: str
    display_name: str
    email: str
    role: str
    role_label: str = ""
    created_at: str = ""
    last_login: str = ""


class MeResponse(BaseModel):
    user: UserResponse
    permissions: CapabilitySetResponse
    unread_notifications: int = 0
    banned: bool = False
    comment_banned: bool = False


class RegisterRequest(BaseModel):
    display_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)


class RoleUpdateRequest(BaseModel):
    role: Literal[
        "member", "apprentice_contributor", "senior_contributor", "group_leader", "moderator", "owner"
    ]


# ---------------------------------------------------------------------------
# Suspensions
# ---------------------------------------------------------------------------


class SuspensionResponse(BaseModel):
    """Mirrors mangafas.suspensions.models.Suspension."""

    id: str
    user_id: str
    kind: str
    issued_by: str
    reason: str
    duration: str
    issued_at: str
    expires_at: str = ""
    active: bool = True
    lifted_by: str = ""
    lifted_at: str = ""


class IssueSuspensionRequest(BaseModel):
    user_id: str
    reason: str
    kind: Literal["site", "comment"] = "site"
    duration: Literal["temporary", "permanent"] = "temporary"
    days: Optional[int] = Field(None, gt=0, le=MAX_SUSPENSION_DAYS)


class SuspensionStatusResponse(BaseModel):
    user_id: str
    banned: bool
    comment_banned: bool
    site: Optional[SuspensionResponse] = None
    comment: Optional[SuspensionResponse] = None


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


class SubmitContentRequest(BaseModel):
    kind: Literal["title", "chapter"]
    payload: dict[str, Any] = Field(default_factory=dict)


class SubmitContentResponse(BaseModel):
    ok: bool
    id: Optional[str] = None
    pending: bool = False


class PendingContentResponse(BaseModel):
    """Mirrors mangafas.content.models.PendingContent."""

    id: str
    kind: str
    submitted_by: str
    submitted_at: str
    payload: dict[str, Any] = Field(default_factory=dict)
    status: str = "pending"
    reviewed_by: str = ""
    reviewed_at: str = ""
    review_notes: str = ""
    published_id: str = ""
    display_name: str = ""


class ReviewRequest(BaseModel):
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Comments and reports
# ---------------------------------------------------------------------------


class CommentResponse(BaseModel):
    """Mirrors mangafas.comments.models.Comment."""

    id: str
    content_id: str
    chapter_id: Optional[str] = None
    author_id: str
    body: str
    created_at: str
    updated_at: str
    is_edited: bool = False
    parent_id: Optional[str] = None
    likes: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)
    status: str = "active"
    moderated_by: str = ""
    moderated_at: str = ""
    moderation_reason: str = ""
    report_ids: list[str] = Field(default_factory=list)
    replies: list[CommentResponse] = Field(default_factory=list)


CommentResponse.model_rebuild()


class AddCommentRequest(BaseModel):
    content_id: str
    body: str
    chapter_id: Optional[str] = None
    parent_id: Optional[str] = None


class EditCommentRequest(BaseModel):
    body: str


class HideCommentRequest(BaseModel):
    reason: str


class VoteResponse(BaseModel):
    ok: bool
    likes: int = 0
    dislikes: int = 0


ReasonLiteral = Literal["spam", "inappropriate", "offensive", "harassment", "other"]


class ReportRequest(BaseModel):
    reason: ReasonLiteral
    description: str = ""


class ReportResponse(BaseModel):
    """Mirrors mangafas.comments.models.Report."""

    id: str
    target_kind: str
    target_id: str
    reporter_id: str
    reason: str
    description: str = ""
    created_at: str = ""
    status: str = "pending"
    resolved_by: str = ""
    resolved_at: str = ""
    notes: str = ""


class ResolveReportRequest(BaseModel):
    status: Literal["resolved", "dismissed"] = "resolved"
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationResponse(BaseModel):
    """Mirrors mangafas.notifications.models.Notification."""

    id: str
    recipient_id: str
    type: str
    title: str
    message: str
    payload: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: str = ""


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


class FavoriteResponse(BaseModel):
    """Mirrors mangafas.library.models.Favorite."""

    user_id: str
    title_id: str
    added_at: str = ""
    last_read: str = ""


class FavoriteStatusResponse(BaseModel):
    title_id: str
    favorited: bool


class HistoryEntryResponse(BaseModel):
    """Mirrors mangafas.library.models.HistoryEntry."""

    id: str
    user_id: str
    title_id: str
    chapter_id: str
    chapter_number: float
    read_at: str = ""
    progress: int = 100


class RecordReadRequest(BaseModel):
    title_id: str = Field(..., min_length=1)
    chapter_id: str = Field(..., min_length=1)
    chapter_number: float = 0
    progress: int = Field(100, ge=0, le=100)


class UserStatsResponse(BaseModel):
    """Mirrors mangafas.auth.models.UserStats."""

    user_id: str
    favorites: int = 0
    reading_history: int = 0
    titles_read: int = 0
    chapters_read: int = 0
    comments_written: int = 0
    titles_uploaded: int = 0
    chapters_uploaded: int = 0
    submissions_pending: int = 0
