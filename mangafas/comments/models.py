"""Comment and report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CommentStatus(str, Enum):
    active = "active"
    hidden = "hidden"
    deleted = "deleted"


class ReportReason(str, Enum):
    spam = "spam"
    inappropriate = "inappropriate"
    offensive = "offensive"
    harassment = "harassment"
    other = "other"

    @property
    def label(self) -> str:
        return {
            ReportReason.spam: "Spam",
            ReportReason.inappropriate: "Inappropriate content",
            ReportReason.offensive: "Offensive content",
            ReportReason.harassment: "Harassment",
            ReportReason.other: "Other",
        }[self]


class ReportStatus(str, Enum):
    pending = "pending"
    resolved = "resolved"
    dismissed = "dismissed"


class ReportTarget(str, Enum):
    comment = "comment"
    user = "user"


@dataclass
class Comment:
    """A comment on a title (or on one of its chapters).

    Replies point at a top-level comment through ``parent_id``; the data
    never nests deeper than one level.
    """

    id: str
    content_id: str
    author_id: str
    body: str
    created_at: str
    updated_at: str
    chapter_id: Optional[str] = None
    parent_id: Optional[str] = None
    is_edited: bool = False
    likes: list[str] = field(default_factory=list)
    dislikes: list[str] = field(default_factory=list)
    status: CommentStatus = CommentStatus.active
    moderated_by: str = ""
    moderated_at: str = ""
    moderation_reason: str = ""
    report_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.status, str):
            self.status = CommentStatus(self.status)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content_id": self.content_id,
            "chapter_id": self.chapter_id,
            "author_id": self.author_id,
            "body": self.body,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "is_edited": self.is_edited,
            "parent_id": self.parent_id,
            "likes": list(self.likes),
            "dislikes": list(self.dislikes),
            "status": self.status.value,
            "moderated_by": self.moderated_by,
            "moderated_at": self.moderated_at,
            "moderation_reason": self.moderation_reason,
            "report_ids": list(self.report_ids),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Comment":
        return cls(
            id=d["id"],
            content_id=d["content_id"],
            chapter_id=d.get("chapter_id"),
            author_id=d["author_id"],
            body=d.get("body", ""),
            created_at=d.get("created_at", ""),
            updated_at=d.get("updated_at", ""),
            is_edited=d.get("is_edited", False),
            parent_id=d.get("parent_id"),
            likes=list(d.get("likes", [])),
            dislikes=list(d.get("dislikes", [])),
            status=d.get("status", "active"),
            moderated_by=d.get("moderated_by", ""),
            moderated_at=d.get("moderated_at", ""),
            moderation_reason=d.get("moderation_reason", ""),
            report_ids=list(d.get("report_ids", [])),
        )


@dataclass
class Report:
    """A complaint against a comment or a user."""

    id: str
    target_kind: ReportTarget
    target_id: str
    reporter_id: str
    reason: ReportReason
    description: str
    created_at: str
    status: ReportStatus = ReportStatus.pending
    resolved_by: str = ""
    resolved_at: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.target_kind, str):
            self.target_kind = ReportTarget(self.target_kind)
        if isinstance(self.reason, str):
            self.reason = ReportReason(self.reason)
        if isinstance(self.status, str):
            self.status = ReportStatus(self.status)

    @property
    def is_open(self) -> bool:
        return self.status is ReportStatus.pending

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target_kind": self.target_kind.value,
            "target_id": self.target_id,
            "reporter_id": self.reporter_id,
            "reason": self.reason.value,
            "description": self.description,
            "created_at": self.created_at,
            "status": self.status.value,
            "resolved_by": self.resolved_by,
            "resolved_at": self.resolved_at,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Report":
        return cls(
            id=d["id"],
            target_kind=d.get("target_kind", "comment"),
            target_id=d["target_id"],
            reporter_id=d["reporter_id"],
            reason=d.get("reason", "other"),
            description=d.get("description", ""),
            created_at=d.get("created_at", ""),
            status=d.get("status", "pending"),
            resolved_by=d.get("resolved_by", ""),
            resolved_at=d.get("resolved_at", ""),
            notes=d.get("notes", ""),
        )
