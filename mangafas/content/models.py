"""Content submission models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ContentKind(str, Enum):
    title = "title"
    chapter = "chapter"


class ReviewStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


@dataclass
class PendingContent:
    """A submission waiting for (or past) review.

    ``payload`` is a snapshot of what will be published; for titles it
    carries at least ``title``, for chapters ``title_id`` and ``number``.
    """

    id: str
    kind: ContentKind
    submitted_by: str
    submitted_at: str
    payload: dict = field(default_factory=dict)
    status: ReviewStatus = ReviewStatus.pending
    reviewed_by: str = ""
    reviewed_at: str = ""
    review_notes: str = ""
    published_id: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = ContentKind(self.kind)
        if isinstance(self.status, str):
            self.status = ReviewStatus(self.status)

    @property
    def display_name(self) -> str:
        """Human name for messages: the title name, or the chapter label."""
        name = str(self.payload.get("title", "")).strip()
        if self.kind is ContentKind.chapter:
            number = self.payload.get("number")
            label = f"Chapter {number}" if number is not None else "Chapter"
            return f"{label}: {name}" if name else label
        return name or "Untitled"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "submitted_by": self.submitted_by,
            "submitted_at": self.submitted_at,
            "payload": self.payload,
            "status": self.status.value,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at,
            "review_notes": self.review_notes,
            "published_id": self.published_id,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "PendingContent":
        return cls(
            id=d["id"],
            kind=d.get("kind", "title"),
            submitted_by=d.get("submitted_by", ""),
            submitted_at=d.get("submitted_at", ""),
            payload=d.get("payload", {}) or {},
            status=d.get("status", "pending"),
            reviewed_by=d.get("reviewed_by", ""),
            reviewed_at=d.get("reviewed_at", ""),
            review_notes=d.get("review_notes", ""),
            published_id=d.get("published_id", ""),
        )
