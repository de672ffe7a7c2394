"""Notification models.

Each notification type carries its own payload dataclass; the ``type`` tag
stored with a notification selects the payload class when it is read back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import ClassVar, Optional, Union


class NotificationType(str, Enum):
    rank_changed = "rank_changed"
    banned = "banned"
    unbanned = "unbanned"
    content_pending_approval = "content_pending_approval"
    content_submitted = "content_submitted"
    content_approved = "content_approved"
    content_rejected = "content_rejected"
    comment_hidden = "comment_hidden"
    comment_restored = "comment_restored"
    comment_reported = "comment_reported"
    user_reported = "user_reported"
    new_user_registration = "new_user_registration"


# ---------------------------------------------------------------------------
# Payload variants
# ---------------------------------------------------------------------------


@dataclass
class RankChanged:
    type: ClassVar[NotificationType] = NotificationType.rank_changed

    old_role: str
    new_role: str
    changed_by: str


@dataclass
class Banned:
    type: ClassVar[NotificationType] = NotificationType.banned

    suspension_id: str
    kind: str  # "site" | "comment"
    duration: str  # "temporary" | "permanent"
    reason: str
    issued_by: str
    expires_at: str = ""


@dataclass
class Unbanned:
    type: ClassVar[NotificationType] = NotificationType.unbanned

    suspension_id: str
    kind: str
    lifted_by: str


@dataclass
class ContentPendingApproval:
    type: ClassVar[NotificationType] = NotificationType.content_pending_approval

    pending_id: str
    kind: str  # "title" | "chapter"
    submitted_by: str


@dataclass
class ContentSubmitted:
    type: ClassVar[NotificationType] = NotificationType.content_submitted

    pending_id: str
    kind: str


@dataclass
class ContentApproved:
    type: ClassVar[NotificationType] = NotificationType.content_approved

    pending_id: str
    kind: str
    published_id: str
    reviewed_by: str


@dataclass
class ContentRejected:
    type: ClassVar[NotificationType] = NotificationType.content_rejected

    pending_id: str
    kind: str
    reviewed_by: str
    notes: str = ""


@dataclass
class CommentHidden:
    type: ClassVar[NotificationType] = NotificationType.comment_hidden

    comment_id: str
    moderator_id: str
    reason: str


@dataclass
class CommentRestored:
    type: ClassVar[NotificationType] = NotificationType.comment_restored

    comment_id: str
    moderator_id: str


@dataclass
class CommentReported:
    type: ClassVar[NotificationType] = NotificationType.comment_reported

    comment_id: str
    report_id: str
    reason: str


@dataclass
class UserReported:
    type: ClassVar[NotificationType] = NotificationType.user_reported

    reported_user_id: str
    report_id: str
    reason: str


@dataclass
class NewUserRegistration:
    type: ClassVar[NotificationType] = NotificationType.new_user_registration

    user_id: str
    display_name: str
    email: str


NotificationPayload = Union[
    RankChanged,
    Banned,
    Unbanned,
    ContentPendingApproval,
    ContentSubmitted,
    ContentApproved,
    ContentRejected,
    CommentHidden,
    CommentRestored,
    CommentReported,
    UserReported,
    NewUserRegistration,
]

PAYLOAD_TYPES: dict[NotificationType, type] = {
    cls.type: cls
    for cls in (
        RankChanged,
        Banned,
        Unbanned,
        ContentPendingApproval,
        ContentSubmitted,
        ContentApproved,
        ContentRejected,
        CommentHidden,
        CommentRestored,
        CommentReported,
        UserReported,
        NewUserRegistration,
    )
}


def payload_from_dict(kind: NotificationType, data: dict) -> NotificationPayload:
    cls = PAYLOAD_TYPES[kind]
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class Notification:
    """One inbox entry."""

    id: str
    recipient_id: str
    payload: NotificationPayload
    title: str
    message: str
    read: bool = False
    created_at: str = ""

    @property
    def type(self) -> NotificationType:
        return self.payload.type

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recipient_id": self.recipient_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "payload": asdict(self.payload),
            "read": self.read,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Optional["Notification"]:
        try:
            kind = NotificationType(d.get("type", ""))
        except ValueError:
            return None
        return cls(
            id=d["id"],
            recipient_id=d["recipient_id"],
            payload=payload_from_dict(kind, d.get("payload", {})),
            title=d.get("title", ""),
            message=d.get("message", ""),
            read=d.get("read", False),
            created_at=d.get("created_at", ""),
        )
