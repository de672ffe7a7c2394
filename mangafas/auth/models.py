"""Identity domain models: roles, capability sets and users."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mangafas.storage import utcnow


class Role(str, Enum):
    """Rank hierarchy: owner > moderator > group_leader > senior_contributor
    > apprentice_contributor > member."""

    member = "member"
    apprentice_contributor = "apprentice_contributor"
    senior_contributor = "senior_contributor"
    group_leader = "group_leader"
    moderator = "moderator"
    owner = "owner"

    @property
    def level(self) -> int:
        """Return numeric level for comparison (higher = more privileges)."""
        return {
            Role.member: 10,
            Role.apprentice_contributor: 20,
            Role.senior_contributor: 30,
            Role.group_leader: 40,
            Role.moderator: 50,
            Role.owner: 60,
        }[self]

    @property
    def label(self) -> str:
        return {
            Role.member: "Member",
            Role.apprentice_contributor: "Apprentice Contributor",
            Role.senior_contributor: "Senior Contributor",
            Role.group_leader: "Group Leader",
            Role.moderator: "Moderator",
            Role.owner: "Site Owner",
        }[self]


@dataclass(frozen=True)
class CapabilitySet:
    """What a role may do on the site."""

    can_read: bool
    can_comment: bool
    can_favorite: bool
    can_upload: bool
    can_moderate_comments: bool
    can_administer: bool
    upload_requires_approval: bool = False


CAPABILITY_NAMES = (
    "can_read",
    "can_comment",
    "can_favorite",
    "can_upload",
    "can_moderate_comments",
    "can_administer",
)


@dataclass
class User:
    """A registered reader or contributor."""

    id: str
    display_name: str
    email: str
    role: Role = Role.member
    created_at: str = ""
    last_login: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = utcnow().isoformat()
        if not self.last_login:
            self.last_login = self.created_at
        if isinstance(self.role, str):
            self.role = Role(self.role)


@dataclass
class UserStats:
    """Activity counters shown on a profile."""

    user_id: str
    favorites: int = 0
    reading_history: int = 0
    titles_read: int = 0
    chapters_read: int = 0
    comments_written: int = 0
    titles_uploaded: int = 0
    chapters_uploaded: int = 0
    submissions_pending: int = 0
