"""Suspension (ban) models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from mangafas.storage import parse_ts


class SuspensionKind(str, Enum):
    """Which surface a suspension blocks."""

    site = "site"
    comment = "comment"


class Duration(str, Enum):
    temporary = "temporary"
    permanent = "permanent"


SYSTEM_ACTOR = "system"


@dataclass
class Suspension:
    """A site ban or a comment ban against one user."""

    id: str
    user_id: str
    kind: SuspensionKind
    issued_by: str
    reason: str
    duration: Duration
    issued_at: str
    expires_at: str = ""  # set iff temporary
    active: bool = True
    lifted_by: str = ""
    lifted_at: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = SuspensionKind(self.kind)
        if isinstance(self.duration, str):
            self.duration = Duration(self.duration)

    def is_expired(self, now: datetime) -> bool:
        """True when a temporary suspension has reached its expiry."""
        if self.duration is not Duration.temporary:
            return False
        expires = parse_ts(self.expires_at)
        return expires is not None and now >= expires

    @property
    def expires(self) -> Optional[datetime]:
        return parse_ts(self.expires_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "kind": self.kind.value,
            "issued_by": self.issued_by,
            "reason": self.reason,
            "duration": self.duration.value,
            "issued_at": self.issued_at,
            "expires_at": self.expires_at,
            "active": self.active,
            "lifted_by": self.lifted_by,
            "lifted_at": self.lifted_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Suspension":
        return cls(
            id=d["id"],
            user_id=d["user_id"],
            kind=d.get("kind", "site"),
            issued_by=d.get("issued_by", ""),
            reason=d.get("reason", ""),
            duration=d.get("duration", "permanent"),
            issued_at=d.get("issued_at", ""),
            expires_at=d.get("expires_at", "") or "",
            active=d.get("active", False),
            lifted_by=d.get("lifted_by", ""),
            lifted_at=d.get("lifted_at", ""),
        )
