"""Favorite and reading-history models."""

from __future__ import annotations

from dataclasses import dataclass

# Newest entries kept per user.
HISTORY_LIMIT = 100


@dataclass
class Favorite:
    user_id: str
    title_id: str
    added_at: str
    last_read: str = ""

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "title_id": self.title_id,
            "added_at": self.added_at,
            "last_read": self.last_read,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Favorite":
        return cls(
            user_id=d["user_id"],
            title_id=d["title_id"],
            added_at=d.get("added_at", ""),
            last_read=d.get("last_read", "") or "",
        )


@dataclass
class HistoryEntry:
    """One chapter a user has opened; re-reading a chapter replaces its entry."""

    id: str
    user_id: str
    title_id: str
    chapter_id: str
    chapter_number: float
    read_at: str
    progress: int = 100

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title_id": self.title_id,
            "chapter_id": self.chapter_id,
            "chapter_number": self.chapter_number,
            "read_at": self.read_at,
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "HistoryEntry":
        return cls(
            id=d["id"],
            user_id=d["user_id"],
            title_id=d.get("title_id", ""),
            chapter_id=d.get("chapter_id", ""),
            chapter_number=d.get("chapter_number", 0),
            read_at=d.get("read_at", ""),
            progress=d.get("progress", 100),
        )
