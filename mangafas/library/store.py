"""File-based JSON storage for favorites and reading history."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from mangafas.library.models import HISTORY_LIMIT, Favorite, HistoryEntry
from mangafas.storage import JsonCollection


class FavoriteStore:
    """Storage path: ``<data_dir>/favorites.json`` -- list of favorite dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._favorites = JsonCollection(Path(base_dir) / "favorites.json")

    def add(self, favorite: Favorite) -> bool:
        """Add unless the user already favorited the title."""
        with self._favorites.transaction() as records:
            for r in records:
                if r["user_id"] == favorite.user_id and r["title_id"] == favorite.title_id:
                    return False
            records.append(favorite.to_dict())
        return True

    def remove(self, user_id: str, title_id: str) -> bool:
        with self._favorites.transaction() as records:
            original_len = len(records)
            records[:] = [
                r for r in records if not (r["user_id"] == user_id and r["title_id"] == title_id)
            ]
            return len(records) < original_len

    def exists(self, user_id: str, title_id: str) -> bool:
        return any(
            r["user_id"] == user_id and r["title_id"] == title_id for r in self._favorites.load()
        )

    def list_for(self, user_id: str) -> list[Favorite]:
        """Return the user's favorites, most recently added first."""
        items = [Favorite.from_dict(r) for r in self._favorites.load() if r["user_id"] == user_id]
        items.reverse()
        return items

    def touch_last_read(self, user_id: str, title_id: str, now: datetime) -> bool:
        with self._favorites.transaction() as records:
            for r in records:
                if r["user_id"] == user_id and r["title_id"] == title_id:
                    r["last_read"] = now.isoformat()
                    return True
        return False

    def delete_for(self, user_id: str) -> int:
        with self._favorites.transaction() as records:
            original_len = len(records)
            records[:] = [r for r in records if r["user_id"] != user_id]
            return original_len - len(records)


class HistoryStore:
    """Storage path: ``<data_dir>/reading_history.json`` -- list of entry dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._history = JsonCollection(Path(base_dir) / "reading_history.json")

    def record(self, entry: HistoryEntry, limit: int = HISTORY_LIMIT) -> HistoryEntry:
        """Append *entry*, replacing the user's entry for the same chapter.

        Only the newest *limit* entries per user are kept.
        """
        with self._history.transaction() as records:
            records[:] = [
                r for r in records
                if not (r["user_id"] == entry.user_id and r["chapter_id"] == entry.chapter_id)
            ]
            records.append(entry.to_dict())
            mine = [r for r in records if r["user_id"] == entry.user_id]
            overflow = len(mine) - limit
            if overflow > 0:
                evict = {r["id"] for r in mine[:overflow]}
                records[:] = [r for r in records if r["id"] not in evict]
        return entry

    def list_for(self, user_id: str) -> list[HistoryEntry]:
        """Return the user's history, most recent read first."""
        items = [HistoryEntry.from_dict(r) for r in self._history.load() if r["user_id"] == user_id]
        items.reverse()
        return items

    def delete_for(self, user_id: str) -> int:
        with self._history.transaction() as records:
            original_len = len(records)
            records[:] = [r for r in records if r["user_id"] != user_id]
            return original_len - len(records)
