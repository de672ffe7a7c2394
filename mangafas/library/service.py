"""Favorites and reading history for one reader at a time."""

from __future__ import annotations

import logging
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.permissions import has_capability
from mangafas.library.models import Favorite, HistoryEntry
from mangafas.library.store import FavoriteStore, HistoryStore
from mangafas.storage import Clock, new_id, utcnow

logger = logging.getLogger(__name__)


class LibraryService:
    """A user's favorite titles and the chapters they have read."""

    def __init__(self, favorites: FavoriteStore, history: HistoryStore, clock: Clock = utcnow) -> None:
        self._favorites = favorites
        self._history = history
        self._clock = clock

    # -- favorites -------------------------------------------------------------

    def add_favorite(self, user: User, title_id: str) -> bool:
        """Favorite *title_id*. False without ``can_favorite`` or if already there."""
        if not has_capability(user, "can_favorite") or not title_id:
            return False
        added = self._favorites.add(
            Favorite(user_id=user.id, title_id=title_id, added_at=self._clock().isoformat())
        )
        if added:
            logger.debug("%s favorited %s", user.id, title_id)
        return added

    def remove_favorite(self, user: User, title_id: str) -> bool:
        if not has_capability(user, "can_favorite"):
            return False
        return self._favorites.remove(user.id, title_id)

    def is_favorited(self, user_id: str, title_id: str) -> bool:
        return self._favorites.exists(user_id, title_id)

    def favorites_of(self, user_id: str) -> list[Favorite]:
        return self._favorites.list_for(user_id)

    # -- reading history -------------------------------------------------------

    def record_read(
        self,
        user: User,
        title_id: str,
        chapter_id: str,
        chapter_number: float,
        progress: int = 100,
    ) -> Optional[HistoryEntry]:
        """Record that *user* read a chapter.

        Re-reading a chapter moves its entry to the top. A favorite for the
        same title gets its ``last_read`` bumped. Returns ``None`` for a
        blank title or chapter, or a progress outside ``0..100``.
        """
        if not title_id or not chapter_id or not 0 <= progress <= 100:
            return None
        now = self._clock()
        entry = self._history.record(
            HistoryEntry(
                id=new_id("history"),
                user_id=user.id,
                title_id=title_id,
                chapter_id=chapter_id,
                chapter_number=chapter_number,
                read_at=now.isoformat(),
                progress=progress,
            )
        )
        self._favorites.touch_last_read(user.id, title_id, now)
        return entry

    def history_of(self, user_id: str, limit: Optional[int] = None) -> list[HistoryEntry]:
        items = self._history.list_for(user_id)
        return items[:limit] if limit is not None else items
