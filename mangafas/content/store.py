"""File-based JSON storage for content submissions awaiting review."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from mangafas.content.models import PendingContent, ReviewStatus
from mangafas.storage import JsonCollection


class PendingContentStore:
    """Storage path: ``<data_dir>/pending.json`` -- list of submission dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._pending = JsonCollection(Path(base_dir) / "pending.json")

    def create(self, item: PendingContent) -> PendingContent:
        with self._pending.transaction() as records:
            records.append(item.to_dict())
        return item

    def get(self, pending_id: str) -> Optional[PendingContent]:
        d = self._pending.find(pending_id)
        return PendingContent.from_dict(d) if d else None

    def list(self, status: Optional[ReviewStatus] = None) -> list[PendingContent]:
        items = [PendingContent.from_dict(d) for d in self._pending.load()]
        if status is not None:
            items = [i for i in items if i.status is ReviewStatus(status)]
        return items

    def decide(
        self,
        pending_id: str,
        status: ReviewStatus,
        reviewer_id: str,
        notes: str,
        now: datetime,
        publish: Optional[Callable[[PendingContent], str]] = None,
    ) -> Optional[PendingContent]:
        """Move a pending item to *status*. Returns it, or None if not pending.

        *publish* runs inside the transaction; if it raises, the item stays
        pending and the exception propagates.
        """
        with self._pending.transaction() as records:
            for d in records:
                if d["id"] != pending_id:
                    continue
                if d.get("status") != ReviewStatus.pending.value:
                    return None  # Already decided
                item = PendingContent.from_dict(d)
                if publish is not None:
                    d["published_id"] = publish(item)
                d["status"] = ReviewStatus(status).value
                d["reviewed_by"] = reviewer_id
                d["reviewed_at"] = now.isoformat()
                d["review_notes"] = notes
                return PendingContent.from_dict(d)
        return None

    def reject_all_from(self, user_id: str, reviewer_id: str, notes: str, now: datetime) -> int:
        """Reject every pending submission by *user_id* (account removal)."""
        count = 0
        with self._pending.transaction() as records:
            for d in records:
                if d.get("submitted_by") == user_id and d.get("status") == ReviewStatus.pending.value:
                    d["status"] = ReviewStatus.rejected.value
                    d["reviewed_by"] = reviewer_id
                    d["reviewed_at"] = now.isoformat()
                    d["review_notes"] = notes
                    count += 1
        return count
