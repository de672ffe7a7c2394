"""File-based JSON storage for per-user notification inboxes."""

from __future__ import annotations

from pathlib import Path

from mangafas.notifications.models import Notification
from mangafas.storage import JsonCollection


class NotificationStore:
    """Storage path: ``<data_dir>/notifications.json`` -- list of notification dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._notifications = JsonCollection(Path(base_dir) / "notifications.json")

    def append(self, notification: Notification, cap: int) -> Notification:
        """Add to the recipient's inbox, evicting the oldest entries beyond *cap*."""
        with self._notifications.transaction() as records:
            records.append(notification.to_dict())
            mine = [r for r in records if r["recipient_id"] == notification.recipient_id]
            overflow = len(mine) - cap
            if overflow > 0:
                # records are appended in creation order, so the head is oldest
                evict = {r["id"] for r in mine[:overflow]}
                records[:] = [r for r in records if r["id"] not in evict]
        return notification

    def list_for(self, recipient_id: str) -> list[Notification]:
        """Return the inbox, newest first."""
        items = [
            Notification.from_dict(r)
            for r in self._notifications.load()
            if r.get("recipient_id") == recipient_id
        ]
        items = [n for n in items if n is not None]
        items.reverse()
        return items

    def mark_read(self, recipient_id: str, notification_id: str) -> bool:
        with self._notifications.transaction() as records:
            for r in records:
                if r["id"] == notification_id and r["recipient_id"] == recipient_id:
                    r["read"] = True
                    return True
        return False

    def mark_all_read(self, recipient_id: str) -> int:
        changed = 0
        with self._notifications.transaction() as records:
            for r in records:
                if r["recipient_id"] == recipient_id and not r.get("read", False):
                    r["read"] = True
                    changed += 1
        return changed

    def delete_for(self, recipient_id: str) -> int:
        with self._notifications.transaction() as records:
            original_len = len(records)
            records[:] = [r for r in records if r["recipient_id"] != recipient_id]
            return original_len - len(records)
