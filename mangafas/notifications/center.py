"""Notification fan-out.

Every other component reports its state transitions here.  Delivery is
best-effort: a failed inbox write is logged and swallowed so the transition
that triggered it still stands.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from mangafas.errors import StoreUnavailableError
from mangafas.notifications.models import Notification, NotificationPayload
from mangafas.notifications.store import NotificationStore
from mangafas.storage import Clock, new_id, utcnow

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Per-user inboxes with a fixed cap."""

    def __init__(self, store: NotificationStore, cap: int = 50, clock: Clock = utcnow) -> None:
        self._store = store
        self._cap = max(1, cap)
        self._clock = clock

    @property
    def cap(self) -> int:
        return self._cap

    # -- producers ---------------------------------------------------------

    def notify(
        self,
        recipient_id: str,
        payload: NotificationPayload,
        title: str,
        message: str,
    ) -> Optional[Notification]:
        """Append a notification to *recipient_id*'s inbox.

        Returns the notification, or ``None`` if the inbox could not be written.
        """
        notification = Notification(
            id=new_id("notification"),
            recipient_id=recipient_id,
            payload=payload,
            title=title,
            message=message,
            created_at=self._clock().isoformat(),
        )
        try:
            self._store.append(notification, self._cap)
        except StoreUnavailableError:
            logger.warning(
                "Dropped %s notification for %s", payload.type.value, recipient_id, exc_info=True
            )
            return None
        logger.debug("Notified %s (%s)", recipient_id, payload.type.value)
        return notification

    def notify_many(
        self,
        recipient_ids: Iterable[str],
        payload: NotificationPayload,
        title: str,
        message: str,
    ) -> list[Notification]:
        sent = []
        for recipient_id in dict.fromkeys(recipient_ids):
            notification = self.notify(recipient_id, payload, title, message)
            if notification is not None:
                sent.append(notification)
        return sent

    # -- inbox -------------------------------------------------------------

    def list(
        self,
        recipient_id: str,
        unread_only: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Notification]:
        """Return the inbox newest first, optionally paged."""
        items = self._store.list_for(recipient_id)
        if unread_only:
            items = [n for n in items if not n.read]
        items = items[max(0, offset):]
        if limit is not None:
            items = items[: max(0, limit)]
        return items

    def mark_read(self, recipient_id: str, notification_id: str) -> bool:
        return self._store.mark_read(recipient_id, notification_id)

    def mark_all_read(self, recipient_id: str) -> int:
        return self._store.mark_all_read(recipient_id)

    def unread_count(self, recipient_id: str) -> int:
        return sum(1 for n in self._store.list_for(recipient_id) if not n.read)

    def clear(self, recipient_id: str) -> int:
        return self._store.delete_for(recipient_id)
