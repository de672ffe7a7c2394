"""Wiring of stores and services for one data directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.service import AccountService
from mangafas.auth.store import UserStore
from mangafas.comments.reports import ReportDesk
from mangafas.comments.service import CommentService
from mangafas.comments.store import CommentStore, ReportStore
from mangafas.config import Settings, get_settings
from mangafas.content.catalog import JsonCatalog
from mangafas.content.pipeline import ContentPipeline
from mangafas.content.store import PendingContentStore
from mangafas.library.service import LibraryService
from mangafas.library.store import FavoriteStore, HistoryStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.store import NotificationStore
from mangafas.storage import Clock, utcnow
from mangafas.suspensions.engine import SuspensionEngine
from mangafas.suspensions.store import SuspensionStore


class Platform:
    """Every store and service, built against the same data directory.

    Parameters
    ----------
    settings:
        Resolved settings; defaults to :func:`mangafas.config.get_settings`.
    data_dir:
        Overrides ``settings.data_dir`` (handy in tests).
    clock:
        Source of "now" for every service.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        data_dir: str | Path | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.settings = settings or get_settings()
        self.data_dir = Path(data_dir) if data_dir is not None else self.settings.data_dir
        self.clock = clock
        system_id = self.settings.system_recipient_id

        self.users = UserStore(self.data_dir)
        self.comment_store = CommentStore(self.data_dir)
        self.report_store = ReportStore(self.data_dir)
        self.pending_store = PendingContentStore(self.data_dir)
        self.suspension_store = SuspensionStore(self.data_dir)
        self.catalog = JsonCatalog(self.data_dir, clock)
        self.favorite_store = FavoriteStore(self.data_dir)
        self.history_store = HistoryStore(self.data_dir)

        self.notifications = NotificationCenter(
            NotificationStore(self.data_dir), self.settings.notification_cap, clock
        )
        self.suspensions = SuspensionEngine(self.suspension_store, self.users, self.notifications, clock)
        self.accounts = AccountService(
            self.users,
            self.notifications,
            self.suspension_store,
            self.comment_store,
            self.report_store,
            self.pending_store,
            self.favorite_store,
            self.history_store,
            self.catalog,
            system_id,
            owner_name=self.settings.owner_name,
            owner_email=self.settings.owner_email,
            clock=clock,
        )
        self.content = ContentPipeline(
            self.pending_store, self.catalog, self.users, self.suspensions, self.notifications, system_id, clock
        )
        self.library = LibraryService(self.favorite_store, self.history_store, clock)
        self.comments = CommentService(self.comment_store, self.suspensions, self.notifications, clock)
        self.reports = ReportDesk(
            self.report_store,
            self.comment_store,
            self.users,
            self.suspensions,
            self.notifications,
            system_id,
            clock,
        )

    def user(self, user_id: str) -> Optional[User]:
        return self.users.get_user(user_id)
