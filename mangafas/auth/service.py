"""Account lifecycle: registration, rank changes, removal and activity stats."""

from __future__ import annotations

import logging
from typing import Optional

from mangafas.auth.models import Role, User, UserStats
from mangafas.auth.permissions import has_capability
from mangafas.auth.store import UserStore
from mangafas.comments.models import CommentStatus
from mangafas.comments.store import CommentStore, ReportStore
from mangafas.content.catalog import JsonCatalog
from mangafas.content.models import ReviewStatus
from mangafas.content.store import PendingContentStore
from mangafas.library.store import FavoriteStore, HistoryStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.models import NewUserRegistration, RankChanged
from mangafas.storage import Clock, new_id, utcnow
from mangafas.suspensions.store import SuspensionStore

logger = logging.getLogger(__name__)

ACCOUNT_REMOVED_NOTE = "Submitter account removed"


class AccountService:
    """Operations on user accounts that touch more than the user record."""

    def __init__(
        self,
        users: UserStore,
        notifications: NotificationCenter,
        suspensions: SuspensionStore,
        comments: CommentStore,
        reports: ReportStore,
        pending: PendingContentStore,
        favorites: FavoriteStore,
        history: HistoryStore,
        catalog: JsonCatalog,
        system_recipient_id: str,
        owner_name: str = "Site Owner",
        owner_email: str = "owner@mangafas.local",
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._notifications = notifications
        self._suspensions = suspensions
        self._comments = comments
        self._reports = reports
        self._pending = pending
        self._favorites = favorites
        self._history = history
        self._catalog = catalog
        self._system_recipient_id = system_recipient_id
        self._owner_name = owner_name
        self._owner_email = owner_email
        self._clock = clock

    def administrator_ids(self) -> list[str]:
        return self._users.administrator_ids(self._system_recipient_id)

    def ensure_owner(self) -> Optional[User]:
        """Seed the owner account if no administrator exists yet.

        Returns the created owner, or ``None`` when an administrator was
        already present.
        """
        if self._users.ids_with_capability("can_administer"):
            return None
        existing = self._users.get_user(self._system_recipient_id)
        if existing is not None:
            _, owner = self._users.update_user_role(existing.id, Role.owner)
            logger.info("Promoted %s to owner", owner.id)
            return owner
        now = self._clock().isoformat()
        owner = self._users.create_user(
            User(
                id=self._system_recipient_id,
                display_name=self._owner_name,
                email=self._owner_email,
                role=Role.owner,
                created_at=now,
            )
        )
        if owner is not None:
            logger.info("Seeded owner account %s", owner.id)
        return owner

    def register(self, display_name: str, email: str) -> Optional[User]:
        """Create a ``member`` account. ``None`` if the email is taken."""
        display_name = (display_name or "").strip()
        email = (email or "").strip()
        if not display_name or not email:
            return None
        user = self._users.create_user(
            User(
                id=new_id("user"),
                display_name=display_name,
                email=email,
                created_at=self._clock().isoformat(),
            )
        )
        if user is None:
            return None

        logger.info("Registered %s (%s)", user.id, user.email)
        self._notifications.notify_many(
            self.administrator_ids(),
            NewUserRegistration(user_id=user.id, display_name=user.display_name, email=user.email),
            "New user registered",
            f"{user.display_name} ({user.email}) just joined",
        )
        return user

    def change_role(self, target_id: str, new_role: Role | str, acting_user: User) -> Optional[User]:
        """Set *target_id*'s rank. Requires ``can_administer``."""
        if not has_capability(acting_user, "can_administer"):
            return None
        new_role = Role(new_role)
        result = self._users.update_user_role(target_id, new_role)
        if result is None:
            return None
        old_role, user = result

        logger.info("%s changed role of %s: %s -> %s", acting_user.id, target_id, old_role.value, new_role.value)
        self._notifications.notify(
            target_id,
            RankChanged(old_role=old_role.value, new_role=new_role.value, changed_by=acting_user.id),
            "Your rank has changed",
            f"Your rank changed from {old_role.label} to {new_role.label}",
        )
        return user

    def delete_user(self, target_id: str, acting_user: User) -> bool:
        """Remove an account and clean up everything that references it."""
        if not has_capability(acting_user, "can_administer"):
            return False
        if target_id == acting_user.id:
            return False
        if not self._users.delete_user(target_id):
            return False

        now = self._clock()
        cleared = self._notifications.clear(target_id)
        bans = self._suspensions.delete_for(target_id)
        reports = self._reports.delete_open_by(target_id)
        comments = self._comments.scrub_user(target_id, now)
        pending = self._pending.reject_all_from(target_id, acting_user.id, ACCOUNT_REMOVED_NOTE, now)
        shelf = self._favorites.delete_for(target_id) + self._history.delete_for(target_id)
        logger.info(
            "Deleted %s: %d notifications, %d suspensions, %d reports, %d comments, %d submissions, %d library entries",
            target_id, cleared, bans, reports, comments, pending, shelf,
        )
        return True

    def user_stats(self, user_id: str) -> Optional[UserStats]:
        """Count a user's shelf, comments and uploads. ``None`` if unknown."""
        if self._users.get_user(user_id) is None:
            return None
        history = self._history.list_for(user_id)
        titles, chapters = self._catalog.uploads_by(user_id)
        return UserStats(
            user_id=user_id,
            favorites=len(self._favorites.list_for(user_id)),
            reading_history=len(history),
            titles_read=len({h.title_id for h in history}),
            chapters_read=len({h.chapter_id for h in history}),
            comments_written=sum(
                1 for c in self._comments.all()
                if c.author_id == user_id and c.status is not CommentStatus.deleted
            ),
            titles_uploaded=titles,
            chapters_uploaded=chapters,
            submissions_pending=sum(
                1 for p in self._pending.list(ReviewStatus.pending) if p.submitted_by == user_id
            ),
        )
