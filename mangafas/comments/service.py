"""Comment lifecycle and moderation.

Visibility state machine::

    active --hide--> hidden --restore--> active
    active | hidden --delete--> deleted (terminal)

Votes are independent of visibility: a user is in at most one of
``likes`` / ``dislikes``.  A comment can be edited once, by its author.
"""

from __future__ import annotations

import logging
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.permissions import has_capability
from mangafas.comments.models import Comment, CommentStatus
from mangafas.comments.store import CommentStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.models import CommentHidden, CommentRestored
from mangafas.storage import Clock, new_id, utcnow
from mangafas.suspensions.engine import SuspensionEngine

logger = logging.getLogger(__name__)


class CommentService:
    """Add, edit, vote on and moderate comments."""

    def __init__(
        self,
        store: CommentStore,
        suspensions: SuspensionEngine,
        notifications: NotificationCenter,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._suspensions = suspensions
        self._notifications = notifications
        self._clock = clock

    # -- authoring -------------------------------------------------------------

    def can_post(self, user: User) -> bool:
        """True if *user* may write comments right now."""
        if not has_capability(user, "can_comment"):
            return False
        if self._suspensions.is_banned(user.id):
            return False
        return not self._suspensions.is_banned_from_commenting(user.id)

    def add_comment(
        self,
        content_id: str,
        author: User,
        body: str,
        chapter_id: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Optional[Comment]:
        """Post a comment or a reply. Returns the comment or ``None``."""
        if not body or not body.strip():
            return None
        if not self.can_post(author):
            logger.debug("%s may not comment", author.id)
            return None

        if parent_id is not None:
            parent = self._store.get(parent_id)
            if parent is None or parent.status is not CommentStatus.active:
                return None
            if parent.content_id != content_id or parent.chapter_id != chapter_id:
                return None
            # keep the thread one level deep
            if parent.parent_id is not None:
                parent_id = parent.parent_id

        now = self._clock().isoformat()
        comment = Comment(
            id=new_id("comment"),
            content_id=content_id,
            chapter_id=chapter_id,
            author_id=author.id,
            body=body.strip(),
            created_at=now,
            updated_at=now,
            parent_id=parent_id,
        )
        self._store.create(comment)
        logger.info("Comment %s added by %s on %s", comment.id, author.id, content_id)
        return comment

    def edit(self, comment_id: str, new_body: str, user: User) -> bool:
        """Edit a comment. Author only, active only, at most once."""
        if not new_body or not new_body.strip():
            return False

        def change(c: Comment) -> bool:
            if c.author_id != user.id or c.status is not CommentStatus.active or c.is_edited:
                return False
            c.body = new_body.strip()
            c.updated_at = self._clock().isoformat()
            c.is_edited = True
            return True

        return self._store.update(comment_id, change) is not None

    def delete(self, comment_id: str, actor: User) -> bool:
        """Soft-delete a comment, as its author or as a moderator."""
        is_moderator = has_capability(actor, "can_moderate_comments")

        def change(c: Comment) -> bool:
            if c.status is CommentStatus.deleted:
                return False
            is_author = c.author_id == actor.id
            if not is_author and not is_moderator:
                return False
            now = self._clock().isoformat()
            c.status = CommentStatus.deleted
            c.updated_at = now
            if not is_author:
                c.moderated_by = actor.id
                c.moderated_at = now
            return True

        deleted = self._store.update(comment_id, change)
        if deleted is None:
            return False
        logger.info("Comment %s deleted by %s", comment_id, actor.id)
        return True

    # -- moderation ------------------------------------------------------------

    def hide(self, comment_id: str, moderator: User, reason: str) -> bool:
        """Hide an active comment and tell its author why."""
        if not has_capability(moderator, "can_moderate_comments"):
            return False
        if not reason or not reason.strip():
            return False

        def change(c: Comment) -> bool:
            if c.status is not CommentStatus.active:
                return False
            now = self._clock().isoformat()
            c.status = CommentStatus.hidden
            c.moderated_by = moderator.id
            c.moderated_at = now
            c.moderation_reason = reason.strip()
            return True

        hidden = self._store.update(comment_id, change)
        if hidden is None:
            return False
        logger.info("Comment %s hidden by %s", comment_id, moderator.id)
        self._notifications.notify(
            hidden.author_id,
            CommentHidden(comment_id=comment_id, moderator_id=moderator.id, reason=hidden.moderation_reason),
            "Your comment was hidden",
            f"Your comment was hidden by a moderator. Reason: {hidden.moderation_reason}",
        )
        return True

    def restore(self, comment_id: str, moderator: User) -> bool:
        """Make a hidden comment visible again."""
        if not has_capability(moderator, "can_moderate_comments"):
            return False

        def change(c: Comment) -> bool:
            if c.status is not CommentStatus.hidden:
                return False
            c.status = CommentStatus.active
            c.moderated_by = moderator.id
            c.moderated_at = self._clock().isoformat()
            c.moderation_reason = ""
            return True

        restored = self._store.update(comment_id, change)
        if restored is None:
            return False
        logger.info("Comment %s restored by %s", comment_id, moderator.id)
        self._notifications.notify(
            restored.author_id,
            CommentRestored(comment_id=comment_id, moderator_id=moderator.id),
            "Your comment was restored",
            "Your comment has been restored and is visible to everyone again.",
        )
        return True

    # -- votes -----------------------------------------------------------------

    def toggle_like(self, comment_id: str, user: User) -> Optional[Comment]:
        def change(c: Comment) -> bool:
            if c.status is not CommentStatus.active:
                return False
            c.dislikes = [u for u in c.dislikes if u != user.id]
            if user.id in c.likes:
                c.likes = [u for u in c.likes if u != user.id]
            else:
                c.likes.append(user.id)
            return True

        return self._store.update(comment_id, change)

    def toggle_dislike(self, comment_id: str, user: User) -> Optional[Comment]:
        def change(c: Comment) -> bool:
            if c.status is not CommentStatus.active:
                return False
            c.likes = [u for u in c.likes if u != user.id]
            if user.id in c.dislikes:
                c.dislikes = [u for u in c.dislikes if u != user.id]
            else:
                c.dislikes.append(user.id)
            return True

        return self._store.update(comment_id, change)

    # -- queries ---------------------------------------------------------------

    def get(self, comment_id: str) -> Optional[Comment]:
        return self._store.get(comment_id)

    def top_level(self, content_id: str, chapter_id: Optional[str] = None) -> list[Comment]:
        """Visible top-level comments on a title or chapter, newest first."""
        comments = [
            c
            for c in self._store.all()
            if c.content_id == content_id
            and c.chapter_id == chapter_id
            and c.parent_id is None
            and c.status is CommentStatus.active
        ]
        return sorted(comments, key=lambda c: c.created_at, reverse=True)

    def replies_of(self, parent_id: str) -> list[Comment]:
        """Visible replies to a comment, oldest first."""
        replies = [
            c for c in self._store.all() if c.parent_id == parent_id and c.status is CommentStatus.active
        ]
        return sorted(replies, key=lambda c: c.created_at)

    def by_user(self, user_id: str) -> list[Comment]:
        comments = [c for c in self._store.all() if c.author_id == user_id]
        return sorted(comments, key=lambda c: c.created_at, reverse=True)

    def moderated(self) -> list[Comment]:
        """Hidden and deleted comments, most recently moderated first."""
        comments = [c for c in self._store.all() if c.status is not CommentStatus.active]
        return sorted(comments, key=lambda c: c.moderated_at or c.updated_at, reverse=True)

    def stats(self) -> dict:
        comments = self._store.all()
        return {
            "total": len(comments),
            "active": sum(1 for c in comments if c.status is CommentStatus.active),
            "hidden": sum(1 for c in comments if c.status is CommentStatus.hidden),
            "deleted": sum(1 for c in comments if c.status is CommentStatus.deleted),
            "reports": sum(len(c.report_ids) for c in comments),
        }
