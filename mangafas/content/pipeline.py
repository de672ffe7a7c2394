"""Content moderation pipeline.

Uploads are routed by rank: apprentice and senior contributors go through
review (``pending -> approved | rejected``, one shot), group leaders and
above publish straight to the catalog.
"""

from __future__ import annotations

import logging
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.permissions import get_permissions, has_capability, requires_approval
from mangafas.auth.store import UserStore
from mangafas.content.catalog import Catalog, CatalogError
from mangafas.content.models import ContentKind, PendingContent, ReviewStatus
from mangafas.content.store import PendingContentStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.models import (
    ContentApproved,
    ContentPendingApproval,
    ContentRejected,
    ContentSubmitted,
)
from mangafas.storage import Clock, new_id, utcnow
from mangafas.suspensions.engine import SuspensionEngine

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_NOTE = "No reason given"


class ContentPipeline:
    """Submission, review and publication of titles and chapters."""

    def __init__(
        self,
        store: PendingContentStore,
        catalog: Catalog,
        users: UserStore,
        suspensions: SuspensionEngine,
        notifications: NotificationCenter,
        system_recipient_id: str,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._users = users
        self._suspensions = suspensions
        self._notifications = notifications
        self._system_recipient_id = system_recipient_id
        self._clock = clock

    # -- submission ----------------------------------------------------------

    def submit(self, kind: ContentKind | str, payload: dict, submitter: User) -> Optional[str]:
        """Route an upload by the submitter's rank.

        Returns the pending id for reviewed ranks, the published catalog id
        for trusted ranks, or ``None`` if the submitter may not upload.
        """
        kind = ContentKind(kind)
        if not get_permissions(submitter.role).can_upload:
            return None
        if self._suspensions.is_banned(submitter.id):
            return None
        if requires_approval(submitter):
            item = self.submit_for_review(kind, payload, submitter)
            return item.id if item else None

        try:
            published_id = self._catalog.materialize(kind, dict(payload, uploaded_by=submitter.id))
        except CatalogError as exc:
            logger.debug("Direct publish by %s refused: %s", submitter.id, exc)
            return None
        logger.info("%s %s published directly by %s", kind.value, published_id, submitter.id)
        return published_id

    def submit_for_review(
        self, kind: ContentKind | str, payload: dict, submitter: User
    ) -> Optional[PendingContent]:
        """Queue a submission for administrator review.

        Only ranks whose uploads require approval get a pending item; trusted
        ranks go through :meth:`submit` instead.
        """
        kind = ContentKind(kind)
        if not requires_approval(submitter):
            return None
        if self._suspensions.is_banned(submitter.id):
            return None

        item = self._store.create(
            PendingContent(
                id=new_id("pending"),
                kind=kind,
                submitted_by=submitter.id,
                submitted_at=self._clock().isoformat(),
                payload=dict(payload),
            )
        )
        logger.info("%s submission %s queued by %s", kind.value, item.id, submitter.id)

        self._notifications.notify_many(
            self._users.administrator_ids(self._system_recipient_id),
            ContentPendingApproval(pending_id=item.id, kind=kind.value, submitted_by=submitter.id),
            "New content awaiting approval",
            f'{submitter.display_name} submitted {kind.value} "{item.display_name}" for review',
        )
        self._notifications.notify(
            submitter.id,
            ContentSubmitted(pending_id=item.id, kind=kind.value),
            "Submission received",
            f'Your {kind.value} "{item.display_name}" was submitted and is awaiting review',
        )
        return item

    # -- review --------------------------------------------------------------

    def approve(self, pending_id: str, reviewer: User, notes: Optional[str] = None) -> bool:
        """Approve and publish a pending item. False if not pending."""
        if not has_capability(reviewer, "can_administer"):
            return False
        try:
            item = self._store.decide(
                pending_id,
                ReviewStatus.approved,
                reviewer.id,
                notes or "",
                self._clock(),
                publish=lambda p: self._catalog.materialize(p.kind, dict(p.payload, uploaded_by=p.submitted_by)),
            )
        except CatalogError as exc:
            logger.warning("Submission %s could not be published: %s", pending_id, exc)
            return False
        if item is None:
            return False

        logger.info("Submission %s approved by %s as %s", item.id, reviewer.id, item.published_id)
        self._notifications.notify(
            item.submitted_by,
            ContentApproved(
                pending_id=item.id,
                kind=item.kind.value,
                published_id=item.published_id,
                reviewed_by=reviewer.id,
            ),
            "Content approved",
            f'Your {item.kind.value} "{item.display_name}" was approved and is now published',
        )
        return True

    def reject(self, pending_id: str, reviewer: User, notes: Optional[str] = None) -> bool:
        """Reject a pending item. False if not pending."""
        if not has_capability(reviewer, "can_administer"):
            return False
        item = self._store.decide(
            pending_id, ReviewStatus.rejected, reviewer.id, notes or "", self._clock()
        )
        if item is None:
            return False

        logger.info("Submission %s rejected by %s", item.id, reviewer.id)
        reason = notes or DEFAULT_REJECTION_NOTE
        self._notifications.notify(
            item.submitted_by,
            ContentRejected(
                pending_id=item.id,
                kind=item.kind.value,
                reviewed_by=reviewer.id,
                notes=notes or "",
            ),
            "Content rejected",
            f'Your {item.kind.value} "{item.display_name}" was rejected. Reason: {reason}',
        )
        return True

    # -- queries -------------------------------------------------------------

    def get(self, pending_id: str) -> Optional[PendingContent]:
        return self._store.get(pending_id)

    def list_pending(self) -> list[PendingContent]:
        return self._store.list(ReviewStatus.pending)

    def list_all(self, status: ReviewStatus | str | None = None) -> list[PendingContent]:
        return self._store.list(ReviewStatus(status) if status else None)

    def pending_count(self) -> int:
        return len(self.list_pending())
