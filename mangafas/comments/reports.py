"""Report queue for comments and users.

A reporter holds at most one open report per target.  Reports are filed
against a comment or a user and closed once, as ``resolved`` or
``dismissed``.
"""

from __future__ import annotations

import logging
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.permissions import has_capability
from mangafas.auth.store import UserStore
from mangafas.comments.models import CommentStatus, Report, ReportReason, ReportStatus, ReportTarget
from mangafas.comments.store import CommentStore, ReportStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.models import CommentReported, UserReported
from mangafas.storage import Clock, new_id, utcnow
from mangafas.suspensions.engine import SuspensionEngine

logger = logging.getLogger(__name__)

# Capability needed to close a report, by target kind.
RESOLVE_CAPABILITY = {
    ReportTarget.comment: "can_moderate_comments",
    ReportTarget.user: "can_administer",
}


class ReportDesk:
    """File, list and resolve reports."""

    def __init__(
        self,
        store: ReportStore,
        comments: CommentStore,
        users: UserStore,
        suspensions: SuspensionEngine,
        notifications: NotificationCenter,
        system_recipient_id: str,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._comments = comments
        self._users = users
        self._suspensions = suspensions
        self._notifications = notifications
        self._system_recipient_id = system_recipient_id
        self._clock = clock

    def _may_report(self, reporter: User) -> bool:
        if not has_capability(reporter, "can_comment"):
            return False
        return not self._suspensions.is_banned(reporter.id)

    def _file(
        self,
        target_kind: ReportTarget,
        target_id: str,
        reporter: User,
        reason: ReportReason | str,
        description: str,
    ) -> Optional[Report]:
        report = Report(
            id=new_id("report"),
            target_kind=target_kind,
            target_id=target_id,
            reporter_id=reporter.id,
            reason=ReportReason(reason),
            description=(description or "").strip(),
            created_at=self._clock().isoformat(),
        )
        if not self._store.create_unless_open(report):
            logger.debug("%s already has an open report on %s", reporter.id, target_id)
            return None
        return report

    # -- filing ----------------------------------------------------------------

    def report_comment(
        self,
        comment_id: str,
        reporter: User,
        reason: ReportReason | str,
        description: str = "",
    ) -> Optional[Report]:
        """Report a comment. ``None`` on a duplicate open report or missing comment."""
        if not self._may_report(reporter):
            return None
        comment = self._comments.get(comment_id)
        if comment is None or comment.status is CommentStatus.deleted:
            return None

        report = self._file(ReportTarget.comment, comment_id, reporter, reason, description)
        if report is None:
            return None

        def attach(c):
            if report.id in c.report_ids:
                return False
            c.report_ids.append(report.id)
            return True

        self._comments.update(comment_id, attach)
        logger.info("Comment %s reported by %s (%s)", comment_id, reporter.id, report.reason.value)
        self._notifications.notify_many(
            self._users.administrator_ids(self._system_recipient_id),
            CommentReported(comment_id=comment_id, report_id=report.id, reason=report.reason.value),
            "New comment report",
            f"A comment was reported for: {report.reason.label}",
        )
        return report

    def report_user(
        self,
        user_id: str,
        reporter: User,
        reason: ReportReason | str,
        description: str = "",
    ) -> Optional[Report]:
        """Report another user's behaviour."""
        if user_id == reporter.id or not self._may_report(reporter):
            return None
        target = self._users.get_user(user_id)
        if target is None:
            return None

        report = self._file(ReportTarget.user, user_id, reporter, reason, description)
        if report is None:
            return None

        logger.info("User %s reported by %s (%s)", user_id, reporter.id, report.reason.value)
        self._notifications.notify_many(
            self._users.administrator_ids(self._system_recipient_id),
            UserReported(reported_user_id=user_id, report_id=report.id, reason=report.reason.value),
            "New user report",
            f"{target.display_name} was reported for: {report.reason.label}",
        )
        return report

    # -- resolution --------------------------------------------------------------

    def resolve(
        self,
        report_id: str,
        resolver: User,
        status: ReportStatus | str = ReportStatus.resolved,
        notes: Optional[str] = None,
    ) -> bool:
        """Close a pending report as resolved or dismissed."""
        status = ReportStatus(status)
        if status is ReportStatus.pending:
            return False
        report = self._store.get(report_id)
        if report is None:
            return False
        if not has_capability(resolver, RESOLVE_CAPABILITY[report.target_kind]):
            return False

        closed = self._store.resolve(report_id, status, resolver.id, notes or "", self._clock())
        if closed is None:
            return False
        logger.info("Report %s %s by %s", report_id, status.value, resolver.id)
        return True

    # -- queries -----------------------------------------------------------------

    def get(self, report_id: str) -> Optional[Report]:
        return self._store.get(report_id)

    def list_pending(self, target_kind: ReportTarget | str | None = None) -> list[Report]:
        kind = ReportTarget(target_kind) if target_kind is not None else None
        return self._store.list(ReportStatus.pending, kind)

    def list_all(self) -> list[Report]:
        return self._store.list()

    def reports_for_comment(self, comment_id: str) -> list[Report]:
        comment = self._comments.get(comment_id)
        if comment is None:
            return []
        wanted = set(comment.report_ids)
        return [r for r in self._store.list(target_kind=ReportTarget.comment) if r.id in wanted]
