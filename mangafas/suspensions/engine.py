"""Suspension engine: site bans and comment bans.

Each kind is an independent state machine per user::

    none --issue--> active (temporary | permanent) --lift--> none
                    active temporary --expiry observed--> none

Expiry is evaluated lazily on every read; the first read that sees an
expired suspension deactivates it with ``lifted_by="system"`` and does not
notify the user.  Issuing a second suspension while one is active fails.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from mangafas.auth.models import User
from mangafas.auth.permissions import has_capability
from mangafas.auth.store import UserStore
from mangafas.notifications.center import NotificationCenter
from mangafas.notifications.models import Banned, Unbanned
from mangafas.storage import Clock, new_id, utcnow
from mangafas.suspensions.models import Duration, Suspension, SuspensionKind
from mangafas.suspensions.store import SuspensionStore

logger = logging.getLogger(__name__)

# Longest temporary suspension, in days.
MAX_SUSPENSION_DAYS = 36500

# Capability an actor needs to issue or lift each kind.
_REQUIRED_CAPABILITY = {
    SuspensionKind.site: "can_administer",
    SuspensionKind.comment: "can_moderate_comments",
}


class SuspensionEngine:
    """Issue, lift and evaluate suspensions."""

    def __init__(
        self,
        store: SuspensionStore,
        users: UserStore,
        notifications: NotificationCenter,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._users = users
        self._notifications = notifications
        self._clock = clock

    def _log_expired(self, expired: list[Suspension]) -> None:
        for s in expired:
            logger.info("Suspension %s (%s) for %s expired", s.id, s.kind.value, s.user_id)

    # -- commands ------------------------------------------------------------

    def issue(
        self,
        target_id: str,
        issuer: User,
        reason: str,
        duration: Duration | str,
        days: Optional[int] = None,
        kind: SuspensionKind | str = SuspensionKind.site,
    ) -> Optional[Suspension]:
        """Suspend *target_id*. Returns the new suspension or ``None``.

        Fails when the issuer lacks the capability for *kind*, the reason is
        blank, a temporary suspension has no ``days`` in
        ``1..MAX_SUSPENSION_DAYS``, the target is unknown, or an active
        suspension of the same kind already exists.
        """
        kind = SuspensionKind(kind)
        duration = Duration(duration)
        if not has_capability(issuer, _REQUIRED_CAPABILITY[kind]):
            logger.debug("%s may not issue %s suspensions", issuer.id, kind.value)
            return None
        if not reason or not reason.strip():
            return None
        if duration is Duration.temporary and (days is None or not 0 < days <= MAX_SUSPENSION_DAYS):
            return None
        if self._users.get_user(target_id) is None:
            return None

        now = self._clock()
        suspension = Suspension(
            id=new_id("ban"),
            user_id=target_id,
            kind=kind,
            issued_by=issuer.id,
            reason=reason.strip(),
            duration=duration,
            issued_at=now.isoformat(),
            expires_at=(now + timedelta(days=days)).isoformat() if duration is Duration.temporary else "",
        )
        created, expired = self._store.insert_unless_active(suspension, now)
        self._log_expired(expired)
        if not created:
            logger.debug("%s already has an active %s suspension", target_id, kind.value)
            return None

        logger.info(
            "%s suspension %s issued to %s by %s (%s)",
            kind.value, suspension.id, target_id, issuer.id, duration.value,
        )
        span = "permanently" if duration is Duration.permanent else f"for {days} days"
        if kind is SuspensionKind.site:
            title = "You have been banned from the site"
            message = f"You have been banned {span}. Reason: {suspension.reason}"
        else:
            title = "You have been banned from commenting"
            message = f"You can no longer post comments {span}. Reason: {suspension.reason}"
        self._notifications.notify(
            target_id,
            Banned(
                suspension_id=suspension.id,
                kind=kind.value,
                duration=duration.value,
                reason=suspension.reason,
                issued_by=issuer.id,
                expires_at=suspension.expires_at,
            ),
            title,
            message,
        )
        return suspension

    def lift(
        self,
        target_id: str,
        actor: User,
        kind: SuspensionKind | str = SuspensionKind.site,
    ) -> bool:
        """Lift the active suspension of *kind*. Returns False if there is none."""
        kind = SuspensionKind(kind)
        if not has_capability(actor, _REQUIRED_CAPABILITY[kind]):
            return False
        lifted, expired = self._store.lift_active(target_id, kind, actor.id, self._clock())
        self._log_expired(expired)
        if lifted is None:
            return False

        logger.info("%s suspension %s for %s lifted by %s", kind.value, lifted.id, target_id, actor.id)
        if kind is SuspensionKind.site:
            title = "Your ban has been lifted"
            message = "Your account ban has been lifted. You can use the site normally again."
        else:
            title = "Your comment ban has been lifted"
            message = "You can post comments again."
        self._notifications.notify(
            target_id,
            Unbanned(suspension_id=lifted.id, kind=kind.value, lifted_by=actor.id),
            title,
            message,
        )
        return True

    # -- queries -------------------------------------------------------------

    def check(
        self, target_id: str, kind: SuspensionKind | str = SuspensionKind.site
    ) -> Optional[Suspension]:
        """Return the user's active suspension of *kind*, or ``None``."""
        active, expired = self._store.active_for(target_id, SuspensionKind(kind), self._clock())
        self._log_expired(expired)
        return active

    def is_banned(self, user_id: str) -> bool:
        return self.check(user_id, SuspensionKind.site) is not None

    def is_banned_from_commenting(self, user_id: str) -> bool:
        return self.check(user_id, SuspensionKind.comment) is not None

    def list_active(self, kind: SuspensionKind | str | None = None) -> list[Suspension]:
        active, expired = self._store.list_active(
            SuspensionKind(kind) if kind is not None else None, self._clock()
        )
        self._log_expired(expired)
        return active

    def history(self, user_id: str) -> list[Suspension]:
        return self._store.history(user_id)
