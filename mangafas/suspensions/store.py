"""File-based JSON storage for suspensions.

Every method that reads the "active" state first retires temporary
suspensions whose expiry has passed, inside the same locked transaction,
so no caller ever observes an expired suspension as active.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from mangafas.storage import JsonCollection
from mangafas.suspensions.models import SYSTEM_ACTOR, Suspension, SuspensionKind


def _expire_due(
    records: list[dict],
    now: datetime,
    user_id: Optional[str] = None,
    kind: Optional[SuspensionKind] = None,
) -> list[Suspension]:
    expired = []
    for d in records:
        if not d.get("active"):
            continue
        if user_id is not None and d["user_id"] != user_id:
            continue
        if kind is not None and d.get("kind") != kind.value:
            continue
        s = Suspension.from_dict(d)
        if s.is_expired(now):
            d["active"] = False
            d["lifted_by"] = SYSTEM_ACTOR
            d["lifted_at"] = now.isoformat()
            expired.append(Suspension.from_dict(d))
    return expired


def _active(records: list[dict], user_id: str, kind: SuspensionKind) -> Optional[dict]:
    for d in records:
        if d["user_id"] == user_id and d.get("kind") == kind.value and d.get("active"):
            return d
    return None


class SuspensionStore:
    """Storage path: ``<data_dir>/suspensions.json`` -- list of suspension dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._suspensions = JsonCollection(Path(base_dir) / "suspensions.json")

    def active_for(
        self, user_id: str, kind: SuspensionKind, now: datetime
    ) -> tuple[Optional[Suspension], list[Suspension]]:
        """Return ``(active_suspension, just_expired)`` for one user and kind."""
        with self._suspensions.transaction() as records:
            expired = _expire_due(records, now, user_id, kind)
            d = _active(records, user_id, kind)
            return (Suspension.from_dict(d) if d else None), expired

    def insert_unless_active(
        self, suspension: Suspension, now: datetime
    ) -> tuple[bool, list[Suspension]]:
        """Atomically add *suspension* if the user has no active one of its kind."""
        with self._suspensions.transaction() as records:
            expired = _expire_due(records, now, suspension.user_id, suspension.kind)
            if _active(records, suspension.user_id, suspension.kind) is not None:
                return False, expired
            records.append(suspension.to_dict())
            return True, expired

    def lift_active(
        self, user_id: str, kind: SuspensionKind, actor: str, now: datetime
    ) -> tuple[Optional[Suspension], list[Suspension]]:
        """Atomically deactivate the user's active suspension of *kind*."""
        with self._suspensions.transaction() as records:
            expired = _expire_due(records, now, user_id, kind)
            d = _active(records, user_id, kind)
            if d is None:
                return None, expired
            d["active"] = False
            d["lifted_by"] = actor
            d["lifted_at"] = now.isoformat()
            return Suspension.from_dict(d), expired

    def list_active(
        self, kind: Optional[SuspensionKind], now: datetime
    ) -> tuple[list[Suspension], list[Suspension]]:
        with self._suspensions.transaction() as records:
            expired = _expire_due(records, now, kind=kind)
            active = [
                Suspension.from_dict(d)
                for d in records
                if d.get("active") and (kind is None or d.get("kind") == kind.value)
            ]
            return active, expired

    def history(self, user_id: str) -> list[Suspension]:
        return [Suspension.from_dict(d) for d in self._suspensions.load() if d["user_id"] == user_id]

    def delete_for(self, user_id: str) -> int:
        with self._suspensions.transaction() as records:
            original_len = len(records)
            records[:] = [d for d in records if d["user_id"] != user_id]
            return original_len - len(records)
