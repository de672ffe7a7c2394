"""File-based JSON storage for users.

Provides a DB-ready interface backed by ``users.json`` under the data dir.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from mangafas.auth.models import Role, User
from mangafas.auth.permissions import has_capability
from mangafas.storage import JsonCollection, utcnow


class UserStore:
    """File-based storage for users.

    Storage path: ``<data_dir>/users.json`` -- list of user dicts.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._users = JsonCollection(Path(base_dir) / "users.json")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _user_from_dict(d: dict) -> User:
        role_val = d.get("role", "member")
        try:
            role_val = Role(role_val)
        except ValueError:
            role_val = Role.member
        return User(
            id=d["id"],
            display_name=d.get("display_name", ""),
            email=d.get("email", ""),
            role=role_val,
            created_at=d.get("created_at", ""),
            last_login=d.get("last_login", ""),
        )

    @staticmethod
    def _user_to_dict(u: User) -> dict:
        return {
            "id": u.id,
            "display_name": u.display_name,
            "email": u.email,
            "role": u.role.value,
            "created_at": u.created_at,
            "last_login": u.last_login,
        }

    # ------------------------------------------------------------------
    # User CRUD
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> Optional[User]:
        """Persist a new user. Returns ``None`` if the id or email is taken."""
        with self._users.transaction() as users:
            for d in users:
                if d["id"] == user.id or d.get("email", "").lower() == user.email.lower():
                    return None
            users.append(self._user_to_dict(user))
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        d = self._users.find(user_id)
        return self._user_from_dict(d) if d else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        for d in self._users.load():
            if d.get("email", "").lower() == email.lower():
                return self._user_from_dict(d)
        return None

    def list_users(self) -> list[User]:
        return [self._user_from_dict(d) for d in self._users.load()]

    def search(self, query: str) -> list[User]:
        """Case-insensitive match on display name or email."""
        needle = query.lower()
        return [
            u
            for u in self.list_users()
            if needle in u.display_name.lower() or needle in u.email.lower()
        ]

    def list_by_role(self, role: Role) -> list[User]:
        return [u for u in self.list_users() if u.role == role]

    def ids_with_capability(self, capability: str) -> list[str]:
        return [u.id for u in self.list_users() if has_capability(u, capability)]

    def administrator_ids(self, fallback: str) -> list[str]:
        """Ids of every administrator, or ``[fallback]`` when there are none."""
        return self.ids_with_capability("can_administer") or [fallback]

    def update_user_role(self, user_id: str, role: Role) -> Optional[tuple[Role, User]]:
        """Update a user's role. Returns ``(old_role, updated_user)`` or None."""
        with self._users.transaction() as users:
            for d in users:
                if d["id"] == user_id:
                    old = self._user_from_dict(d).role
                    d["role"] = Role(role).value
                    return old, self._user_from_dict(d)
        return None

    def touch_login(self, user_id: str) -> Optional[User]:
        with self._users.transaction() as users:
            for d in users:
                if d["id"] == user_id:
                    d["last_login"] = utcnow().isoformat()
                    return self._user_from_dict(d)
        return None

    def delete_user(self, user_id: str) -> bool:
        with self._users.transaction() as users:
            original_len = len(users)
            users[:] = [d for d in users if d["id"] != user_id]
            return len(users) < original_len
