"""Role-based access control.

Role hierarchy: owner > moderator > group_leader > senior_contributor
> apprentice_contributor > member.  Every role maps to a fixed
:class:`CapabilitySet`; higher ranks never lose a capability a lower rank
holds.  The two lowest upload-capable ranks upload through review.
"""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status

from mangafas.auth.models import CAPABILITY_NAMES, CapabilitySet, Role, User

PERMISSION_MATRIX: dict[Role, CapabilitySet] = {
    Role.member: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=False,
        can_moderate_comments=False,
        can_administer=False,
    ),
    Role.apprentice_contributor: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=True,
        can_moderate_comments=False,
        can_administer=False,
        upload_requires_approval=True,
    ),
    Role.senior_contributor: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=True,
        can_moderate_comments=True,  # comments only
        can_administer=False,
        upload_requires_approval=True,
    ),
    Role.group_leader: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=True,
        can_moderate_comments=True,
        can_administer=False,
    ),
    Role.moderator: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=True,
        can_moderate_comments=True,
        can_administer=True,
    ),
    Role.owner: CapabilitySet(
        can_read=True,
        can_comment=True,
        can_favorite=True,
        can_upload=True,
        can_moderate_comments=True,
        can_administer=True,
    ),
}


def get_permissions(role: Role) -> CapabilitySet:
    """Return the capability set for *role*.

    An unknown role is a programmer error and raises ``ValueError``.
    """
    return PERMISSION_MATRIX[Role(role)]


def has_capability(user: Optional[User], capability: str) -> bool:
    """Check whether *user* holds *capability* (e.g. ``"can_administer"``)."""
    if capability not in CAPABILITY_NAMES:
        raise ValueError(f"Unknown capability '{capability}'")
    if user is None:
        return False
    return bool(getattr(get_permissions(user.role), capability))


def requires_approval(user: User) -> bool:
    """True when *user* may upload but only through review."""
    perms = get_permissions(user.role)
    return perms.can_upload and perms.upload_requires_approval


def require_capability(user: User, capability: str) -> None:
    """Validate that a user holds the given capability.

    Raises ``HTTPException(403)`` if not.

    Usage in a router::

        @router.get("/admin-only")
        async def admin_only(user: User = Depends(get_current_user)):
            require_capability(user, "can_administer")
            ...
    """
    if not has_capability(user, capability):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Requires capability '{capability}'",
        )
