"""Auth middleware -- FastAPI dependencies for the platform and the acting user.

Identity is established upstream (reverse proxy / session layer); requests
arrive with the acting user's id in the ``X-User-Id`` header.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from mangafas.auth.models import User
from mangafas.platform import Platform

# Shared platform instance
_platform: Optional[Platform] = None


def get_platform() -> Platform:
    """Return the singleton Platform instance."""
    global _platform
    if _platform is None:
        _platform = Platform()
    return _platform


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    platform: Platform = Depends(get_platform),
) -> User:
    """FastAPI dependency that resolves the acting user.

    Raises ``401 Unauthorized`` if the header is missing or names no
    known user.
    """
    if x_user_id:
        user = platform.user(x_user_id)
        if user is not None:
            return user

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )

