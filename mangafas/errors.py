"""Exception types for mangafas.

Business-rule failures (missing capability, duplicate ban, terminal state)
are reported as ``False`` / ``None`` return values and never raise.  Only
infrastructure failures travel through this hierarchy.
"""

from __future__ import annotations


class MangafasError(Exception):
    """Base class for all mangafas errors."""


class StoreUnavailableError(MangafasError):
    """A collection file could not be read or written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Store '{path}' unavailable: {reason}")
        self.path = path
        self.reason = reason
