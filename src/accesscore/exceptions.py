"""Exception hierarchy for accesscore.

Authorization decisions are never raised: every check returns a boolean
or a :class:`~accesscore.security.guard.GuardDecision`. The errors below
cover the only legitimate failures around the core:

- collaborator failures (a snapshot that could not be loaded),
- invalid configuration,
- programming errors (asking for a condition on a resource kind that
  has no instance scoping).

Usage:
    from accesscore.exceptions import AccessCoreError, SnapshotLoadError

    class SupabaseLoader:
        async def load_snapshot(self, user_id):
            try:
                ...
            except httpx.HTTPError as e:
                raise SnapshotLoadError("grants query failed", user_id=user_id) from e
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AccessCoreError",
    "ConfigurationError",
    "SnapshotLoadError",
    "UnsupportedResourceError",
]


class AccessCoreError(Exception):
    """Base exception for accesscore.

    Attributes:
        code: Stable error code string (e.g. "SNAPSHOT_LOAD_ERROR").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessCoreError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid access configuration"


class SnapshotLoadError(AccessCoreError):
    """The permission snapshot for a user could not be loaded."""

    code: str = "SNAPSHOT_LOAD_ERROR"
    message: str = "Permission snapshot unavailable"


class UnsupportedResourceError(AccessCoreError):
    """A resource kind was used where it has no meaning (e.g. instance conditions)."""

    code: str = "UNSUPPORTED_RESOURCE"
    message: str = "Unsupported resource kind"
