"""Collaborator contracts the core consumes.

The core performs no I/O. Loading snapshots, knowing who is signed in,
and fetching entities for inheritance lookups belong to the embedding
application, which implements these protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .permissions.models import Project, Task
    from .permissions.snapshot import Snapshot


@runtime_checkable
class SnapshotLoader(Protocol):
    """Builds a complete snapshot for a user.

    Implementations raise :class:`~accesscore.exceptions.SnapshotLoadError`
    on failure; :meth:`SnapshotStore.reload` turns that into "no snapshot".
    """

    async def load_snapshot(self, user_id: str) -> Snapshot: ...


@runtime_checkable
class SessionProvider(Protocol):
    """Identity/session state of the calling layer."""

    def current_user_id(self) -> Optional[str]: ...

    def is_authenticated(self) -> bool: ...


@runtime_checkable
class DomainLookup(Protocol):
    """Entity lookups used only to resolve inheritance links."""

    def lookup_project(self, project_id: str) -> Optional[Project]: ...

    def lookup_task(self, task_id: str) -> Optional[Task]: ...


__all__ = ["DomainLookup", "SessionProvider", "SnapshotLoader"]
