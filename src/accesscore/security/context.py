"""Composition root: every resolver built from one snapshot.

Resolvers are created in dependency order (evaluator → projects → tasks →
calendar, tracking) and only ever reference resolvers created before
them. Holding one :class:`AccessContext` per request or page render
guarantees every decision it makes sees the same snapshot, even if the
store is reloaded meanwhile.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..config import AccessConfig
from ..permissions.calendar import CalendarAccessResolver
from ..permissions.evaluator import PermissionEvaluator
from ..permissions.projects import ProjectAccessResolver
from ..permissions.snapshot import Snapshot, SnapshotStore
from ..permissions.tasks import TaskAccessResolver
from ..permissions.tracking import TrackingAccessResolver
from .filter import AccessFilter
from .guard import AccessGuard

if TYPE_CHECKING:
    from ..interfaces import DomainLookup, SessionProvider


class AccessContext:
    """All access decisions for one snapshot.

    Attributes:
        snapshot: The snapshot every decision reads.
        evaluator: ``has_role`` / ``has_permission``.
        projects, tasks, calendar, tracking: resource resolvers.
        guard: :class:`AccessGuard` over the same resolvers.
        filter: :class:`AccessFilter` over the same resolvers.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        *,
        session: Optional[SessionProvider] = None,
        lookup: Optional[DomainLookup] = None,
        config: Optional[AccessConfig] = None,
    ) -> None:
        self.snapshot = snapshot
        self.evaluator = PermissionEvaluator(snapshot)
        self.projects = ProjectAccessResolver(self.evaluator, lookup)
        self.tasks = TaskAccessResolver(self.evaluator, self.projects, lookup)
        self.calendar = CalendarAccessResolver(self.evaluator, self.projects, self.tasks)
        self.tracking = TrackingAccessResolver(self.evaluator, self.projects, self.tasks)
        self.guard = AccessGuard(self.evaluator, self.projects, self.tasks, session=session, config=config)
        self.filter = AccessFilter(self.evaluator, self.projects, self.tasks, self.calendar, self.tracking)

    @classmethod
    def from_store(
        cls,
        store: SnapshotStore,
        *,
        session: Optional[SessionProvider] = None,
        lookup: Optional[DomainLookup] = None,
        config: Optional[AccessConfig] = None,
    ) -> AccessContext:
        """Build a context over the store's current snapshot (read once)."""
        return cls(store.current, session=session, lookup=lookup, config=config)

    def __repr__(self) -> str:
        return f"AccessContext(user_id={self.snapshot.user_id!r}, grants={len(self.snapshot.grants)})"


__all__ = ["AccessContext"]
