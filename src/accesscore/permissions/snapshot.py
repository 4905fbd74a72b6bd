"""Immutable permission snapshot and its copy-on-write holder.

A :class:`Snapshot` bundles everything the core decides on for one user:
role, grants, memberships, assignments, and the locally held projects and
tasks used for inheritance lookups. It is never mutated; login, logout,
role change and permission reload all produce a new snapshot that
:class:`SnapshotStore` swaps in as a whole.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..exceptions import AccessCoreError
from .inheritance import derive_grants
from .models import PermissionGrant, Project, ProjectMembership, Task, TaskAssignment, User

if TYPE_CHECKING:
    from ..interfaces import SnapshotLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Per-user permission bundle.

    Attributes:
        user: Authenticated user, or None when no snapshot is available.
        grants: Permission grants (unordered; duplicates are harmless).
        memberships: The user's project memberships.
        assignments: The user's task assignments.
        projects: Projects held locally for lookups.
        tasks: Tasks held locally for lookups (carry ``project_id``).
    """

    user: Optional[User] = None
    grants: tuple[PermissionGrant, ...] = ()
    memberships: tuple[ProjectMembership, ...] = ()
    assignments: tuple[TaskAssignment, ...] = ()
    projects: tuple[Project, ...] = ()
    tasks: tuple[Task, ...] = ()

    _projects_by_id: dict[str, Project] = field(default_factory=dict, init=False, repr=False, compare=False)
    _tasks_by_id: dict[str, Task] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store tuples.
        for name in ("grants", "memberships", "assignments", "projects", "tasks"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

        projects_by_id: dict[str, Project] = {}
        for project in self.projects:
            projects_by_id.setdefault(project.id, project)
        tasks_by_id: dict[str, Task] = {}
        for task in self.tasks:
            tasks_by_id.setdefault(task.id, task)
        object.__setattr__(self, "_projects_by_id", projects_by_id)
        object.__setattr__(self, "_tasks_by_id", tasks_by_id)

    @classmethod
    def unavailable(cls) -> Snapshot:
        """The empty snapshot: no user, no grants. Every check fails closed."""
        return cls()

    @property
    def available(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user is not None else None

    def find_project(self, project_id: Optional[str]) -> Optional[Project]:
        if not project_id:
            return None
        return self._projects_by_id.get(str(project_id))

    def find_task(self, task_id: Optional[str]) -> Optional[Task]:
        if not task_id:
            return None
        return self._tasks_by_id.get(str(task_id))


def build_snapshot(
    user: User,
    *,
    memberships: Iterable[ProjectMembership] = (),
    assignments: Iterable[TaskAssignment] = (),
    projects: Iterable[Project] = (),
    tasks: Iterable[Task] = (),
    grants: Iterable[PermissionGrant] = (),
    derive: bool = True,
) -> Snapshot:
    """Assemble a snapshot for ``user`` from raw rows.

    Memberships and assignments belonging to other users are dropped.
    With ``derive=True`` the grants implied by the remaining memberships
    and assignments are appended to ``grants``.

    Example::

        snapshot = build_snapshot(
            User(id="u1", role=Role.MEMBER),
            memberships=[ProjectMembership(user_id="u1", project_id="p1", role="manager")],
            tasks=[Task(id="t1", project_id="p1")],
        )
    """
    own_memberships = tuple(m for m in memberships if m.user_id == user.id)
    own_assignments = tuple(a for a in assignments if a.assigned_to == user.id)

    all_grants = tuple(grants)
    if derive:
        all_grants += derive_grants(own_memberships, own_assignments)

    return Snapshot(
        user=user,
        grants=all_grants,
        memberships=own_memberships,
        assignments=own_assignments,
        projects=tuple(projects),
        tasks=tuple(tasks),
    )


class SnapshotStore:
    """Holds the current snapshot and replaces it atomically.

    Readers access :attr:`current` without locking and always observe a
    complete snapshot. Writers are serialised so that two concurrent
    reloads cannot interleave their swaps.

    Usage::

        store = SnapshotStore()
        await store.reload(loader, user_id)
        ctx = AccessContext.from_store(store)
    """

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        self._snapshot = snapshot or Snapshot.unavailable()
        self._write_lock = threading.Lock()

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    def replace(self, snapshot: Snapshot) -> Snapshot:
        """Swap in ``snapshot`` and return the previous one."""
        with self._write_lock:
            previous = self._snapshot
            self._snapshot = snapshot
        logger.debug(
            "Snapshot replaced (user=%s, grants=%d)",
            snapshot.user_id,
            len(snapshot.grants),
        )
        return previous

    def clear(self) -> Snapshot:
        """Drop the current snapshot (logout)."""
        return self.replace(Snapshot.unavailable())

    async def reload(self, loader: SnapshotLoader, user_id: str) -> bool:
        """Load a fresh snapshot for ``user_id`` and swap it in.

        A failing loader leaves the store holding
        :meth:`Snapshot.unavailable`, so every decision fails closed.
        Errors outside :class:`AccessCoreError` are re-raised after the
        store has been cleared.

        Returns:
            True if a snapshot was loaded, False otherwise.
        """
        try:
            snapshot = await loader.load_snapshot(user_id)
        except AccessCoreError as e:
            logger.warning(
                "Snapshot load failed for user %s: [%s] %s",
                user_id,
                e.code,
                e.message,
            )
            self.clear()
            return False
        except Exception as e:
            logger.warning("Snapshot loader raised for user %s: %s", user_id, e)
            self.clear()
            raise

        if snapshot is None or not snapshot.available:
            logger.warning("Snapshot loader returned no snapshot for user %s", user_id)
            self.clear()
            return False

        self.replace(snapshot)
        return True


__all__ = [
    "Snapshot",
    "SnapshotStore",
    "build_snapshot",
]
