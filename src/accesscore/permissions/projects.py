"""Project-level access: memberships plus scoped project grants."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional, TypeVar

from .constants import Action, ProjectRole, ResourceKind
from .evaluator import PermissionEvaluator
from .models import Project, ProjectCondition

if TYPE_CHECKING:
    from ..interfaces import DomainLookup

logger = logging.getLogger(__name__)

P = TypeVar("P")


class ProjectAccessResolver:
    """Derives managed/member project sets and per-project decisions.

    Membership projects are resolved from the snapshot first, then through
    ``lookup`` when one is given. Projects that resolve nowhere are left
    out of ``managed_projects`` / ``member_projects``.
    """

    __slots__ = ("_evaluator", "_lookup")

    def __init__(self, evaluator: PermissionEvaluator, lookup: Optional[DomainLookup] = None) -> None:
        self._evaluator = evaluator
        self._lookup = lookup

    @property
    def evaluator(self) -> PermissionEvaluator:
        return self._evaluator

    def _resolve_project(self, project_id: str) -> Optional[Project]:
        project = self._evaluator.snapshot.find_project(project_id)
        if project is not None or self._lookup is None or not project_id:
            return project
        try:
            return self._lookup.lookup_project(project_id)
        except Exception as e:
            logger.warning("Project lookup failed for %s, leaving it out: %s", project_id, e)
            return None

    def _projects_with_role(self, role: ProjectRole) -> tuple[Project, ...]:
        snapshot = self._evaluator.snapshot
        if not snapshot.available:
            return ()
        found = (self._resolve_project(m.project_id) for m in snapshot.memberships if m.role == role)
        return tuple(p for p in found if p is not None)

    @property
    def managed_projects(self) -> tuple[Project, ...]:
        """Projects the user manages, in membership order."""
        return self._projects_with_role(ProjectRole.MANAGER)

    @property
    def member_projects(self) -> tuple[Project, ...]:
        """Projects the user is a plain member of."""
        return self._projects_with_role(ProjectRole.MEMBER)

    @property
    def managed_project_ids(self) -> frozenset[str]:
        return frozenset(
            m.project_id for m in self._evaluator.snapshot.memberships if m.role == ProjectRole.MANAGER
        )

    def has_project_access(self, project_id: str) -> bool:
        return self._evaluator.has_permission(ResourceKind.PROJECT, Action.VIEW, ProjectCondition(id=project_id))

    def can_edit_project(self, project_id: str) -> bool:
        return self._evaluator.has_permission(ResourceKind.PROJECT, Action.EDIT, ProjectCondition(id=project_id))

    def can_manage_members(self, project_id: str) -> bool:
        return self._evaluator.has_permission(
            ResourceKind.PROJECT, Action.MANAGE_MEMBERS, ProjectCondition(id=project_id)
        )

    def is_project_manager(self, project_id: str) -> bool:
        """Membership check only; grants are not consulted."""
        project_id = str(project_id)
        return any(
            m.project_id == project_id and m.role == ProjectRole.MANAGER
            for m in self._evaluator.snapshot.memberships
        )

    def filter_accessible_projects(self, projects: Iterable[P], id_field: str = "id") -> list[P]:
        return self._evaluator.filter_by_permission(projects, ResourceKind.PROJECT, Action.VIEW, id_field)

    def filter_editable_projects(self, projects: Iterable[P], id_field: str = "id") -> list[P]:
        return self._evaluator.filter_by_permission(projects, ResourceKind.PROJECT, Action.EDIT, id_field)


__all__ = ["ProjectAccessResolver"]
