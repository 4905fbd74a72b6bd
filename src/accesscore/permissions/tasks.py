"""Task-level access: direct task grants, inherited through the owning project."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional, TypeVar

from .constants import Action, ResourceKind
from .evaluator import PermissionEvaluator
from .models import Task, TaskCondition, field_value
from .projects import ProjectAccessResolver

if TYPE_CHECKING:
    from ..interfaces import DomainLookup

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskAccessResolver:
    """Derives assigned tasks and per-task decisions.

    Access inherits downward: view access to a project implies view access
    to its tasks, and managing a project implies editing its tasks. A task
    that cannot be resolved is inaccessible through inheritance.

    Tasks are resolved from the snapshot first, then through ``lookup``
    when one is given.
    """

    __slots__ = ("_evaluator", "_projects", "_lookup")

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        projects: ProjectAccessResolver,
        lookup: Optional[DomainLookup] = None,
    ) -> None:
        self._evaluator = evaluator
        self._projects = projects
        self._lookup = lookup

    def _resolve_task(self, task_id: str) -> Optional[Task]:
        task = self._evaluator.snapshot.find_task(task_id)
        if task is not None or self._lookup is None or not task_id:
            return task
        try:
            return self._lookup.lookup_task(task_id)
        except Exception as e:
            logger.warning("Task lookup failed for %s, treating as inaccessible: %s", task_id, e)
            return None

    @property
    def assigned_tasks(self) -> tuple[Task, ...]:
        """Locally held tasks assigned to the user, in assignment order (any status)."""
        snapshot = self._evaluator.snapshot
        if not snapshot.available:
            return ()
        found = (snapshot.find_task(a.task_id) for a in snapshot.assignments if a.assigned_to == snapshot.user_id)
        return tuple(t for t in found if t is not None)

    def is_task_assigned(self, task_id: str) -> bool:
        snapshot = self._evaluator.snapshot
        return any(a.task_id == task_id and a.assigned_to == snapshot.user_id for a in snapshot.assignments)

    def has_task_access(self, task_id: str) -> bool:
        """Direct ``task:view`` grant, or view access to the task's project."""
        if self._evaluator.has_permission(ResourceKind.TASK, Action.VIEW, TaskCondition(id=task_id)):
            return True

        task = self._resolve_task(task_id)
        if task is None:
            logger.debug("Task %s not resolvable, no inherited access", task_id)
            return False
        return self._projects.has_project_access(task.project_id)

    def can_edit_task(self, task_id: str) -> bool:
        """Direct ``task:edit`` grant, or managing the task's project."""
        if self._evaluator.has_permission(ResourceKind.TASK, Action.EDIT, TaskCondition(id=task_id)):
            return True

        task = self._resolve_task(task_id)
        if task is None:
            return False
        return self._projects.is_project_manager(task.project_id)

    def filter_accessible_tasks(self, tasks: Iterable[T], id_field: str = "id") -> list[T]:
        if self._evaluator.is_admin:
            return list(tasks)
        return [task for task in tasks if self._can_view_item(task, id_field)]

    def filter_editable_tasks(self, tasks: Iterable[T], id_field: str = "id") -> list[T]:
        if self._evaluator.is_admin:
            return list(tasks)
        return [task for task in tasks if self._can_edit_item(task, id_field)]

    # Filters read project_id from the item itself, no lookup needed.

    def _can_view_item(self, task: object, id_field: str) -> bool:
        task_id = field_value(task, id_field)
        if task_id and self._evaluator.has_permission(ResourceKind.TASK, Action.VIEW, TaskCondition(id=task_id)):
            return True
        project_id = field_value(task, "project_id")
        return bool(project_id) and self._projects.has_project_access(project_id)

    def _can_edit_item(self, task: object, id_field: str) -> bool:
        task_id = field_value(task, id_field)
        if task_id and self._evaluator.has_permission(ResourceKind.TASK, Action.EDIT, TaskCondition(id=task_id)):
            return True
        project_id = field_value(task, "project_id")
        return bool(project_id) and self._projects.is_project_manager(project_id)


__all__ = ["TaskAccessResolver"]
