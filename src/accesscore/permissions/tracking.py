"""Time-entry visibility and edit rights."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from .constants import Action, ResourceKind
from .evaluator import PermissionEvaluator
from .models import field_value
from .projects import ProjectAccessResolver
from .tasks import TaskAccessResolver

E = TypeVar("E")


class TrackingAccessResolver:
    """Decides which time entries a user may see or edit.

    Viewing requires ``tracking:view``. Editing does not: a user may always
    edit their own entries, and only their own (admins excepted).
    """

    __slots__ = ("_evaluator", "_projects", "_tasks")

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        projects: ProjectAccessResolver,
        tasks: TaskAccessResolver,
    ) -> None:
        self._evaluator = evaluator
        self._projects = projects
        self._tasks = tasks

    @property
    def has_tracking_access(self) -> bool:
        """Unscoped ``tracking:view``."""
        return self._evaluator.has_permission(ResourceKind.TRACKING, Action.VIEW)

    def can_view_time_entry(self, entry: object) -> bool:
        """Checks in order: admin, tracking access, own entry, task link, project link.

        The project link only grants visibility to those who can manage the
        project's members.
        """
        if self._evaluator.is_admin:
            return True
        if not self.has_tracking_access:
            return False

        if self._evaluator.is_self(field_value(entry, "user_id")):
            return True

        task_id = field_value(entry, "task_id")
        if task_id:
            return self._tasks.has_task_access(task_id)

        project_id = field_value(entry, "project_id")
        if project_id:
            return self._projects.can_manage_members(project_id)

        return False

    def can_edit_time_entry(self, entry: object) -> bool:
        if self._evaluator.is_admin:
            return True
        return self._evaluator.is_self(field_value(entry, "user_id"))

    def filter_accessible_time_entries(self, entries: Iterable[E]) -> list[E]:
        if self._evaluator.is_admin:
            return list(entries)
        if not self.has_tracking_access:
            return []
        return [entry for entry in entries if self.can_view_time_entry(entry)]

    def filter_editable_time_entries(self, entries: Iterable[E]) -> list[E]:
        if self._evaluator.is_admin:
            return list(entries)
        return [entry for entry in entries if self.can_edit_time_entry(entry)]


__all__ = ["TrackingAccessResolver"]
