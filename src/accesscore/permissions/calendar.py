"""Calendar event visibility."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from .constants import Action, ResourceKind
from .evaluator import PermissionEvaluator
from .models import field_value
from .projects import ProjectAccessResolver
from .tasks import TaskAccessResolver

E = TypeVar("E")


class CalendarAccessResolver:
    """Decides which calendar events a user may see.

    An event's most specific link decides: the task link if set, else the
    project link. Events linked to neither are visible to admins only,
    even when the user holds ``calendar:view``.
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
    def has_calendar_access(self) -> bool:
        """Unscoped ``calendar:view``."""
        return self._evaluator.has_permission(ResourceKind.CALENDAR, Action.VIEW)

    def can_view_event(self, event: object) -> bool:
        if self._evaluator.is_admin:
            return True
        if not self.has_calendar_access:
            return False

        task_id = field_value(event, "task_id")
        if task_id:
            return self._tasks.has_task_access(task_id)

        project_id = field_value(event, "project_id")
        if project_id:
            return self._projects.has_project_access(project_id)

        # General events: admin only, and admins returned above.
        return False

    def filter_accessible_events(self, events: Iterable[E]) -> list[E]:
        if self._evaluator.is_admin:
            return list(events)
        if not self.has_calendar_access:
            return []
        return [event for event in events if self.can_view_event(event)]


__all__ = ["CalendarAccessResolver"]
