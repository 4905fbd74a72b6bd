"""Generic collection filter dispatching to the resource resolvers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Optional, TypeVar

from ..permissions.calendar import CalendarAccessResolver
from ..permissions.constants import Action, ResourceKind
from ..permissions.evaluator import PermissionEvaluator
from ..permissions.projects import ProjectAccessResolver
from ..permissions.tasks import TaskAccessResolver
from ..permissions.tracking import TrackingAccessResolver

T = TypeVar("T")

_Handler = Callable[[list, Action, str], list]


class AccessFilter:
    """Filters a collection by resource kind and action.

    Dispatch:
    - project / task: ``view`` and ``edit`` use the resolver filters
      (inheritance included); other actions need a scoped grant per item.
      ``id_field`` names the item id on every project and task path.
    - calendar / tracking: the user needs ``{kind}:{action}``, then each
      item passes the resolver's per-item predicate. Tracking ``edit`` uses
      the editable filter, which is not gated.
    - anything else: :meth:`PermissionEvaluator.filter_by_permission`.

    Example::

        visible = access_filter.apply(rows, ResourceKind.TASK)
        editable = access_filter.apply(rows, "project", "edit")
    """

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        projects: ProjectAccessResolver,
        tasks: TaskAccessResolver,
        calendar: CalendarAccessResolver,
        tracking: TrackingAccessResolver,
    ) -> None:
        self._evaluator = evaluator
        self._projects = projects
        self._tasks = tasks
        self._calendar = calendar
        self._tracking = tracking

        self._handlers: dict[ResourceKind, _Handler] = {
            ResourceKind.PROJECT: self._filter_projects,
            ResourceKind.TASK: self._filter_tasks,
            ResourceKind.CALENDAR: self._filter_calendar,
            ResourceKind.TRACKING: self._filter_tracking,
        }

    def apply(
        self,
        items: Optional[Iterable[T]],
        resource_type: ResourceKind | str,
        action: Action | str = Action.VIEW,
        id_field: str = "id",
    ) -> list[T]:
        """Return the items the user may ``action``, in input order.

        Empty or missing input returns ``[]`` without consulting resolvers.
        """
        if items is None:
            return []
        rows = list(items)
        if not rows:
            return []

        if self._evaluator.is_admin:
            return rows

        resource = ResourceKind(resource_type)
        action = Action(action)

        handler = self._handlers.get(resource)
        if handler is None:
            return self._evaluator.filter_by_permission(rows, resource, action, id_field)
        return handler(rows, action, id_field)

    def _filter_projects(self, rows: list, action: Action, id_field: str) -> list:
        if action is Action.VIEW:
            return self._projects.filter_accessible_projects(rows, id_field)
        if action is Action.EDIT:
            return self._projects.filter_editable_projects(rows, id_field)
        return self._evaluator.filter_by_permission(rows, ResourceKind.PROJECT, action, id_field)

    def _filter_tasks(self, rows: list, action: Action, id_field: str) -> list:
        if action is Action.VIEW:
            return self._tasks.filter_accessible_tasks(rows, id_field)
        if action is Action.EDIT:
            return self._tasks.filter_editable_tasks(rows, id_field)
        return self._evaluator.filter_by_permission(rows, ResourceKind.TASK, action, id_field)

    def _filter_calendar(self, rows: list, action: Action, id_field: str) -> list:
        if action is Action.VIEW:
            return self._calendar.filter_accessible_events(rows)
        if not self._evaluator.has_permission(ResourceKind.CALENDAR, action):
            return []
        return [row for row in rows if self._calendar.can_view_event(row)]

    def _filter_tracking(self, rows: list, action: Action, id_field: str) -> list:
        if action is Action.VIEW:
            return self._tracking.filter_accessible_time_entries(rows)
        if action is Action.EDIT:
            return self._tracking.filter_editable_time_entries(rows)
        if not self._evaluator.has_permission(ResourceKind.TRACKING, action):
            return []
        return [row for row in rows if self._tracking.can_view_time_entry(row)]


__all__ = ["AccessFilter"]
