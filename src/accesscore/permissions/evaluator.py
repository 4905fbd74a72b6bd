"""Primitive permission decisions over one snapshot.

Every resolver composes on :class:`PermissionEvaluator`. It is a pure
function of the snapshot it was built with: no I/O, no side effects,
safe to share between threads.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional, TypeVar

from .constants import Action, ResourceKind, Role
from .models import Condition, UserCondition, condition_for, field_value
from .snapshot import Snapshot

T = TypeVar("T")


class PermissionEvaluator:
    """Answers ``has_role`` / ``has_permission`` for a snapshot's user.

    Example::

        evaluator = PermissionEvaluator(snapshot)
        evaluator.has_permission(ResourceKind.PROJECT, Action.VIEW, ProjectCondition(id="p1"))
    """

    __slots__ = ("_snapshot",)

    def __init__(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def user_id(self) -> Optional[str]:
        return self._snapshot.user_id

    def has_role(self, role: Role | str) -> bool:
        """True iff the snapshot user's role equals ``role``."""
        user = self._snapshot.user
        if user is None:
            return False
        return user.role == Role(role)

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def has_permission(
        self,
        resource: ResourceKind | str,
        action: Action | str,
        condition: Optional[Condition] = None,
    ) -> bool:
        """Check whether any grant covers ``action`` on ``resource``.

        Checks in order:
        1. Admin role: always allowed, grants are not consulted.
        2. A grant with matching resource and action, where
           - no ``condition`` was asked for (the grant's own conditions
             are then ignored), or
           - the grant is unconditioned, or
           - the grant's condition equals ``condition``.

        Args:
            resource: Resource kind.
            action: Requested action.
            condition: Optional instance scope, e.g. ``ProjectCondition(id="p1")``.

        Returns:
            True if access is granted.

        Example::

            # grants = [project:view {id: p1}]
            has_permission("project", "view", ProjectCondition(id="p1"))  # True
            has_permission("project", "view", ProjectCondition(id="p2"))  # False
            has_permission("project", "view")                             # True
        """
        if self.is_admin:
            return True

        resource = ResourceKind(resource)
        action = Action(action)

        for grant in self._snapshot.grants:
            if grant.resource != resource or grant.action != action:
                continue
            if condition is None or grant.conditions is None:
                return True
            if grant.conditions == condition:
                return True
        return False

    def is_self(self, user_id: Optional[str]) -> bool:
        """The ``user:self`` check for a record owned by ``user_id``.

        True when ``user_id`` is the snapshot user, or a ``user:self``
        grant covers it.
        """
        if not user_id:
            return False
        if str(user_id) == self._snapshot.user_id:
            return True
        return self.has_permission(ResourceKind.USER, Action.SELF, UserCondition(id=user_id))

    def _has_unscoped_grant(self, resource: ResourceKind, action: Action) -> bool:
        return any(
            g.resource == resource and g.action == action and g.conditions is None for g in self._snapshot.grants
        )

    def filter_by_permission(
        self,
        items: Iterable[T],
        resource: ResourceKind | str,
        action: Action | str,
        id_field: str = "id",
    ) -> list[T]:
        """Keep the items whose id satisfies a scoped ``has_permission``.

        Admin receives the input unchanged. Order is preserved. An item
        without an id only passes through an unconditioned grant.
        """
        if self.is_admin:
            return list(items)

        resource = ResourceKind(resource)
        action = Action(action)
        kept: list[T] = []
        for item in items:
            item_id = field_value(item, id_field)
            if item_id is None or item_id == "":
                if self._has_unscoped_grant(resource, action):
                    kept.append(item)
                continue
            if self.has_permission(resource, action, condition_for(resource, item_id)):
                kept.append(item)
        return kept


__all__ = ["PermissionEvaluator"]
