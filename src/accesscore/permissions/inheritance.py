"""Grant derivation and per-role module profiles.

Provides:
- ``MEMBERSHIP_GRANTS`` — project role → actions granted on that project.
- ``ASSIGNMENT_GRANTS`` — actions granted on an assigned task.
- ``derive_grants()`` — grants implied by memberships and assignments.
- ``Module`` / ``ROLE_PROFILES`` — coarse module capabilities per role.
- ``has_role_capability()`` / ``can_access_module()`` — profile lookups.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Optional

from .constants import Action, ProjectRole, ResourceKind, Role
from .models import PermissionGrant, ProjectCondition, ProjectMembership, TaskAssignment, TaskCondition

# ── Grant Derivation ────────────────────────────────────
# A membership or assignment implies instance-scoped grants.

MEMBERSHIP_GRANTS: dict[ProjectRole, tuple[Action, ...]] = {
    ProjectRole.MEMBER: (Action.VIEW,),
    ProjectRole.MANAGER: (
        Action.VIEW,
        Action.EDIT,
        Action.MANAGE_MEMBERS,
    ),
}

ASSIGNMENT_GRANTS: tuple[Action, ...] = (Action.VIEW, Action.EDIT)


def derive_grants(
    memberships: Iterable[ProjectMembership] = (),
    assignments: Iterable[TaskAssignment] = (),
) -> tuple[PermissionGrant, ...]:
    """Expand memberships and assignments into scoped grants.

    Rows without a project/task id are skipped. Output is deduplicated and
    keeps first-seen order.

    Example::

        derive_grants([ProjectMembership(user_id="u1", project_id="p1", role="manager")])
        # project:view, project:edit, project:manage_members, all scoped to p1
    """
    derived: dict[PermissionGrant, None] = {}

    for membership in memberships:
        if not membership.project_id:
            continue
        condition = ProjectCondition(id=membership.project_id)
        for action in MEMBERSHIP_GRANTS.get(membership.role, ()):
            grant = PermissionGrant(resource=ResourceKind.PROJECT, action=action, conditions=condition)
            derived.setdefault(grant, None)

    for assignment in assignments:
        if not assignment.task_id:
            continue
        condition = TaskCondition(id=assignment.task_id)
        for action in ASSIGNMENT_GRANTS:
            grant = PermissionGrant(resource=ResourceKind.TASK, action=action, conditions=condition)
            derived.setdefault(grant, None)

    return tuple(derived)


# ── Role → Module Profiles ──────────────────────────────


class Module(str, Enum):
    """Application area a role profile describes."""

    DASHBOARD = "dashboard"
    CLIENTS = "clients"
    PROJECTS = "projects"
    TASKS = "tasks"
    CALENDAR = "calendar"
    TIME_TRACKING = "time_tracking"
    TEAM = "team"


def _caps(*names: str) -> frozenset[str]:
    return frozenset(names)


# Manager maps to the project-manager profile, member to the developer one.
ROLE_PROFILES: dict[Role, dict[Module, frozenset[str]]] = {
    Role.ADMIN: {
        Module.DASHBOARD: _caps("view", "view_all"),
        Module.CLIENTS: _caps("view", "view_all", "create", "edit", "delete"),
        Module.PROJECTS: _caps("view", "view_all", "view_assigned", "create", "edit", "delete"),
        Module.TASKS: _caps(
            "view", "view_all", "view_assigned", "view_team", "create", "edit", "delete", "assign"
        ),
        Module.CALENDAR: _caps("view", "view_all", "view_assigned", "create", "edit"),
        Module.TIME_TRACKING: _caps("view", "view_all", "view_team", "create", "edit"),
        Module.TEAM: _caps("view", "view_all", "create", "edit", "delete"),
    },
    Role.MANAGER: {
        Module.DASHBOARD: _caps("view"),
        Module.CLIENTS: _caps("view", "view_all", "create", "edit"),
        Module.PROJECTS: _caps("view", "view_assigned", "create", "edit"),
        Module.TASKS: _caps("view", "view_assigned", "view_team", "create", "edit", "delete", "assign"),
        Module.CALENDAR: _caps("view", "view_assigned", "create", "edit"),
        Module.TIME_TRACKING: _caps("view", "view_team", "create", "edit"),
        Module.TEAM: _caps("view", "edit"),
    },
    Role.MEMBER: {
        Module.DASHBOARD: _caps("view"),
        Module.CLIENTS: _caps("view"),
        Module.PROJECTS: _caps("view", "view_assigned"),
        Module.TASKS: _caps("view", "view_assigned", "edit"),
        Module.CALENDAR: _caps("view", "view_assigned"),
        Module.TIME_TRACKING: _caps("view", "create", "edit"),
        Module.TEAM: _caps("view"),
    },
}


def has_role_capability(role: Optional[Role | str], module: Module | str, capability: str) -> bool:
    """Check the coarse module profile of a role.

    Unknown roles and modules are denied.

    Example::

        has_role_capability(Role.MEMBER, Module.TASKS, "edit")    # True
        has_role_capability(Role.MEMBER, Module.PROJECTS, "edit")  # False
    """
    if role is None:
        return False
    try:
        profile = ROLE_PROFILES[Role(role)]
        caps = profile[Module(module)]
    except (KeyError, ValueError):
        return False
    return capability in caps


def can_access_module(role: Optional[Role | str], module: Module | str) -> bool:
    """A module is accessible when the role's profile includes ``view``."""
    return has_role_capability(role, module, "view")


__all__ = [
    "ASSIGNMENT_GRANTS",
    "MEMBERSHIP_GRANTS",
    "Module",
    "ROLE_PROFILES",
    "can_access_module",
    "derive_grants",
    "has_role_capability",
]
