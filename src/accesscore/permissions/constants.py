"""Closed vocabularies for roles, resources and actions.

Provides:
- ``Role`` — application role of a user (admin / manager / member).
- ``ProjectRole`` — role held inside one project membership.
- ``AssignmentStatus`` — state of a task assignment.
- ``ResourceKind`` — category of protected entity.
- ``Action`` — operation requested on a resource.
- ``DenialKind`` — why a guard refused.

Values are the lower-case tags stored alongside grants, so a stored row
``{"resource": "project", "action": "view"}`` parses directly.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Application role. Immutable for the lifetime of a snapshot."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class ProjectRole(str, Enum):
    """Role inside a single project. At most one per (user, project)."""

    MANAGER = "manager"
    MEMBER = "member"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ResourceKind(str, Enum):
    """Category of protected entity a grant refers to."""

    PROJECT = "project"
    TASK = "task"
    CALENDAR = "calendar"
    TRACKING = "tracking"
    USER = "user"


class Action(str, Enum):
    """Operation a grant allows on a resource."""

    VIEW = "view"
    EDIT = "edit"
    MANAGE_MEMBERS = "manage_members"
    SELF = "self"  # Only meaningful on ResourceKind.USER


class DenialKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"


__all__ = [
    "Action",
    "AssignmentStatus",
    "DenialKind",
    "ProjectRole",
    "ResourceKind",
    "Role",
]
