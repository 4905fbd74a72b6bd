"""Permission evaluation core.

Defines:
- Role / ResourceKind / Action: closed vocabularies
- PermissionGrant and condition variants: what a user has been granted
- Snapshot / SnapshotStore: the immutable per-user bundle and its holder
- derive_grants(): grants implied by memberships and assignments
- ROLE_PROFILES: coarse module capabilities per role
- PermissionEvaluator: has_role / has_permission / filter_by_permission
- Project/Task/Calendar/Tracking resolvers built on the evaluator
"""

from .calendar import CalendarAccessResolver
from .constants import Action, AssignmentStatus, DenialKind, ProjectRole, ResourceKind, Role
from .evaluator import PermissionEvaluator
from .inheritance import (
    ASSIGNMENT_GRANTS,
    MEMBERSHIP_GRANTS,
    ROLE_PROFILES,
    Module,
    can_access_module,
    derive_grants,
    has_role_capability,
)
from .models import (
    CalendarEvent,
    Condition,
    PermissionGrant,
    Project,
    ProjectCondition,
    ProjectMembership,
    Task,
    TaskAssignment,
    TaskCondition,
    TimeEntry,
    User,
    UserCondition,
    condition_for,
    field_value,
)
from .projects import ProjectAccessResolver
from .snapshot import Snapshot, SnapshotStore, build_snapshot
from .tasks import TaskAccessResolver
from .tracking import TrackingAccessResolver

__all__ = [
    "ASSIGNMENT_GRANTS",
    "MEMBERSHIP_GRANTS",
    "ROLE_PROFILES",
    "Action",
    "AssignmentStatus",
    "CalendarAccessResolver",
    "CalendarEvent",
    "Condition",
    "DenialKind",
    "Module",
    "PermissionEvaluator",
    "PermissionGrant",
    "Project",
    "ProjectAccessResolver",
    "ProjectCondition",
    "ProjectMembership",
    "ProjectRole",
    "ResourceKind",
    "Role",
    "Snapshot",
    "SnapshotStore",
    "Task",
    "TaskAccessResolver",
    "TaskAssignment",
    "TaskCondition",
    "TimeEntry",
    "TrackingAccessResolver",
    "User",
    "UserCondition",
    "build_snapshot",
    "can_access_module",
    "condition_for",
    "derive_grants",
    "field_value",
    "has_role_capability",
]
