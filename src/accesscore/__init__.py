from .config import AccessConfig, LogLevel, load_access_config_from_env
from .exceptions import (
    AccessCoreError,
    ConfigurationError,
    SnapshotLoadError,
    UnsupportedResourceError,
)
from .interfaces import DomainLookup, SessionProvider, SnapshotLoader
from .logging import (
    AccessLogFormatter,
    AccessLoggerAdapter,
    get_access_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    ROLE_PROFILES,
    Action,
    AssignmentStatus,
    CalendarAccessResolver,
    CalendarEvent,
    DenialKind,
    Module,
    PermissionEvaluator,
    PermissionGrant,
    Project,
    ProjectAccessResolver,
    ProjectCondition,
    ProjectMembership,
    ProjectRole,
    ResourceKind,
    Role,
    Snapshot,
    SnapshotStore,
    Task,
    TaskAccessResolver,
    TaskAssignment,
    TaskCondition,
    TimeEntry,
    TrackingAccessResolver,
    User,
    UserCondition,
    build_snapshot,
    can_access_module,
    condition_for,
    derive_grants,
    has_role_capability,
)
from .security import AccessContext, AccessFilter, AccessGuard, GuardDecision

__all__ = [
    'AccessConfig',
    'LogLevel',
    'load_access_config_from_env',
    'AccessCoreError',
    'ConfigurationError',
    'SnapshotLoadError',
    'UnsupportedResourceError',
    'DomainLookup',
    'SessionProvider',
    'SnapshotLoader',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'get_access_logger',
    'safe_preview',
    'setup_logging',
    'ROLE_PROFILES',
    'Action',
    'AssignmentStatus',
    'CalendarAccessResolver',
    'CalendarEvent',
    'DenialKind',
    'Module',
    'PermissionEvaluator',
    'PermissionGrant',
    'Project',
    'ProjectAccessResolver',
    'ProjectCondition',
    'ProjectMembership',
    'ProjectRole',
    'ResourceKind',
    'Role',
    'Snapshot',
    'SnapshotStore',
    'Task',
    'TaskAccessResolver',
    'TaskAssignment',
    'TaskCondition',
    'TimeEntry',
    'TrackingAccessResolver',
    'User',
    'UserCondition',
    'build_snapshot',
    'can_access_module',
    'condition_for',
    'derive_grants',
    'has_role_capability',
    'AccessContext',
    'AccessFilter',
    'AccessGuard',
    'GuardDecision',
]
