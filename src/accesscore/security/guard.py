"""Access guard — decision value and the gate that produces it.

Provides:
- ``GuardDecision`` — allow/deny with a user-facing reason and a redirect target.
- ``AccessGuard`` — gates an operation or page transition on the current snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import AccessConfig
from ..permissions.constants import Action, DenialKind, ResourceKind, Role
from ..permissions.evaluator import PermissionEvaluator
from ..permissions.models import condition_for
from ..permissions.projects import ProjectAccessResolver
from ..permissions.tasks import TaskAccessResolver

if TYPE_CHECKING:
    from ..interfaces import SessionProvider

logger = logging.getLogger(__name__)


# ── Guard Decision ───────────────────────────────────────────────


@dataclass(frozen=True)
class GuardDecision:
    """Result of a guard check.

    The calling layer surfaces ``reason`` and navigates to
    ``redirect_target`` when ``denied``.
    """

    allowed: bool = True
    reason: str = ""
    redirect_target: Optional[str] = None
    denial: Optional[DenialKind] = None

    @property
    def denied(self) -> bool:
        return not self.allowed

    @classmethod
    def allow(cls) -> GuardDecision:
        return cls()

    @classmethod
    def deny(cls, denial: DenialKind, reason: str, redirect_target: str) -> GuardDecision:
        return cls(allowed=False, reason=reason, redirect_target=redirect_target, denial=denial)


# ── Access Guard ─────────────────────────────────────────────────


class AccessGuard:
    """Yes/no gate for ``(resource type, action, optional resource id)``.

    Each call is evaluated independently against the snapshot the guard
    was built with; the guard keeps no state between calls.

    Authentication comes from ``session`` when given, otherwise from the
    snapshot having a user. A session whose user differs from the
    snapshot's user is denied: the snapshot is stale.
    """

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        projects: ProjectAccessResolver,
        tasks: TaskAccessResolver,
        *,
        session: Optional[SessionProvider] = None,
        config: Optional[AccessConfig] = None,
    ) -> None:
        self._evaluator = evaluator
        self._projects = projects
        self._tasks = tasks
        self._session = session
        self._config = config or AccessConfig()

        self._instance_checks: dict[ResourceKind, Callable[[str], bool]] = {
            ResourceKind.PROJECT: projects.has_project_access,
            ResourceKind.TASK: tasks.has_task_access,
        }
        # Kinds a guard can be asked about; anything else is denied.
        self._guarded = frozenset(
            {ResourceKind.PROJECT, ResourceKind.TASK, ResourceKind.CALENDAR, ResourceKind.TRACKING}
        )

    @property
    def config(self) -> AccessConfig:
        return self._config

    @property
    def is_authenticated(self) -> bool:
        if self._session is not None:
            return self._session.is_authenticated()
        return self._evaluator.snapshot.available

    def _session_mismatch(self) -> bool:
        if self._session is None:
            return False
        return self._session.current_user_id() != self._evaluator.user_id

    def _unauthenticated(self) -> GuardDecision:
        return GuardDecision.deny(
            DenialKind.UNAUTHENTICATED,
            self._config.unauthenticated_message,
            self._config.login_path,
        )

    def _unauthorized(self, reason: Optional[str] = None) -> GuardDecision:
        return GuardDecision.deny(
            DenialKind.UNAUTHORIZED,
            reason or self._config.unauthorized_message,
            self._config.fallback_path,
        )

    def _precheck(self) -> Optional[GuardDecision]:
        """Authentication and snapshot consistency, shared by every gate."""
        if not self.is_authenticated:
            return self._unauthenticated()
        if self._session_mismatch():
            logger.debug(
                "Session user %s does not match snapshot user %s",
                self._session.current_user_id() if self._session else None,
                self._evaluator.user_id,
            )
            return self._unauthorized()
        return None

    def evaluate(
        self,
        resource_type: ResourceKind | str,
        action: Action | str = Action.VIEW,
        resource_id: Optional[str] = None,
    ) -> GuardDecision:
        """Decide whether the current user may perform ``action``.

        Decision logic:
        1. Not authenticated → deny (unauthenticated, redirect to login)
        2. Admin → allow
        3. project/task with ``resource_id``: ``view`` uses the resolver
           (inheritance included), other actions a scoped grant
        4. project/task without ``resource_id``: unscoped grant
           ("has this capability anywhere")
        5. calendar/tracking: unscoped grant

        Example::

            decision = guard.evaluate(ResourceKind.TASK, Action.VIEW, "t1")
            if decision.denied:
                notify(decision.reason)
                navigate(decision.redirect_target)
        """
        blocked = self._precheck()
        if blocked is not None:
            return blocked

        if self._evaluator.is_admin:
            return GuardDecision.allow()

        resource = ResourceKind(resource_type)
        action = Action(action)

        if self._check(resource, action, resource_id):
            return GuardDecision.allow()

        logger.debug(
            "Guard denied %s:%s (resource_id=%s) for user %s",
            resource.value,
            action.value,
            resource_id,
            self._evaluator.user_id,
        )
        return self._unauthorized()

    def _check(self, resource: ResourceKind, action: Action, resource_id: Optional[str]) -> bool:
        if resource not in self._guarded:
            return False

        instance_check = self._instance_checks.get(resource)
        if instance_check is None:
            return self._evaluator.has_permission(resource, action)

        if not resource_id:
            return self._evaluator.has_permission(resource, action)
        if action is Action.VIEW:
            return instance_check(resource_id)

        return self._evaluator.has_permission(resource, action, condition_for(resource, resource_id))

    def require_role(self, *roles: Role | str) -> GuardDecision:
        """Gate on the user's application role (admin always passes)."""
        blocked = self._precheck()
        if blocked is not None:
            return blocked
        if self._evaluator.is_admin or any(self._evaluator.has_role(role) for role in roles):
            return GuardDecision.allow()
        return self._unauthorized()

    def require_admin(self) -> GuardDecision:
        """Admin-only gate; denial carries the admin-only message."""
        blocked = self._precheck()
        if blocked is not None:
            return blocked
        if self._evaluator.is_admin:
            return GuardDecision.allow()
        return self._unauthorized(self._config.admin_only_message)


__all__ = [
    "AccessGuard",
    "GuardDecision",
]
