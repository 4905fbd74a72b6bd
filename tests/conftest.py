"""Shared builders for accesscore tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from accesscore import (
    AccessContext,
    PermissionGrant,
    Project,
    ProjectMembership,
    Role,
    Snapshot,
    Task,
    TaskAssignment,
    User,
)


@pytest.fixture
def make_snapshot() -> Callable[..., Snapshot]:
    """Factory for a snapshot with explicit grants (no derivation)."""

    def _make(
        role: Role | str = Role.MEMBER,
        *,
        user_id: str = "u1",
        grants: tuple[PermissionGrant, ...] | list[PermissionGrant] = (),
        memberships: list[tuple[str, str]] = (),  # type: ignore[assignment]
        assignments: list[str] = (),  # type: ignore[assignment]
        projects: list[str] = (),  # type: ignore[assignment]
        tasks: list[tuple[str, str]] = (),  # type: ignore[assignment]
    ) -> Snapshot:
        return Snapshot(
            user=User(id=user_id, role=role),
            grants=tuple(grants),
            memberships=tuple(
                ProjectMembership(user_id=user_id, project_id=project_id, role=project_role)
                for project_id, project_role in memberships
            ),
            assignments=tuple(TaskAssignment(task_id=task_id, assigned_to=user_id) for task_id in assignments),
            projects=tuple(Project(id=project_id) for project_id in projects),
            tasks=tuple(Task(id=task_id, project_id=project_id) for task_id, project_id in tasks),
        )

    return _make


@pytest.fixture
def make_context(make_snapshot: Callable[..., Snapshot]) -> Callable[..., AccessContext]:
    """Factory for an AccessContext over ``make_snapshot(**kwargs)``."""

    def _make(role: Role | str = Role.MEMBER, **kwargs: Any) -> AccessContext:
        return AccessContext(make_snapshot(role, **kwargs))

    return _make
