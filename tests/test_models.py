"""Tests for permission models and condition variants."""

from __future__ import annotations

from uuid import UUID

import pytest
from pydantic import ValidationError

from accesscore import (
    Action,
    CalendarEvent,
    PermissionGrant,
    ProjectCondition,
    ResourceKind,
    Task,
    TaskCondition,
    UnsupportedResourceError,
    User,
    UserCondition,
    condition_for,
)
from accesscore.permissions import field_value


class TestPermissionGrant:
    """Parsing grants from their stored form."""

    def test_stored_mapping_becomes_variant(self) -> None:
        g = PermissionGrant.model_validate(
            {"resource": "project", "action": "view", "conditions": {"id": "p1"}}
        )
        assert g.resource is ResourceKind.PROJECT
        assert g.action is Action.VIEW
        assert g.conditions == ProjectCondition(id="p1")
        assert g.scoped is True

    def test_task_mapping_becomes_task_condition(self) -> None:
        g = PermissionGrant.model_validate({"resource": "task", "action": "edit", "conditions": {"id": "t1"}})
        assert isinstance(g.conditions, TaskCondition)

    def test_user_self_grant(self) -> None:
        g = PermissionGrant.model_validate({"resource": "user", "action": "self", "conditions": {"id": "u1"}})
        assert g.conditions == UserCondition(id="u1")

    def test_no_conditions(self) -> None:
        g = PermissionGrant.model_validate({"resource": "calendar", "action": "view"})
        assert g.conditions is None
        assert g.scoped is False

    def test_empty_conditions_mean_unconditioned(self) -> None:
        g = PermissionGrant.model_validate({"resource": "project", "action": "view", "conditions": {}})
        assert g.conditions is None

    def test_typed_condition_accepted(self) -> None:
        g = PermissionGrant(resource=ResourceKind.TASK, action=Action.VIEW, conditions=TaskCondition(id="t9"))
        assert g.conditions == TaskCondition(id="t9")

    def test_calendar_rejects_conditions(self) -> None:
        with pytest.raises(ValidationError):
            PermissionGrant.model_validate({"resource": "calendar", "action": "view", "conditions": {"id": "x"}})

    def test_unknown_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PermissionGrant.model_validate({"resource": "project", "action": "delete"})

    def test_grants_are_immutable(self) -> None:
        g = PermissionGrant(resource=ResourceKind.PROJECT, action=Action.VIEW)
        with pytest.raises(ValidationError):
            g.action = Action.EDIT  # type: ignore[misc]

    def test_duplicate_grants_are_equal(self) -> None:
        a = PermissionGrant.model_validate({"resource": "project", "action": "view", "conditions": {"id": "p1"}})
        b = PermissionGrant.model_validate({"resource": "project", "action": "view", "conditions": {"id": "p1"}})
        assert a == b
        assert len({a, b}) == 1


class TestConditions:
    """Condition variants only match their own kind."""

    def test_variants_with_same_id_differ(self) -> None:
        assert ProjectCondition(id="x") != TaskCondition(id="x")

    def test_condition_for_project(self) -> None:
        assert condition_for(ResourceKind.PROJECT, "p1") == ProjectCondition(id="p1")

    def test_condition_for_accepts_string_kind(self) -> None:
        assert condition_for("task", "t1") == TaskCondition(id="t1")

    def test_ids_normalised_to_str(self) -> None:
        uid = UUID("12345678-1234-5678-1234-567812345678")
        assert ProjectCondition(id=7) == ProjectCondition(id="7")
        assert condition_for("task", uid) == TaskCondition(id=str(uid))
        g = PermissionGrant.model_validate({"resource": "project", "action": "view", "conditions": {"id": 7}})
        assert g.conditions == ProjectCondition(id="7")

    def test_condition_for_unsupported_kind(self) -> None:
        with pytest.raises(UnsupportedResourceError) as exc:
            condition_for(ResourceKind.TRACKING, "x")
        assert exc.value.code == "UNSUPPORTED_RESOURCE"
        assert exc.value.details == {"resource": "tracking"}


class TestEntities:
    """Entity models and field access."""

    def test_user_role_from_string(self) -> None:
        assert User(id="u1", role="admin").role.value == "admin"

    def test_invalid_role(self) -> None:
        with pytest.raises(ValidationError):
            User(id="u1", role="owner")

    def test_task_requires_project(self) -> None:
        with pytest.raises(ValidationError):
            Task(id="t1")  # type: ignore[call-arg]

    def test_extra_fields_kept(self) -> None:
        event = CalendarEvent(id="e1", title="Standup")
        assert event.title == "Standup"  # type: ignore[attr-defined]

    def test_field_value_model_and_mapping(self) -> None:
        assert field_value(Task(id="t1", project_id="p1"), "project_id") == "p1"
        assert field_value({"project_id": "p2"}, "project_id") == "p2"
        assert field_value({"id": "x"}, "task_id") is None
        assert field_value(CalendarEvent(id="e1"), "task_id") is None
