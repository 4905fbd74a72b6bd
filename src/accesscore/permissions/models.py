"""Data model for permission snapshots and the entities they protect.

Pydantic models, frozen so that a snapshot built from them cannot be
mutated in place. Entity models keep unknown fields coming from storage
(``extra="allow"``); the core only reads the linkage fields.

Conditions are a tagged variant (``kind`` discriminator) instead of a
free-form mapping: a ``ProjectCondition("p1")`` never matches a
``TaskCondition("p1")``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..exceptions import UnsupportedResourceError
from .constants import Action, AssignmentStatus, ProjectRole, ResourceKind, Role

_FROZEN = ConfigDict(frozen=True, extra="forbid")
_ENTITY = ConfigDict(frozen=True, extra="allow")


# ── Conditions ──────────────────────────────────────────


class _InstanceCondition(BaseModel):
    """Common base: an instance id, normalised to ``str``.

    Raw rows may carry int or UUID ids; a condition built from them must
    compare equal to the one parsed from a stored grant.
    """

    model_config = _FROZEN

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class ProjectCondition(_InstanceCondition):
    """Scopes a grant to one project."""

    kind: Literal["project"] = "project"


class TaskCondition(_InstanceCondition):
    """Scopes a grant to one task."""

    kind: Literal["task"] = "task"


class UserCondition(_InstanceCondition):
    """Scopes a grant to one user (used by ``user:self``)."""

    kind: Literal["user"] = "user"


Condition = Annotated[
    Union[ProjectCondition, TaskCondition, UserCondition],
    Field(discriminator="kind"),
]

CONDITION_TYPES: dict[ResourceKind, type[BaseModel]] = {
    ResourceKind.PROJECT: ProjectCondition,
    ResourceKind.TASK: TaskCondition,
    ResourceKind.USER: UserCondition,
}


def condition_for(kind: ResourceKind | str, resource_id: str) -> ProjectCondition | TaskCondition | UserCondition:
    """Build the instance condition for a resource kind.

    Raises:
        UnsupportedResourceError: for kinds without instance scoping
            (calendar, tracking).

    Example::

        condition_for(ResourceKind.PROJECT, "p1")  # ProjectCondition(id="p1")
    """
    resource = ResourceKind(kind)
    condition_cls = CONDITION_TYPES.get(resource)
    if condition_cls is None:
        raise UnsupportedResourceError(
            f"Resource '{resource.value}' has no instance conditions",
            resource=resource.value,
        )
    return condition_cls(id=resource_id)  # type: ignore[return-value]


# ── Snapshot rows ───────────────────────────────────────


class User(BaseModel):
    """Authenticated user as seen by the core: an id and a role."""

    model_config = _ENTITY

    id: str
    role: Role


class PermissionGrant(BaseModel):
    """``user may perform action on resource``, optionally for one instance.

    Accepts the stored form where ``conditions`` is a plain mapping::

        PermissionGrant.model_validate(
            {"resource": "project", "action": "view", "conditions": {"id": "p1"}}
        )

    The mapping is turned into the condition variant of ``resource``.
    An empty mapping means "no conditions".
    """

    model_config = _FROZEN

    resource: ResourceKind
    action: Action
    conditions: Optional[Condition] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_conditions(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        raw = data.get("conditions")
        if not isinstance(raw, Mapping):
            return data
        data = dict(data)
        if not raw:
            data["conditions"] = None
        elif "kind" not in raw:
            resource = ResourceKind(data.get("resource"))
            if resource not in CONDITION_TYPES:
                raise ValueError(f"Resource '{resource.value}' does not accept conditions")
            data["conditions"] = {**raw, "kind": resource.value}
        return data

    @property
    def scoped(self) -> bool:
        return self.conditions is not None


class ProjectMembership(BaseModel):
    model_config = _ENTITY

    user_id: str
    project_id: str
    role: ProjectRole


class TaskAssignment(BaseModel):
    model_config = _ENTITY

    task_id: str
    assigned_to: str
    status: AssignmentStatus = AssignmentStatus.ASSIGNED


# ── Domain entities ─────────────────────────────────────


class Project(BaseModel):
    model_config = _ENTITY

    id: str
    name: str = ""


class Task(BaseModel):
    """A task always belongs to a project; access inherits through ``project_id``."""

    model_config = _ENTITY

    id: str
    project_id: str
    title: str = ""


class CalendarEvent(BaseModel):
    """Calendar entry; any combination of links may be set, including none."""

    model_config = _ENTITY

    id: str
    task_id: Optional[str] = None
    project_id: Optional[str] = None
    user_id: Optional[str] = None


class TimeEntry(BaseModel):
    """Time-tracking record; any combination of links may be set, including none."""

    model_config = _ENTITY

    id: str
    task_id: Optional[str] = None
    project_id: Optional[str] = None
    user_id: Optional[str] = None


def field_value(item: Any, name: str) -> Any:
    """Read ``name`` from a model/object attribute or a mapping key.

    Returns None when the field is absent, so filters accept both typed
    models and raw rows.
    """
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


__all__ = [
    "CONDITION_TYPES",
    "CalendarEvent",
    "Condition",
    "PermissionGrant",
    "Project",
    "ProjectCondition",
    "ProjectMembership",
    "Task",
    "TaskAssignment",
    "TaskCondition",
    "TimeEntry",
    "User",
    "UserCondition",
    "condition_for",
    "field_value",
]
