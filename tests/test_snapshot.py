"""Tests for Snapshot, build_snapshot and SnapshotStore."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from accesscore import (
    AccessContext,
    ConfigurationError,
    PermissionGrant,
    Project,
    ProjectMembership,
    Role,
    Snapshot,
    SnapshotLoadError,
    SnapshotLoader,
    SnapshotStore,
    Task,
    TaskAssignment,
    User,
    build_snapshot,
)


class FakeLoader:
    """In-memory SnapshotLoader."""

    def __init__(self, snapshots: dict[str, Snapshot] | None = None, error: Exception | None = None) -> None:
        self.snapshots = snapshots or {}
        self.error = error
        self.calls: list[str] = []

    async def load_snapshot(self, user_id: str) -> Snapshot:
        self.calls.append(user_id)
        if self.error is not None:
            raise self.error
        return self.snapshots[user_id]


class TestSnapshot:
    """Tests for the Snapshot value."""

    def test_unavailable(self) -> None:
        snapshot = Snapshot.unavailable()
        assert snapshot.available is False
        assert snapshot.user_id is None
        assert snapshot.grants == ()

    def test_frozen(self) -> None:
        snapshot = Snapshot(user=User(id="u1", role=Role.MEMBER))
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.grants = ()  # type: ignore[misc]

    def test_lists_stored_as_tuples(self) -> None:
        snapshot = Snapshot(user=User(id="u1", role=Role.MEMBER), tasks=[Task(id="t1", project_id="p1")])
        assert isinstance(snapshot.tasks, tuple)

    def test_find_task_and_project(self) -> None:
        snapshot = Snapshot(
            user=User(id="u1", role=Role.MEMBER),
            projects=(Project(id="p1"),),
            tasks=(Task(id="t1", project_id="p1"),),
        )
        assert snapshot.find_project("p1") == Project(id="p1")
        assert snapshot.find_task("t1").project_id == "p1"
        assert snapshot.find_task("missing") is None
        assert snapshot.find_task(None) is None
        assert snapshot.find_project("") is None

    def test_equality_ignores_indexes(self) -> None:
        user = User(id="u1", role=Role.MEMBER)
        assert Snapshot(user=user) == Snapshot(user=user)


class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_derives_grants_from_rows(self) -> None:
        snapshot = build_snapshot(
            User(id="u1", role=Role.MEMBER),
            memberships=[ProjectMembership(user_id="u1", project_id="p1", role="manager")],
            assignments=[TaskAssignment(task_id="t1", assigned_to="u1")],
        )
        actions = {(g.resource.value, g.action.value) for g in snapshot.grants}
        assert actions == {
            ("project", "view"),
            ("project", "edit"),
            ("project", "manage_members"),
            ("task", "view"),
            ("task", "edit"),
        }

    def test_keeps_explicit_grants_first(self) -> None:
        explicit = PermissionGrant.model_validate({"resource": "calendar", "action": "view"})
        snapshot = build_snapshot(
            User(id="u1", role=Role.MEMBER),
            memberships=[ProjectMembership(user_id="u1", project_id="p1", role="member")],
            grants=[explicit],
        )
        assert snapshot.grants[0] == explicit
        assert len(snapshot.grants) == 2

    def test_derive_disabled(self) -> None:
        snapshot = build_snapshot(
            User(id="u1", role=Role.MEMBER),
            memberships=[ProjectMembership(user_id="u1", project_id="p1", role="member")],
            derive=False,
        )
        assert snapshot.grants == ()
        assert len(snapshot.memberships) == 1

    def test_drops_rows_of_other_users(self) -> None:
        snapshot = build_snapshot(
            User(id="u1", role=Role.MEMBER),
            memberships=[
                ProjectMembership(user_id="u1", project_id="p1", role="member"),
                ProjectMembership(user_id="u2", project_id="p2", role="manager"),
            ],
            assignments=[
                TaskAssignment(task_id="t1", assigned_to="u2"),
            ],
        )
        assert [m.project_id for m in snapshot.memberships] == ["p1"]
        assert snapshot.assignments == ()
        assert {g.conditions.id for g in snapshot.grants} == {"p1"}


class TestSnapshotStore:
    """Tests for SnapshotStore replacement and reload."""

    def test_starts_unavailable(self) -> None:
        assert SnapshotStore().current.available is False

    def test_replace_returns_previous(self) -> None:
        first = Snapshot(user=User(id="u1", role=Role.MEMBER))
        second = Snapshot(user=User(id="u1", role=Role.MANAGER))
        store = SnapshotStore(first)
        assert store.replace(second) is first
        assert store.current is second

    def test_clear(self) -> None:
        store = SnapshotStore(Snapshot(user=User(id="u1", role=Role.MEMBER)))
        store.clear()
        assert store.current.available is False

    def test_context_keeps_its_snapshot_after_swap(self) -> None:
        store = SnapshotStore(Snapshot(user=User(id="u1", role=Role.ADMIN)))
        ctx = AccessContext.from_store(store)
        store.replace(Snapshot(user=User(id="u1", role=Role.MEMBER)))
        assert ctx.evaluator.is_admin is True
        assert AccessContext.from_store(store).evaluator.is_admin is False

    def test_loader_satisfies_protocol(self) -> None:
        assert isinstance(FakeLoader(), SnapshotLoader)

    @pytest.mark.asyncio
    async def test_reload_swaps_in_loaded_snapshot(self) -> None:
        loaded = build_snapshot(User(id="u1", role=Role.MANAGER))
        loader = FakeLoader({"u1": loaded})
        store = SnapshotStore()
        assert await store.reload(loader, "u1") is True
        assert store.current is loaded
        assert loader.calls == ["u1"]

    @pytest.mark.asyncio
    async def test_reload_failure_leaves_unavailable(self, caplog: pytest.LogCaptureFixture) -> None:
        store = SnapshotStore(Snapshot(user=User(id="u1", role=Role.ADMIN)))
        loader = FakeLoader(error=SnapshotLoadError("grants query failed", user_id="u1"))
        with caplog.at_level(logging.WARNING, logger="accesscore.permissions.snapshot"):
            assert await store.reload(loader, "u1") is False
        assert store.current.available is False
        assert "SNAPSHOT_LOAD_ERROR" in caplog.text

    @pytest.mark.asyncio
    async def test_reload_any_core_error_fails_closed(self) -> None:
        store = SnapshotStore()
        loader = FakeLoader(error=ConfigurationError("bad loader config"))
        assert await store.reload(loader, "u1") is False
        assert store.current.available is False

    @pytest.mark.asyncio
    async def test_reload_rejects_empty_snapshot(self) -> None:
        store = SnapshotStore(Snapshot(user=User(id="u1", role=Role.MEMBER)))
        loader = FakeLoader({"u1": Snapshot.unavailable()})
        assert await store.reload(loader, "u1") is False
        assert store.current.available is False

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate_after_clearing(self) -> None:
        """A raising loader never leaves the previous, privileged snapshot live."""
        store = SnapshotStore(Snapshot(user=User(id="u1", role=Role.ADMIN)))
        loader = FakeLoader(error=ConnectionError("grants backend down"))
        with pytest.raises(ConnectionError):
            await store.reload(loader, "u1")
        assert store.current.available is False
        assert AccessContext.from_store(store).evaluator.is_admin is False
