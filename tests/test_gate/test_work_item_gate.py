"""Tests for WorkItemGate: setting work item properties under authorization.

Every scenario runs for each property setter under both revoke modes.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from flowauthz.audit.decision_log import DecisionAuditLog
from flowauthz.exceptions import AuthorizationDenied
from flowauthz.gate.operations import (
    OPERATION_REQUIREMENTS,
    OperationKind,
    WorkItemRef,
    build_request,
)
from flowauthz.gate.work_item_gate import WorkItemGate
from flowauthz.policy.revoke_mode import RevokeMode
from flowauthz.principals import Principal, PrincipalContext
from flowauthz.resolver.resolver import PermissionResolver
from flowauthz.resources.model import ANY, Permission, ResourceModel, ResourceType
from flowauthz.store.memory_store import AuthorizationStore
from flowauthz.store.records import AuthorizationRecord

PROCESS_KEY = "oneTaskProcess"
USER_ID = "u1"
CONTEXT = PrincipalContext(USER_ID)

_DUE = datetime(2026, 10, 18, 9, 30, 0)

_VALUES: dict[OperationKind, object] = {
    OperationKind.SET_PRIORITY: 80,
    OperationKind.SET_NAME: "name",
    OperationKind.SET_DESCRIPTION: "description",
    OperationKind.SET_DUE_DATE: _DUE,
    OperationKind.SET_FOLLOW_UP_DATE: _DUE,
}


class _ItemService:
    """Stand-in for the host engine's property setters."""

    def __init__(self) -> None:
        self.properties: dict[tuple[str, OperationKind], object] = {}

    def apply(self, item_id: str, operation: OperationKind, value: object) -> object:
        self.properties[(item_id, operation)] = value
        return value


def _grant(
    store: AuthorizationStore,
    resource_type: ResourceType,
    resource_id: str,
    permission: Permission,
    principal: Principal | None = None,
) -> None:
    store.grant(
        AuthorizationRecord.granting(
            resource_type, resource_id, principal or Principal.user(USER_ID), [permission]
        )
    )


@pytest.fixture()
def store() -> AuthorizationStore:
    return AuthorizationStore()


@pytest.fixture(params=list(RevokeMode), ids=lambda m: m.value)
def gate(request: pytest.FixtureRequest, store: AuthorizationStore) -> WorkItemGate:
    return WorkItemGate(PermissionResolver(store, revoke_mode=request.param))


@pytest.fixture(params=list(OperationKind), ids=lambda o: o.value)
def operation(request: pytest.FixtureRequest) -> OperationKind:
    return request.param


@pytest.fixture()
def service() -> _ItemService:
    return _ItemService()


def _run(
    gate: WorkItemGate,
    service: _ItemService,
    operation: OperationKind,
    item: WorkItemRef,
    context: PrincipalContext = CONTEXT,
) -> object:
    value = _VALUES[operation]
    return gate.guard(context, operation, item, service.apply, item.item_id, operation, value)


# ---------------------------------------------------------------------------
# Request table
# ---------------------------------------------------------------------------


class TestBuildRequest:
    def test_every_operation_has_a_requirement(self) -> None:
        assert set(OPERATION_REQUIREMENTS) == set(OperationKind)

    def test_process_item_yields_four_paths(self, operation: OperationKind) -> None:
        request = build_request(operation, WorkItemRef("t1", PROCESS_KEY), ResourceModel.default())
        assert [
            (p.primary.resource_type, p.primary.resource_id, p.primary.permission) for p in request
        ] == [
            (ResourceType.WORK_ITEM, "t1", Permission.ASSIGN),
            (ResourceType.WORK_ITEM, "t1", Permission.UPDATE),
            (ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, Permission.ASSIGN),
            (ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, Permission.UPDATE_ITEMS),
        ]

    def test_standalone_item_omits_template_paths(self, operation: OperationKind) -> None:
        request = build_request(operation, WorkItemRef("t1"), ResourceModel.default())
        assert [p.primary.permission for p in request] == [Permission.ASSIGN, Permission.UPDATE]
        assert all(p.primary.resource_type is ResourceType.WORK_ITEM for p in request)

    def test_every_operation_builds_the_same_request(self) -> None:
        item = WorkItemRef("t1", PROCESS_KEY)
        model = ResourceModel.default()
        requests = {build_request(op, item, model) for op in OperationKind}
        assert len(requests) == 1


class TestWorkItemRef:
    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            WorkItemRef("")

    def test_wildcard_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            WorkItemRef(ANY)

    def test_wildcard_template_rejected(self) -> None:
        with pytest.raises(ValueError):
            WorkItemRef("t1", ANY)

    def test_standalone(self) -> None:
        assert WorkItemRef("t1").is_standalone
        assert not WorkItemRef("t1", PROCESS_KEY).is_standalone


# ---------------------------------------------------------------------------
# Standalone items
# ---------------------------------------------------------------------------


class TestStandaloneItem:
    def test_without_authorization(
        self, gate: WorkItemGate, service: _ItemService, operation: OperationKind
    ) -> None:
        with pytest.raises(AuthorizationDenied) as exc_info:
            _run(gate, service, operation, WorkItemRef("t1"))
        message = str(exc_info.value)
        assert (
            f"The user with id '{USER_ID}' does not have one of the following permissions: 'ASSIGN'"
            in message
        )
        assert message.endswith("'UPDATE' permission on resource 't1' of type 'WorkItem'")
        assert [m.permission for m in exc_info.value.missing] == [Permission.ASSIGN, Permission.UPDATE]
        assert service.properties == {}

    def test_with_update_permission(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.UPDATE)
        assert _run(gate, service, operation, WorkItemRef("t1")) == _VALUES[operation]
        assert service.properties[("t1", operation)] == _VALUES[operation]

    def test_with_assign_permission(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.ASSIGN)
        _run(gate, service, operation, WorkItemRef("t1"))
        assert service.properties[("t1", operation)] == _VALUES[operation]

    def test_grant_on_unrelated_item_does_not_authorize(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t2", Permission.UPDATE)
        with pytest.raises(AuthorizationDenied):
            _run(gate, service, operation, WorkItemRef("t1"))


# ---------------------------------------------------------------------------
# Items spawned by a process instance
# ---------------------------------------------------------------------------


class TestProcessItem:
    item = WorkItemRef("t1", PROCESS_KEY)

    def test_without_authorization(
        self, gate: WorkItemGate, service: _ItemService, operation: OperationKind
    ) -> None:
        with pytest.raises(AuthorizationDenied) as exc_info:
            _run(gate, service, operation, self.item)
        message = str(exc_info.value)
        for token in (USER_ID, "UPDATE", "t1", "WorkItem", "UPDATE_ITEMS", "ProcessTemplate"):
            assert token in message
        missing = [(m.permission, m.resource_id) for m in exc_info.value.missing]
        assert missing == [
            (Permission.ASSIGN, "t1"),
            (Permission.UPDATE, "t1"),
            (Permission.ASSIGN, PROCESS_KEY),
            (Permission.UPDATE_ITEMS, PROCESS_KEY),
        ]
        assert "following permissions: 'ASSIGN' permission on resource 't1'" in message
        assert service.properties == {}

    def test_then_granted_assign_authorizes(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        with pytest.raises(AuthorizationDenied):
            _run(gate, service, operation, self.item)
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.ASSIGN)
        _run(gate, service, operation, self.item)
        assert service.properties[("t1", operation)] == _VALUES[operation]

    @pytest.mark.parametrize("permission", [Permission.UPDATE, Permission.ASSIGN])
    def test_with_permission_on_any_item(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
        permission: Permission,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, ANY, permission)
        _run(gate, service, operation, self.item)
        _run(gate, service, operation, WorkItemRef("t2", PROCESS_KEY))
        assert ("t2", operation) in service.properties

    @pytest.mark.parametrize("permission", [Permission.UPDATE_ITEMS, Permission.ASSIGN])
    def test_with_permission_on_process_template(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
        permission: Permission,
    ) -> None:
        _grant(store, ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, permission)
        _run(gate, service, operation, self.item)
        assert service.properties[("t1", operation)] == _VALUES[operation]

    def test_with_template_permission_on_other_template(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.PROCESS_TEMPLATE, "otherProcess", Permission.UPDATE_ITEMS)
        with pytest.raises(AuthorizationDenied):
            _run(gate, service, operation, self.item)

    def test_with_item_and_template_update(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.UPDATE)
        _grant(store, ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, Permission.UPDATE_ITEMS)
        _run(gate, service, operation, self.item)
        assert ("t1", operation) in service.properties

    def test_with_item_and_template_assign(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.ASSIGN)
        _grant(store, ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, Permission.ASSIGN)
        _run(gate, service, operation, self.item)
        assert ("t1", operation) in service.properties

    def test_group_permission_on_template(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(
            store,
            ResourceType.PROCESS_TEMPLATE,
            ANY,
            Permission.UPDATE_ITEMS,
            principal=Principal.group("clerks"),
        )
        _run(gate, service, operation, self.item, PrincipalContext(USER_ID, ("clerks",)))
        assert ("t1", operation) in service.properties


# ---------------------------------------------------------------------------
# Revokes
# ---------------------------------------------------------------------------


class TestRevokes:
    item = WorkItemRef("t1", PROCESS_KEY)

    def test_instance_revoke_beats_wildcard_grant(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        _grant(store, ResourceType.WORK_ITEM, ANY, Permission.UPDATE)
        store.revoke(
            AuthorizationRecord.revoking(
                ResourceType.WORK_ITEM, "t1", Principal.user(USER_ID), [Permission.UPDATE]
            )
        )
        with pytest.raises(AuthorizationDenied):
            _run(gate, service, operation, self.item)
        _run(gate, service, operation, WorkItemRef("t2", PROCESS_KEY))

    def test_revoke_on_item_leaves_template_path_open(
        self,
        gate: WorkItemGate,
        store: AuthorizationStore,
        service: _ItemService,
        operation: OperationKind,
    ) -> None:
        store.revoke(
            AuthorizationRecord.revoking(
                ResourceType.WORK_ITEM, ANY, Principal.user(USER_ID), [Permission.ALL]
            )
        )
        _grant(store, ResourceType.PROCESS_TEMPLATE, PROCESS_KEY, Permission.UPDATE_ITEMS)
        _run(gate, service, operation, self.item)
        assert ("t1", operation) in service.properties


# ---------------------------------------------------------------------------
# Gate options
# ---------------------------------------------------------------------------


class TestGateOptions:
    def test_disabled_gate_authorizes_without_records(self, store: AuthorizationStore) -> None:
        gate = WorkItemGate(PermissionResolver(store), enabled=False)
        decision = gate.check(CONTEXT, OperationKind.SET_NAME, WorkItemRef("t1"))
        assert decision.authorized
        assert gate.enabled is False

    def test_check_returns_granting_decision(self, store: AuthorizationStore) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.ASSIGN)
        gate = WorkItemGate(PermissionResolver(store))
        decision = gate.check(CONTEXT, OperationKind.SET_NAME, WorkItemRef("t1", PROCESS_KEY))
        assert decision.granted_path.primary.permission is Permission.ASSIGN  # type: ignore[union-attr]

    def test_denials_are_audited(self, store: AuthorizationStore, tmp_path: Path) -> None:
        log = DecisionAuditLog(tmp_path / "audit.jsonl")
        gate = WorkItemGate(PermissionResolver(store), audit_log=log)
        with pytest.raises(AuthorizationDenied):
            gate.check(CONTEXT, OperationKind.SET_DUE_DATE, WorkItemRef("t1", PROCESS_KEY))
        (entry,) = log.denials()
        assert entry["operation"] == "set_due_date"
        assert entry["user_id"] == USER_ID
        assert entry["template_key"] == PROCESS_KEY
        assert len(entry["missing"]) == 4

    def test_grants_not_audited_by_default(self, store: AuthorizationStore, tmp_path: Path) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.UPDATE)
        log = DecisionAuditLog(tmp_path / "audit.jsonl")
        gate = WorkItemGate(PermissionResolver(store), audit_log=log)
        gate.check(CONTEXT, OperationKind.SET_NAME, WorkItemRef("t1"))
        assert log.count() == 0

    def test_grants_audited_when_requested(self, store: AuthorizationStore, tmp_path: Path) -> None:
        _grant(store, ResourceType.WORK_ITEM, "t1", Permission.UPDATE)
        log = DecisionAuditLog(tmp_path / "audit.jsonl")
        gate = WorkItemGate(PermissionResolver(store), audit_log=log, audit_grants=True)
        gate.check(CONTEXT, OperationKind.SET_NAME, WorkItemRef("t1"))
        (entry,) = log.read_all()
        assert entry["event"] == "authorization_granted"
        assert entry["granted_by"][0]["permission"] == "UPDATE"

    def test_operation_given_as_string(self, store: AuthorizationStore, tmp_path: Path) -> None:
        log = DecisionAuditLog(tmp_path / "audit.jsonl")
        gate = WorkItemGate(PermissionResolver(store), audit_log=log)
        with pytest.raises(AuthorizationDenied):
            gate.check(CONTEXT, "set_name", WorkItemRef("t1"))  # type: ignore[arg-type]
        (entry,) = log.denials()
        assert entry["operation"] == "set_name"

    def test_unknown_operation_string_rejected(self, store: AuthorizationStore) -> None:
        gate = WorkItemGate(PermissionResolver(store))
        with pytest.raises(ValueError):
            gate.check(CONTEXT, "set_colour", WorkItemRef("t1"))  # type: ignore[arg-type]
