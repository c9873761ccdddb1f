"""Convenience API for flowauthz: one object wiring the whole core.

Example
-------
::

    from flowauthz import (
        AuthorizationGovernor, OperationKind, Permission, PrincipalContext,
        ResourceType, WorkItemRef,
    )
    governor = AuthorizationGovernor()
    governor.grant_user("u1", ResourceType.WORK_ITEM, "t1", [Permission.ASSIGN])
    governor.check(PrincipalContext("u1"), OperationKind.SET_NAME, WorkItemRef("t1"))
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from flowauthz.audit.decision_log import DecisionAuditLog
from flowauthz.config.settings import AuthorizationSettings, SettingsLoader
from flowauthz.gate.operations import OperationKind, WorkItemRef
from flowauthz.gate.work_item_gate import WorkItemGate
from flowauthz.principals import Principal, PrincipalContext
from flowauthz.reporting.reporter import DecisionReporter
from flowauthz.resolver.decision import Decision
from flowauthz.resolver.request import AuthorizationRequest
from flowauthz.resolver.resolver import PermissionResolver
from flowauthz.resources.model import Permission, ResourceModel, ResourceType
from flowauthz.store.loader import AuthorizationLoader
from flowauthz.store.memory_store import AuthorizationStore
from flowauthz.store.records import AuthorizationRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthorizationGovernor:
    """Zero-config authorization core for work item mutations.

    Parameters
    ----------
    settings:
        Validated settings. Defaults apply when omitted (``AUTO`` revoke
        mode, checks enabled, no audit log).
    store:
        Existing store to resolve against. A new empty store is created
        when omitted. Records from ``settings.authorization_files`` are
        loaded into it.
    model:
        Resource catalog; the built-in one by default.
    """

    def __init__(
        self,
        settings: AuthorizationSettings | None = None,
        store: AuthorizationStore | None = None,
        model: ResourceModel | None = None,
    ) -> None:
        self._settings = settings or SettingsLoader().defaults()
        self._model = model or ResourceModel.default()
        self._store = store if store is not None else AuthorizationStore()

        loader = AuthorizationLoader(self._model)
        for path in self._settings.authorization_files:
            loader.load(path, store=self._store)

        self._resolver = PermissionResolver(
            self._store, revoke_mode=self._settings.revoke_mode, model=self._model
        )
        self._reporter = DecisionReporter(self._model)
        audit_log = (
            DecisionAuditLog(self._settings.audit.log_path)
            if self._settings.audit.enabled
            else None
        )
        self._gate = WorkItemGate(
            self._resolver,
            reporter=self._reporter,
            enabled=self._settings.authorization_enabled,
            audit_log=audit_log,
            audit_grants=self._settings.audit.record_grants,
        )
        logger.debug(
            "AuthorizationGovernor ready: revoke_mode=%s enabled=%s records=%d",
            self._settings.revoke_mode.value,
            self._settings.authorization_enabled,
            len(self._store),
        )

    @classmethod
    def from_file(cls, config_path: str | Path) -> AuthorizationGovernor:
        """Build a governor from a settings YAML file."""
        return cls(SettingsLoader().load(Path(config_path)))

    # ------------------------------------------------------------------
    # Record management
    # ------------------------------------------------------------------

    def grant_user(
        self,
        user_id: str,
        resource_type: ResourceType,
        resource_id: str,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return self._store.grant(
            AuthorizationRecord.granting(resource_type, resource_id, Principal.user(user_id), permissions)
        )

    def grant_group(
        self,
        group_id: str,
        resource_type: ResourceType,
        resource_id: str,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return self._store.grant(
            AuthorizationRecord.granting(resource_type, resource_id, Principal.group(group_id), permissions)
        )

    def revoke_user(
        self,
        user_id: str,
        resource_type: ResourceType,
        resource_id: str,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return self._store.revoke(
            AuthorizationRecord.revoking(resource_type, resource_id, Principal.user(user_id), permissions)
        )

    def revoke_group(
        self,
        group_id: str,
        resource_type: ResourceType,
        resource_id: str,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return self._store.revoke(
            AuthorizationRecord.revoking(resource_type, resource_id, Principal.group(group_id), permissions)
        )

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def authorize(self, context: PrincipalContext, request: AuthorizationRequest) -> Decision:
        """Resolve an arbitrary request without raising."""
        return self._resolver.authorize(context, request)

    def check(
        self,
        context: PrincipalContext,
        operation: OperationKind,
        item: WorkItemRef,
    ) -> Decision:
        """Authorize a work item operation; raises ``AuthorizationDenied``."""
        return self._gate.check(context, operation, item)

    def guard(
        self,
        context: PrincipalContext,
        operation: OperationKind,
        item: WorkItemRef,
        mutation: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        return self._gate.guard(context, operation, item, mutation, *args, **kwargs)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def settings(self) -> AuthorizationSettings:
        return self._settings

    @property
    def store(self) -> AuthorizationStore:
        return self._store

    @property
    def resolver(self) -> PermissionResolver:
        return self._resolver

    @property
    def reporter(self) -> DecisionReporter:
        return self._reporter

    @property
    def gate(self) -> WorkItemGate:
        return self._gate

    def __repr__(self) -> str:
        return (
            f"AuthorizationGovernor(revoke_mode={self._settings.revoke_mode.value!r}, "
            f"records={len(self._store)})"
        )
