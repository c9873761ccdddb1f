"""flowauthz: permission resolution for process engine work items.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import flowauthz as authz
>>> governor = authz.AuthorizationGovernor()
>>> _ = governor.grant_user("u1", authz.ResourceType.WORK_ITEM, "t1", [authz.Permission.ASSIGN])
>>> governor.check(
...     authz.PrincipalContext("u1"),
...     authz.OperationKind.SET_PRIORITY,
...     authz.WorkItemRef("t1", template_key="oneTaskProcess"),
... ).authorized
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

from flowauthz.convenience import AuthorizationGovernor
from flowauthz.exceptions import (
    AuthorizationConfigError,
    AuthorizationDenied,
    InvalidAuthorizationRequest,
)
from flowauthz.principals import Principal, PrincipalContext, PrincipalKind

# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------
from flowauthz.resources.model import ANY, Permission, ResourceModel, ResourceType

# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
from flowauthz.store.loader import AuthorizationLoader
from flowauthz.store.memory_store import AuthorizationSnapshot, AuthorizationStore
from flowauthz.store.records import AuthorizationKind, AuthorizationRecord

# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------
from flowauthz.policy.revoke_mode import RevokeMode, evaluate_always, evaluate_auto
from flowauthz.resolver.decision import Decision, MissingAuthorization
from flowauthz.resolver.request import AuthorizationPath, AuthorizationRequest, PermissionCheck
from flowauthz.resolver.resolver import PermissionResolver
from flowauthz.reporting.reporter import DecisionReporter

# ---------------------------------------------------------------------------
# Gate, settings, audit
# ---------------------------------------------------------------------------
from flowauthz.gate.operations import OPERATION_REQUIREMENTS, OperationKind, WorkItemRef
from flowauthz.gate.work_item_gate import WorkItemGate
from flowauthz.config.settings import AuditSettings, AuthorizationSettings, SettingsLoader
from flowauthz.audit.decision_log import DecisionAuditLog

__all__ = [
    "__version__",
    "AuthorizationGovernor",
    # Errors
    "AuthorizationConfigError",
    "AuthorizationDenied",
    "InvalidAuthorizationRequest",
    # Principals
    "Principal",
    "PrincipalContext",
    "PrincipalKind",
    # Resources
    "ANY",
    "Permission",
    "ResourceModel",
    "ResourceType",
    # Store
    "AuthorizationKind",
    "AuthorizationLoader",
    "AuthorizationRecord",
    "AuthorizationSnapshot",
    "AuthorizationStore",
    # Resolution
    "AuthorizationPath",
    "AuthorizationRequest",
    "Decision",
    "DecisionReporter",
    "MissingAuthorization",
    "PermissionCheck",
    "PermissionResolver",
    "RevokeMode",
    "evaluate_always",
    "evaluate_auto",
    # Gate, settings, audit
    "AuditSettings",
    "AuthorizationSettings",
    "DecisionAuditLog",
    "OPERATION_REQUIREMENTS",
    "OperationKind",
    "SettingsLoader",
    "WorkItemGate",
    "WorkItemRef",
]
