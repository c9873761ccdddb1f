"""Gate for work item property mutations.

The gate builds the request for an operation, asks the resolver and then
either lets the caller's mutation run or raises
:class:`~flowauthz.exceptions.AuthorizationDenied`. Nothing is mutated
before the decision is made, so a denied call leaves the item untouched.

Example
-------
::

    gate = WorkItemGate(PermissionResolver(store))
    gate.guard(
        PrincipalContext("u1", ("sales",)),
        OperationKind.SET_PRIORITY,
        WorkItemRef("t1", template_key="invoice"),
        item_service.set_priority, "t1", 80,
    )
"""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from flowauthz.audit.decision_log import DENIED_EVENT, GRANTED_EVENT, DecisionAuditLog
from flowauthz.gate.operations import OperationKind, WorkItemRef, build_request
from flowauthz.principals import PrincipalContext
from flowauthz.reporting.reporter import DecisionReporter
from flowauthz.resolver.decision import Decision
from flowauthz.resolver.resolver import PermissionResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkItemGate:
    """Authorizes work item mutations before they run.

    Parameters
    ----------
    resolver:
        Resolver bound to the authorization store and revoke mode.
    reporter:
        Renders denials. Defaults to one sharing the resolver's model.
    enabled:
        When ``False`` every operation is authorized without consulting
        the store.
    audit_log:
        Optional decision log. Denials are always recorded when a log is
        given; grants only when *audit_grants* is ``True``.
    audit_grants:
        Also record successful authorizations.
    """

    def __init__(
        self,
        resolver: PermissionResolver,
        reporter: DecisionReporter | None = None,
        enabled: bool = True,
        audit_log: DecisionAuditLog | None = None,
        audit_grants: bool = False,
    ) -> None:
        self._resolver = resolver
        self._reporter = reporter or DecisionReporter(resolver.model)
        self._enabled = enabled
        self._audit_log = audit_log
        self._audit_grants = audit_grants

    @property
    def enabled(self) -> bool:
        return self._enabled

    def check(
        self,
        context: PrincipalContext,
        operation: OperationKind,
        item: WorkItemRef,
    ) -> Decision:
        """Authorize *operation* on *item* for *context*.

        Returns
        -------
        Decision
            The granting decision.

        Raises
        ------
        AuthorizationDenied
            When no permission path holds.
        """
        operation = OperationKind(operation)
        if not self._enabled:
            return Decision.allow(context.user_id)

        request = build_request(operation, item, self._resolver.model)
        decision = self._resolver.authorize(context, request)
        self._record(operation, item, decision)

        if not decision.authorized:
            logger.info(
                "Denied %s on work item %s for user %s",
                operation.value,
                item.item_id,
                context.user_id,
            )
            raise self._reporter.denial(decision)
        return decision

    def guard(
        self,
        context: PrincipalContext,
        operation: OperationKind,
        item: WorkItemRef,
        mutation: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run ``mutation(*args, **kwargs)`` only if *operation* is authorized."""
        self.check(context, operation, item)
        return mutation(*args, **kwargs)

    def _record(self, operation: OperationKind, item: WorkItemRef, decision: Decision) -> None:
        if self._audit_log is None:
            return
        if decision.authorized and not self._audit_grants:
            return
        self._audit_log.log(
            {
                "event": GRANTED_EVENT if decision.authorized else DENIED_EVENT,
                "operation": operation.value,
                "item_id": item.item_id,
                "template_key": item.template_key,
                "revoke_mode": self._resolver.revoke_mode.value,
                **self._reporter.to_dict(decision),
            }
        )
