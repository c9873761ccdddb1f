"""Permission resolver: the authorize/deny decision for a request.

A request is an ordered OR-group of paths; each path is an AND-group of
``(resource_type, resource_id, permission)`` checks. Every check is decided
by the active revoke strategy against one snapshot of the store, so the
whole decision sees a consistent set of records.

The resolver holds no mutable state and never writes. Concurrent calls
from several threads are safe.

Example
-------
::

    resolver = PermissionResolver(store, revoke_mode=RevokeMode.AUTO)
    decision = resolver.authorize(
        PrincipalContext("u1"),
        AuthorizationRequest.any_of([
            PermissionCheck(ResourceType.WORK_ITEM, "t1", Permission.UPDATE),
            PermissionCheck(ResourceType.WORK_ITEM, "t1", Permission.ASSIGN),
        ]),
    )
    if not decision:
        print(decision.missing)
"""
from __future__ import annotations

import logging
from typing import AbstractSet

from flowauthz.exceptions import InvalidAuthorizationRequest
from flowauthz.policy.revoke_mode import RevokeMode, strategy_for
from flowauthz.principals import Principal, PrincipalContext
from flowauthz.resolver.decision import Decision, MissingAuthorization
from flowauthz.resolver.request import AuthorizationPath, AuthorizationRequest, PermissionCheck
from flowauthz.resources.model import Permission, ResourceModel, ResourceType
from flowauthz.store.memory_store import RecordSource

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Decides requests against a record source under one revoke mode.

    Parameters
    ----------
    source:
        The authorization store (or a snapshot of one).
    revoke_mode:
        ``ALWAYS`` or ``AUTO``. Fixed for the lifetime of the resolver.
    model:
        Resource catalog used to validate requests.
    """

    def __init__(
        self,
        source: RecordSource,
        revoke_mode: RevokeMode = RevokeMode.AUTO,
        model: ResourceModel | None = None,
    ) -> None:
        self._source = source
        self._revoke_mode = RevokeMode(revoke_mode)
        self._strategy = strategy_for(self._revoke_mode)
        self._model = model or ResourceModel.default()

    @property
    def revoke_mode(self) -> RevokeMode:
        return self._revoke_mode

    @property
    def model(self) -> ResourceModel:
        return self._model

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def authorize(
        self,
        principal: PrincipalContext,
        request: AuthorizationRequest,
    ) -> Decision:
        """Return the decision for *principal* on *request*.

        Raises
        ------
        InvalidAuthorizationRequest
            If a check names an unknown resource type or a permission that
            is not valid for its resource type.
        """
        self._validate(request)
        principals = principal.principals()
        snapshot = self._source.snapshot()

        for path in request.paths:
            if self._path_holds(snapshot, principals, path):
                logger.debug(
                    "Authorization GRANTED: user=%s mode=%s path=%s",
                    principal.user_id,
                    self._revoke_mode.value,
                    _describe(path),
                )
                return Decision.allow(principal.user_id, path)

        missing = tuple(
            MissingAuthorization(
                permission=path.primary.permission,
                resource_type=path.primary.resource_type,
                resource_id=path.primary.resource_id,
            )
            for path in request.paths
        )
        logger.debug(
            "Authorization DENIED: user=%s mode=%s missing=%s",
            principal.user_id,
            self._revoke_mode.value,
            [f"{m.permission.value}@{m.resource_type.name}/{m.resource_id}" for m in missing],
        )
        return Decision.deny(principal.user_id, missing)

    def is_granted(self, principal: PrincipalContext, check: PermissionCheck) -> bool:
        """Return True if the single *check* holds for *principal*."""
        return bool(self.authorize(principal, AuthorizationRequest.any_of([check])))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path_holds(
        self,
        snapshot: RecordSource,
        principals: AbstractSet[Principal],
        path: AuthorizationPath,
    ) -> bool:
        return all(
            self._strategy(
                snapshot,
                principals,
                check.resource_type,
                check.resource_id,
                check.permission,
            )
            for check in path.checks
        )

    def _validate(self, request: AuthorizationRequest) -> None:
        for path in request.paths:
            for check in path.checks:
                if not isinstance(check.resource_type, ResourceType) or not self._model.knows(
                    check.resource_type
                ):
                    raise InvalidAuthorizationRequest(
                        f"Unknown resource type {check.resource_type!r}."
                    )
                if not isinstance(check.permission, Permission) or not self._model.is_valid(
                    check.resource_type, check.permission
                ):
                    raise InvalidAuthorizationRequest(
                        f"Permission {check.permission!r} is not valid for "
                        f"{check.resource_type.name}."
                    )


def _describe(path: AuthorizationPath) -> str:
    return " AND ".join(
        f"{c.permission.value}@{c.resource_type.name}/{c.resource_id}" for c in path.checks
    )
