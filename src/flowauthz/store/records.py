"""Authorization records: the grant/revoke evidence the resolver consumes."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from flowauthz.principals import Principal
from flowauthz.resources.model import ANY, Permission, ResourceType


class AuthorizationKind(str, Enum):
    GRANT = "grant"
    REVOKE = "revoke"


@dataclass(frozen=True)
class AuthorizationRecord:
    """Immutable grant or revoke of a permission set for one principal.

    Attributes
    ----------
    kind:
        ``GRANT`` adds the permissions, ``REVOKE`` removes them.
    resource_type:
        The resource type the record is scoped to.
    resource_id:
        A concrete instance identifier or :data:`~flowauthz.resources.ANY`.
    principal:
        The user or group the record applies to.
    permissions:
        Non-empty permission set. ``Permission.ALL`` covers every permission.
    record_id:
        Generated identifier used to remove the record later.
    """

    kind: AuthorizationKind
    resource_type: ResourceType
    resource_id: str
    principal: Principal
    permissions: frozenset[Permission]
    record_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not self.resource_id:
            raise ValueError("AuthorizationRecord.resource_id must not be empty.")
        if not self.permissions:
            raise ValueError("AuthorizationRecord must name at least one permission.")
        object.__setattr__(self, "permissions", frozenset(self.permissions))

    @classmethod
    def granting(
        cls,
        resource_type: ResourceType,
        resource_id: str,
        principal: Principal,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return cls(AuthorizationKind.GRANT, resource_type, resource_id, principal, frozenset(permissions))

    @classmethod
    def revoking(
        cls,
        resource_type: ResourceType,
        resource_id: str,
        principal: Principal,
        permissions: Iterable[Permission],
    ) -> AuthorizationRecord:
        return cls(AuthorizationKind.REVOKE, resource_type, resource_id, principal, frozenset(permissions))

    @property
    def is_grant(self) -> bool:
        return self.kind is AuthorizationKind.GRANT

    @property
    def is_revoke(self) -> bool:
        return self.kind is AuthorizationKind.REVOKE

    @property
    def is_wildcard(self) -> bool:
        return self.resource_id == ANY

    def covers(self, permission: Permission) -> bool:
        """Return True if this record names *permission* (or ``ALL``)."""
        return permission in self.permissions or Permission.ALL in self.permissions

    def applies_to(self, resource_id: str) -> bool:
        """Return True if the record's scope includes *resource_id*."""
        return self.resource_id == ANY or self.resource_id == resource_id
