"""Decision value objects produced by the resolver."""
from __future__ import annotations

from dataclasses import dataclass

from flowauthz.resolver.request import AuthorizationPath
from flowauthz.resources.model import Permission, ResourceType


@dataclass(frozen=True)
class MissingAuthorization:
    """The primary check of a path that did not hold."""

    permission: Permission
    resource_type: ResourceType
    resource_id: str


@dataclass(frozen=True)
class Decision:
    """Immutable outcome of :meth:`PermissionResolver.authorize`.

    Attributes
    ----------
    authorized:
        Whether any path succeeded.
    user_id:
        The acting user the decision was made for.
    missing:
        For a denial, one entry per path in request order. Empty when
        authorized.
    granted_path:
        The first path that succeeded, or ``None`` for a denial.
    """

    authorized: bool
    user_id: str
    missing: tuple[MissingAuthorization, ...] = ()
    granted_path: AuthorizationPath | None = None

    def __bool__(self) -> bool:
        return self.authorized

    @classmethod
    def allow(cls, user_id: str, path: AuthorizationPath | None = None) -> Decision:
        return cls(authorized=True, user_id=user_id, granted_path=path)

    @classmethod
    def deny(cls, user_id: str, missing: tuple[MissingAuthorization, ...]) -> Decision:
        return cls(authorized=False, user_id=user_id, missing=missing)
