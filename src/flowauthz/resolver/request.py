"""Authorization requests: OR-groups of AND-paths of permission checks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from flowauthz.exceptions import InvalidAuthorizationRequest
from flowauthz.resources.model import Permission, ResourceType


@dataclass(frozen=True)
class PermissionCheck:
    """One required ``(resource_type, resource_id, permission)`` triple."""

    resource_type: ResourceType
    resource_id: str
    permission: Permission

    def __post_init__(self) -> None:
        if not self.resource_id:
            raise InvalidAuthorizationRequest("PermissionCheck.resource_id must not be empty.")


@dataclass(frozen=True)
class AuthorizationPath:
    """Checks that must all hold for this path to succeed."""

    checks: tuple[PermissionCheck, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", tuple(self.checks))
        if not self.checks:
            raise InvalidAuthorizationRequest("An authorization path needs at least one check.")

    @property
    def primary(self) -> PermissionCheck:
        return self.checks[0]

    @classmethod
    def of(cls, *checks: PermissionCheck) -> AuthorizationPath:
        return cls(tuple(checks))


@dataclass(frozen=True)
class AuthorizationRequest:
    """Ordered alternatives: the request succeeds if any path succeeds."""

    paths: tuple[AuthorizationPath, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", tuple(self.paths))
        if not self.paths:
            raise InvalidAuthorizationRequest("An authorization request needs at least one path.")

    @classmethod
    def any_of(cls, checks: Iterable[PermissionCheck]) -> AuthorizationRequest:
        """Build a request where each check is its own single-check path."""
        return cls(tuple(AuthorizationPath.of(check) for check in checks))

    def __iter__(self):
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)
