"""Principals and the per-request principal context.

A request is made by exactly one user, who may belong to any number of
groups. Group membership is resolved by the host engine; the context
flattens it once so the resolver never performs an external lookup.

Example
-------
>>> ctx = PrincipalContext(user_id="u1", group_ids=("sales",))
>>> sorted(p.id for p in ctx.principals())
['sales', 'u1']
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PrincipalKind(str, Enum):
    USER = "user"
    GROUP = "group"


@dataclass(frozen=True)
class Principal:
    """A user or group identifier."""

    kind: PrincipalKind
    id: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Principal.id must not be empty.")

    @classmethod
    def user(cls, user_id: str) -> Principal:
        return cls(PrincipalKind.USER, user_id)

    @classmethod
    def group(cls, group_id: str) -> Principal:
        return cls(PrincipalKind.GROUP, group_id)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class PrincipalContext:
    """The acting user and the groups it belongs to.

    Attributes
    ----------
    user_id:
        Identifier of the authenticated user issuing the command.
    group_ids:
        Groups the user is a member of. Each group is an additional
        principal for authorization lookups.
    """

    user_id: str
    group_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("PrincipalContext.user_id must not be empty.")
        # Accept any iterable of group ids but store a tuple.
        object.__setattr__(self, "group_ids", tuple(self.group_ids))

    def principals(self) -> frozenset[Principal]:
        """Return the user plus every group as a flat principal set."""
        return frozenset(
            [Principal.user(self.user_id), *(Principal.group(g) for g in self.group_ids)]
        )
