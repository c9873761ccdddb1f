"""Revoke evaluation strategies.

Both strategies decide whether a single ``(resource_type, resource_id,
permission)`` triple is granted to a principal set. They must return the
same answer for the same records:

- ``ALWAYS`` scans every matching record. The triple is granted iff at
  least one GRANT covers the permission and no REVOKE covers it. A revoke
  wins at any scope: a revoke on ``ANY`` overrides an instance grant and an
  instance revoke overrides a grant on ``ANY``.
- ``AUTO`` first asks the source whether any REVOKE exists for the
  ``(resource_type, principals)`` pair. If none does, the decision is made
  from GRANT records alone; otherwise it falls back to the full scan.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import AbstractSet, Callable, Iterable

from flowauthz.principals import Principal
from flowauthz.resources.model import Permission, ResourceType
from flowauthz.store.memory_store import RecordSource
from flowauthz.store.records import AuthorizationRecord

logger = logging.getLogger(__name__)


class RevokeMode(str, Enum):
    """Process-wide revoke evaluation mode."""

    ALWAYS = "always"
    AUTO = "auto"

    @classmethod
    def _missing_(cls, value: object) -> RevokeMode | None:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


RevokeStrategy = Callable[
    [RecordSource, AbstractSet[Principal], ResourceType, str, Permission], bool
]


def _any_grant(records: Iterable[AuthorizationRecord], permission: Permission) -> bool:
    return any(r.is_grant and r.covers(permission) for r in records)


def _any_revoke(records: Iterable[AuthorizationRecord], permission: Permission) -> bool:
    return any(r.is_revoke and r.covers(permission) for r in records)


def evaluate_always(
    source: RecordSource,
    principals: AbstractSet[Principal],
    resource_type: ResourceType,
    resource_id: str,
    permission: Permission,
) -> bool:
    """Exhaustive evaluation: every matching record is considered."""
    records = source.query(resource_type, principals, resource_id)
    return _any_grant(records, permission) and not _any_revoke(records, permission)


def evaluate_auto(
    source: RecordSource,
    principals: AbstractSet[Principal],
    resource_type: ResourceType,
    resource_id: str,
    permission: Permission,
) -> bool:
    """Short-circuiting evaluation, equivalent to :func:`evaluate_always`."""
    if source.has_revokes(resource_type, principals):
        return evaluate_always(source, principals, resource_type, resource_id, permission)
    records = source.query(resource_type, principals, resource_id)
    return _any_grant(records, permission)


REVOKE_STRATEGIES: dict[RevokeMode, RevokeStrategy] = {
    RevokeMode.ALWAYS: evaluate_always,
    RevokeMode.AUTO: evaluate_auto,
}


def strategy_for(mode: RevokeMode) -> RevokeStrategy:
    """Return the evaluation function for *mode*."""
    return REVOKE_STRATEGIES[RevokeMode(mode)]
