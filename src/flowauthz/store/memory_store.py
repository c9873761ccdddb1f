"""In-memory authorization store.

The store is a pure index over :class:`AuthorizationRecord` objects. It
knows nothing about permission semantics: it only answers "which records
of this resource type apply to these principals (and this instance)".

Mutations are serialised with a :class:`threading.Lock`. Resolution works
against a :meth:`AuthorizationStore.snapshot`, an immutable view that stays
consistent for the whole decision even if another thread grants or revokes
in the meantime.

Example
-------
>>> from flowauthz.principals import Principal
>>> from flowauthz.resources import Permission, ResourceType
>>> store = AuthorizationStore()
>>> record = store.grant(AuthorizationRecord.granting(
...     ResourceType.WORK_ITEM, "t1", Principal.user("u1"), [Permission.ASSIGN]))
>>> len(store.query(ResourceType.WORK_ITEM, {Principal.user("u1")}, "t1"))
1
"""
from __future__ import annotations

import logging
import threading
from typing import AbstractSet, Iterable, Protocol

from flowauthz.principals import Principal
from flowauthz.resources.model import ResourceType
from flowauthz.store.records import AuthorizationKind, AuthorizationRecord

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Read-only query surface the resolver depends on."""

    def query(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
        resource_id: str | None = None,
    ) -> list[AuthorizationRecord]: ...

    def has_revokes(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
    ) -> bool: ...

    def snapshot(self) -> AuthorizationSnapshot: ...


def _matching(
    records: Iterable[AuthorizationRecord],
    resource_type: ResourceType,
    principals: AbstractSet[Principal],
    resource_id: str | None,
) -> list[AuthorizationRecord]:
    return [
        r
        for r in records
        if r.resource_type is resource_type
        and r.principal in principals
        and (resource_id is None or r.applies_to(resource_id))
    ]


class AuthorizationSnapshot:
    """Immutable point-in-time view of an :class:`AuthorizationStore`."""

    def __init__(self, records: Iterable[AuthorizationRecord]) -> None:
        by_type: dict[ResourceType, list[AuthorizationRecord]] = {}
        for record in records:
            by_type.setdefault(record.resource_type, []).append(record)
        self._by_type: dict[ResourceType, tuple[AuthorizationRecord, ...]] = {
            rt: tuple(rs) for rt, rs in by_type.items()
        }

    def query(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
        resource_id: str | None = None,
    ) -> list[AuthorizationRecord]:
        """Return records for *resource_type* and *principals*.

        When *resource_id* is given only records scoped to that instance or
        to ``ANY`` are returned.
        """
        return _matching(self._by_type.get(resource_type, ()), resource_type, principals, resource_id)

    def has_revokes(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
    ) -> bool:
        """Return True if any REVOKE record exists for the type and principals."""
        return any(
            r.is_revoke and r.principal in principals
            for r in self._by_type.get(resource_type, ())
        )

    def snapshot(self) -> AuthorizationSnapshot:
        return self

    def __len__(self) -> int:
        return sum(len(rs) for rs in self._by_type.values())


class AuthorizationStore:
    """Thread-safe in-memory collection of authorization records.

    Parameters
    ----------
    records:
        Optional initial records, inserted in order.
    """

    def __init__(self, records: Iterable[AuthorizationRecord] | None = None) -> None:
        self._records: dict[str, AuthorizationRecord] = {}
        self._lock = threading.Lock()
        for record in records or ():
            self._insert(record)

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def grant(self, record: AuthorizationRecord) -> AuthorizationRecord:
        """Insert a GRANT record.

        Raises
        ------
        ValueError
            If *record* is not a GRANT.
        """
        if record.kind is not AuthorizationKind.GRANT:
            raise ValueError(f"grant() expects a GRANT record; got {record.kind.name}.")
        return self._insert(record)

    def revoke(self, record: AuthorizationRecord) -> AuthorizationRecord:
        """Insert a REVOKE record.

        Raises
        ------
        ValueError
            If *record* is not a REVOKE.
        """
        if record.kind is not AuthorizationKind.REVOKE:
            raise ValueError(f"revoke() expects a REVOKE record; got {record.kind.name}.")
        return self._insert(record)

    def add(self, record: AuthorizationRecord) -> AuthorizationRecord:
        """Insert a record of either kind."""
        return self._insert(record)

    def remove(self, record_id: str) -> bool:
        """Delete a record by id. Returns False if no such record exists."""
        with self._lock:
            removed = self._records.pop(record_id, None)
        if removed is not None:
            logger.debug("Removed authorization record %s", record_id)
        return removed is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def snapshot(self) -> AuthorizationSnapshot:
        """Return an immutable view of the current records."""
        with self._lock:
            records = tuple(self._records.values())
        return AuthorizationSnapshot(records)

    def query(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
        resource_id: str | None = None,
    ) -> list[AuthorizationRecord]:
        with self._lock:
            records = tuple(self._records.values())
        return _matching(records, resource_type, principals, resource_id)

    def has_revokes(
        self,
        resource_type: ResourceType,
        principals: AbstractSet[Principal],
    ) -> bool:
        with self._lock:
            records = tuple(self._records.values())
        return any(
            r.is_revoke and r.resource_type is resource_type and r.principal in principals
            for r in records
        )

    def records(self) -> list[AuthorizationRecord]:
        """Return all records in insertion order."""
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _insert(self, record: AuthorizationRecord) -> AuthorizationRecord:
        with self._lock:
            if record.record_id in self._records:
                raise ValueError(f"Duplicate authorization record id {record.record_id!r}.")
            self._records[record.record_id] = record
        logger.debug(
            "Stored %s record %s: %s %s/%s %s",
            record.kind.name,
            record.record_id,
            record.principal,
            record.resource_type.name,
            record.resource_id,
            sorted(p.value for p in record.permissions),
        )
        return record
