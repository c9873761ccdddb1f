"""Authorization records and the stores that index them."""
from __future__ import annotations

from flowauthz.store.loader import AuthorizationLoader
from flowauthz.store.memory_store import (
    AuthorizationSnapshot,
    AuthorizationStore,
    RecordSource,
)
from flowauthz.store.records import AuthorizationKind, AuthorizationRecord

__all__ = [
    "AuthorizationKind",
    "AuthorizationLoader",
    "AuthorizationRecord",
    "AuthorizationSnapshot",
    "AuthorizationStore",
    "RecordSource",
]
