"""Permission resolution: requests, decisions and the resolver."""
from __future__ import annotations

from flowauthz.resolver.decision import Decision, MissingAuthorization
from flowauthz.resolver.request import (
    AuthorizationPath,
    AuthorizationRequest,
    PermissionCheck,
)
from flowauthz.resolver.resolver import PermissionResolver

__all__ = [
    "AuthorizationPath",
    "AuthorizationRequest",
    "Decision",
    "MissingAuthorization",
    "PermissionCheck",
    "PermissionResolver",
]
