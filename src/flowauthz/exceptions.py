"""Exception types raised by the authorization core."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowauthz.resolver.decision import Decision, MissingAuthorization


class AuthorizationDenied(Exception):
    """Raised when no acceptable permission path holds for a request.

    Attributes
    ----------
    decision:
        The deny :class:`~flowauthz.resolver.decision.Decision`.
    user_id:
        The acting user that was denied.
    missing:
        Shortcut to ``decision.missing``.
    """

    def __init__(self, decision: Decision, message: str) -> None:
        self.decision = decision
        self.user_id = decision.user_id
        self.missing: tuple[MissingAuthorization, ...] = decision.missing
        super().__init__(message)


class InvalidAuthorizationRequest(ValueError):
    """Raised when a request violates the resolver's input contract.

    An empty path, an unknown resource type or a permission that is not
    valid for its resource type are programming errors, not denials.
    """


class AuthorizationConfigError(ValueError):
    """Raised when a settings or authorization seed file is malformed.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")
