"""Decision reporter.

Turns a deny :class:`Decision` into the human-readable message carried by
:class:`AuthorizationDenied`, and into a plain dict for audit records.

Message format::

    The user with id 'u1' does not have one of the following permissions:
    'ASSIGN' permission on resource 't1' of type 'WorkItem' or
    'UPDATE' permission on resource 't1' of type 'WorkItem' or
    'ASSIGN' permission on resource 'invoice' of type 'ProcessTemplate' or
    'UPDATE_ITEMS' permission on resource 'invoice' of type 'ProcessTemplate'

(on one line). The user id, every permission name, every resource type
display name and every resource id appear as independent substrings.
"""
from __future__ import annotations

from flowauthz.exceptions import AuthorizationDenied
from flowauthz.resolver.decision import Decision, MissingAuthorization
from flowauthz.resources.model import ResourceModel


class DecisionReporter:
    """Renders deny decisions.

    Parameters
    ----------
    model:
        Resource catalog supplying resource type display names.
    """

    def __init__(self, model: ResourceModel | None = None) -> None:
        self._model = model or ResourceModel.default()

    def render(self, decision: Decision) -> str:
        """Return the denial message for *decision*.

        Raises
        ------
        ValueError
            If *decision* is an authorization, not a denial.
        """
        if decision.authorized:
            raise ValueError("Only deny decisions can be rendered.")
        alternatives = " or ".join(self._render_missing(m) for m in decision.missing)
        return (
            f"The user with id '{decision.user_id}' does not have one of the "
            f"following permissions: {alternatives}"
        )

    def denial(self, decision: Decision) -> AuthorizationDenied:
        """Build (but do not raise) the exception for *decision*."""
        return AuthorizationDenied(decision, self.render(decision))

    def raise_if_denied(self, decision: Decision) -> Decision:
        """Raise :class:`AuthorizationDenied` for a denial, else return *decision*."""
        if not decision.authorized:
            raise self.denial(decision)
        return decision

    def to_dict(self, decision: Decision) -> dict[str, object]:
        """Return a JSON-serialisable view of *decision*."""
        data: dict[str, object] = {
            "authorized": decision.authorized,
            "user_id": decision.user_id,
            "missing": [
                {
                    "permission": m.permission.value,
                    "resource_type": self._model.display_name(m.resource_type),
                    "resource_id": m.resource_id,
                }
                for m in decision.missing
            ],
        }
        if decision.granted_path is not None:
            data["granted_by"] = [
                {
                    "permission": c.permission.value,
                    "resource_type": self._model.display_name(c.resource_type),
                    "resource_id": c.resource_id,
                }
                for c in decision.granted_path.checks
            ]
        return data

    def _render_missing(self, missing: MissingAuthorization) -> str:
        return (
            f"'{missing.permission.value}' permission on resource "
            f"'{missing.resource_id}' of type "
            f"'{self._model.display_name(missing.resource_type)}'"
        )
