"""Work item operations and the permission paths each one requires.

The mapping is data, not branching: :data:`OPERATION_REQUIREMENTS` names
the primary permission for each :class:`OperationKind`, and
:func:`build_request` expands it through the resource model into the
ordered alternatives:

1. the same-type alternatives on the work item, then the primary
   permission itself,
2. for items spawned by a process, the alternatives of the lifted
   permission on the owning process template, then the lifted permission.

For the property setters this yields::

    ASSIGN@WORK_ITEM/<item> | UPDATE@WORK_ITEM/<item>
    | ASSIGN@PROCESS_TEMPLATE/<key> | UPDATE_ITEMS@PROCESS_TEMPLATE/<key>
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flowauthz.resolver.request import AuthorizationRequest, PermissionCheck
from flowauthz.resources.model import ANY, Permission, ResourceModel, ResourceType


class OperationKind(str, Enum):
    """Gated mutations of a work item's properties."""

    SET_PRIORITY = "set_priority"
    SET_NAME = "set_name"
    SET_DESCRIPTION = "set_description"
    SET_DUE_DATE = "set_due_date"
    SET_FOLLOW_UP_DATE = "set_follow_up_date"


@dataclass(frozen=True)
class Requirement:
    """Primary permission an operation needs on the target resource."""

    resource_type: ResourceType
    permission: Permission


_UPDATE_WORK_ITEM = Requirement(ResourceType.WORK_ITEM, Permission.UPDATE)

OPERATION_REQUIREMENTS: dict[OperationKind, Requirement] = {
    OperationKind.SET_PRIORITY: _UPDATE_WORK_ITEM,
    OperationKind.SET_NAME: _UPDATE_WORK_ITEM,
    OperationKind.SET_DESCRIPTION: _UPDATE_WORK_ITEM,
    OperationKind.SET_DUE_DATE: _UPDATE_WORK_ITEM,
    OperationKind.SET_FOLLOW_UP_DATE: _UPDATE_WORK_ITEM,
}


@dataclass(frozen=True)
class WorkItemRef:
    """The work item being mutated.

    Attributes
    ----------
    item_id:
        Identifier of the work item.
    template_key:
        Key of the process template whose instance spawned the item, or
        ``None`` for a standalone item.
    """

    item_id: str
    template_key: str | None = None

    def __post_init__(self) -> None:
        if not self.item_id or self.item_id == ANY:
            raise ValueError(f"Invalid work item id {self.item_id!r}.")
        if self.template_key is not None and (not self.template_key or self.template_key == ANY):
            raise ValueError(f"Invalid process template key {self.template_key!r}.")

    @property
    def is_standalone(self) -> bool:
        return self.template_key is None


def build_request(
    operation: OperationKind,
    item: WorkItemRef,
    model: ResourceModel,
) -> AuthorizationRequest:
    """Return the ordered permission alternatives for *operation* on *item*."""
    requirement = OPERATION_REQUIREMENTS[OperationKind(operation)]
    checks = [
        PermissionCheck(requirement.resource_type, item.item_id, permission)
        for permission in model.alternatives_in_order(
            requirement.resource_type, requirement.permission
        )
    ]
    if not item.is_standalone:
        for parent in model.parent_alternatives(requirement.resource_type, requirement.permission):
            checks.extend(
                PermissionCheck(parent.resource_type, item.template_key, permission)
                for permission in model.alternatives_in_order(
                    parent.resource_type, parent.permission
                )
            )
    return AuthorizationRequest.any_of(checks)
