"""Static catalog of resource types and their permission vocabulary.

The ResourceModel answers two questions the resolver and the gate need:

- which permissions are valid for a given resource type, and
- which permissions are *alternatives* to a requested one, either on the
  same resource or lifted onto the owning resource (e.g. ``UPDATE_ITEMS``
  on a process template is an alternative to ``UPDATE`` on one of its
  work items).

Example
-------
::

    model = ResourceModel.default()
    model.implied_alternatives(ResourceType.WORK_ITEM, Permission.UPDATE)
    # frozenset({Permission.ASSIGN})
    model.parent_alternatives(ResourceType.WORK_ITEM, Permission.UPDATE)
    # (ParentAlternative(ResourceType.PROCESS_TEMPLATE, Permission.UPDATE_ITEMS),)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

#: Wildcard resource instance identifier matching every instance of a type.
ANY: str = "*"


class ResourceType(str, Enum):
    """Resource types known to the authorization core."""

    WORK_ITEM = "work_item"
    PROCESS_TEMPLATE = "process_template"


class Permission(str, Enum):
    """Named capabilities that can be granted or revoked."""

    READ = "READ"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ASSIGN = "ASSIGN"
    READ_ITEMS = "READ_ITEMS"
    UPDATE_ITEMS = "UPDATE_ITEMS"
    ALL = "ALL"


@dataclass(frozen=True)
class ParentAlternative:
    """A permission on the owning resource that stands in for a child permission."""

    resource_type: ResourceType
    permission: Permission


@dataclass(frozen=True)
class ResourceDefinition:
    """Catalog entry for one resource type.

    Attributes
    ----------
    resource_type:
        The type being described.
    display_name:
        Human-readable name used in denial messages.
    permissions:
        Every permission that may appear on a record for this type.
    alternatives:
        Same-type alternatives: holding any permission in
        ``alternatives[p]`` is as good as holding ``p``.
    parent_alternatives:
        Alternatives lifted onto the owning resource type.
    """

    resource_type: ResourceType
    display_name: str
    permissions: frozenset[Permission]
    alternatives: dict[Permission, tuple[Permission, ...]] = field(default_factory=dict)
    parent_alternatives: dict[Permission, tuple[ParentAlternative, ...]] = field(
        default_factory=dict
    )


_DEFAULT_DEFINITIONS: tuple[ResourceDefinition, ...] = (
    ResourceDefinition(
        resource_type=ResourceType.WORK_ITEM,
        display_name="WorkItem",
        permissions=frozenset(
            [
                Permission.READ,
                Permission.CREATE,
                Permission.UPDATE,
                Permission.DELETE,
                Permission.ASSIGN,
                Permission.ALL,
            ]
        ),
        alternatives={Permission.UPDATE: (Permission.ASSIGN,)},
        parent_alternatives={
            Permission.UPDATE: (
                ParentAlternative(ResourceType.PROCESS_TEMPLATE, Permission.UPDATE_ITEMS),
            ),
            Permission.READ: (
                ParentAlternative(ResourceType.PROCESS_TEMPLATE, Permission.READ_ITEMS),
            ),
        },
    ),
    ResourceDefinition(
        resource_type=ResourceType.PROCESS_TEMPLATE,
        display_name="ProcessTemplate",
        permissions=frozenset(
            [
                Permission.READ,
                Permission.UPDATE,
                Permission.DELETE,
                Permission.READ_ITEMS,
                Permission.UPDATE_ITEMS,
                Permission.ASSIGN,
                Permission.ALL,
            ]
        ),
        alternatives={Permission.UPDATE_ITEMS: (Permission.ASSIGN,)},
    ),
)


class ResourceModel:
    """Immutable lookup over a set of resource definitions.

    Parameters
    ----------
    definitions:
        One definition per resource type. Duplicate types are rejected.
    """

    def __init__(self, definitions: tuple[ResourceDefinition, ...]) -> None:
        by_type: dict[ResourceType, ResourceDefinition] = {}
        for definition in definitions:
            if definition.resource_type in by_type:
                raise ValueError(
                    f"Duplicate resource definition for {definition.resource_type.name}."
                )
            by_type[definition.resource_type] = definition
        self._definitions = by_type

    @classmethod
    def default(cls) -> ResourceModel:
        """Return the built-in work item / process template catalog."""
        return cls(_DEFAULT_DEFINITIONS)

    def definition(self, resource_type: ResourceType) -> ResourceDefinition:
        """Return the definition for *resource_type*.

        Raises
        ------
        KeyError
            If the type is not part of this model.
        """
        try:
            return self._definitions[resource_type]
        except KeyError:
            raise KeyError(f"Unknown resource type: {resource_type!r}") from None

    def knows(self, resource_type: object) -> bool:
        return resource_type in self._definitions

    def display_name(self, resource_type: ResourceType) -> str:
        return self.definition(resource_type).display_name

    def is_valid(self, resource_type: ResourceType, permission: Permission) -> bool:
        """Return True if *permission* may be used with *resource_type*."""
        return permission in self.definition(resource_type).permissions

    def implied_alternatives(
        self, resource_type: ResourceType, permission: Permission
    ) -> frozenset[Permission]:
        """Return same-type permissions that are alternatives to *permission*."""
        return frozenset(self.definition(resource_type).alternatives.get(permission, ()))

    def parent_alternatives(
        self, resource_type: ResourceType, permission: Permission
    ) -> tuple[ParentAlternative, ...]:
        """Return alternatives for *permission* on the owning resource type."""
        return self.definition(resource_type).parent_alternatives.get(permission, ())

    def alternatives_in_order(
        self, resource_type: ResourceType, permission: Permission
    ) -> tuple[Permission, ...]:
        """Return the same-type alternatives in catalog order, then *permission*.

        Denial messages list the narrower alternative (e.g. ``ASSIGN``)
        before the general permission it stands in for.
        """
        declared = self.definition(resource_type).alternatives.get(permission, ())
        return (*declared, permission)

    @property
    def resource_types(self) -> tuple[ResourceType, ...]:
        return tuple(self._definitions)
