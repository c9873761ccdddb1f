"""Resource types, permissions and the static resource catalog."""
from __future__ import annotations

from flowauthz.resources.model import (
    ANY,
    ParentAlternative,
    Permission,
    ResourceDefinition,
    ResourceModel,
    ResourceType,
)

__all__ = [
    "ANY",
    "ParentAlternative",
    "Permission",
    "ResourceDefinition",
    "ResourceModel",
    "ResourceType",
]
