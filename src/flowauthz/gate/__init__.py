"""Gating of work item mutations."""
from __future__ import annotations

from flowauthz.gate.operations import (
    OPERATION_REQUIREMENTS,
    OperationKind,
    Requirement,
    WorkItemRef,
    build_request,
)
from flowauthz.gate.work_item_gate import WorkItemGate

__all__ = [
    "OPERATION_REQUIREMENTS",
    "OperationKind",
    "Requirement",
    "WorkItemGate",
    "WorkItemRef",
    "build_request",
]
