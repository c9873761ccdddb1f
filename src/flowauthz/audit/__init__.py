"""Decision audit trail."""
from __future__ import annotations

from flowauthz.audit.decision_log import DENIED_EVENT, GRANTED_EVENT, DecisionAuditLog

__all__ = ["DENIED_EVENT", "DecisionAuditLog", "GRANTED_EVENT"]
