"""Revoke evaluation modes and their strategies."""
from __future__ import annotations

from flowauthz.policy.revoke_mode import (
    REVOKE_STRATEGIES,
    RevokeMode,
    RevokeStrategy,
    evaluate_always,
    evaluate_auto,
    strategy_for,
)

__all__ = [
    "REVOKE_STRATEGIES",
    "RevokeMode",
    "RevokeStrategy",
    "evaluate_always",
    "evaluate_auto",
    "strategy_for",
]
