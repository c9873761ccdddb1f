"""Rendering of deny decisions."""
from __future__ import annotations

from flowauthz.reporting.reporter import DecisionReporter

__all__ = ["DecisionReporter"]
