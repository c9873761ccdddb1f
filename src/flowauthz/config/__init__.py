"""Process-wide authorization settings."""
from __future__ import annotations

from flowauthz.config.settings import AuditSettings, AuthorizationSettings, SettingsLoader

__all__ = ["AuditSettings", "AuthorizationSettings", "SettingsLoader"]
