"""Authorization settings with Pydantic v2 validation.

Loads and validates an ``authorization.yaml`` file into a typed
:class:`AuthorizationSettings` object. Unknown keys are allowed so the
host engine can keep its own options in the same file.

Example
-------
>>> loader = SettingsLoader()
>>> settings = loader.load_string("revoke_mode: ALWAYS")
>>> settings.revoke_mode
<RevokeMode.ALWAYS: 'always'>
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from flowauthz.exceptions import AuthorizationConfigError
from flowauthz.policy.revoke_mode import RevokeMode


class AuditSettings(BaseModel):
    """Configuration for the decision audit log."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./authorization_audit.jsonl"))
    record_grants: bool = Field(default=False)


class AuthorizationSettings(BaseModel):
    """Top-level authorization settings.

    ``revoke_mode`` is fixed once the settings are built; the models are
    frozen so a running resolver never observes a reconfiguration.
    """

    model_config = {"extra": "allow", "frozen": True}

    version: str = Field(default="1")
    authorization_enabled: bool = Field(default=True)
    revoke_mode: RevokeMode = Field(default=RevokeMode.AUTO)
    authorization_files: list[Path] = Field(default_factory=list)
    audit: AuditSettings = Field(default_factory=AuditSettings)

    @field_validator("revoke_mode", mode="before")
    @classmethod
    def normalise_revoke_mode(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return RevokeMode(value)
            except ValueError:
                valid = sorted(m.value for m in RevokeMode)
                raise ValueError(f"Unknown revoke mode '{value}'. Valid: {valid}") from None
        return value


class SettingsLoader:
    """Loads and validates authorization YAML settings."""

    def load(self, config_path: Path) -> AuthorizationSettings:
        """Load and validate a settings YAML file.

        Raises
        ------
        FileNotFoundError:
            When the file does not exist.
        AuthorizationConfigError:
            When the YAML cannot be parsed.
        pydantic.ValidationError:
            When the content fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Authorization settings not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        return AuthorizationSettings.model_validate(raw)

    def load_string(self, yaml_content: str) -> AuthorizationSettings:
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(f"Failed to parse YAML string: {exc}") from exc
        return AuthorizationSettings.model_validate(raw)

    def defaults(self) -> AuthorizationSettings:
        """Return settings with all defaults applied."""
        return AuthorizationSettings()
