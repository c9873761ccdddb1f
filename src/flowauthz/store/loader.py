"""YAML-based loader that seeds an AuthorizationStore.

Schema
------
::

    version: "1.0"
    authorizations:
      - kind: grant
        resource_type: work_item
        resource_id: "*"
        user: "demo"
        permissions: ["UPDATE", "ASSIGN"]
      - kind: revoke
        resource_type: process_template
        resource_id: "invoice"
        group: "contractors"
        permissions: ["UPDATE_ITEMS"]

Each entry names exactly one of ``user`` or ``group``. Permissions must be
valid for the entry's resource type.

Example
-------
::

    loader = AuthorizationLoader()
    store = loader.load("/path/to/authorizations.yaml")
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from flowauthz.exceptions import AuthorizationConfigError
from flowauthz.principals import Principal
from flowauthz.resources.model import Permission, ResourceModel, ResourceType
from flowauthz.store.memory_store import AuthorizationStore
from flowauthz.store.records import AuthorizationKind, AuthorizationRecord

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class AuthorizationLoader:
    """Loads authorization records from YAML files or dicts.

    Parameters
    ----------
    model:
        Resource catalog used to validate permissions. Defaults to
        :meth:`ResourceModel.default`.
    strict:
        When ``True``, unknown top-level keys are treated as an error.
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "authorizations", "metadata", "description"]
    )

    def __init__(self, model: ResourceModel | None = None, strict: bool = False) -> None:
        self._model = model or ResourceModel.default()
        self._strict = strict

    def load(
        self,
        config_path: str | Path,
        store: AuthorizationStore | None = None,
    ) -> AuthorizationStore:
        """Load records from a YAML file into *store* (or a new store).

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        AuthorizationConfigError
            If the file cannot be parsed or is structurally invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Authorization file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._populate(raw, store, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        store: AuthorizationStore | None = None,
        config_path: str | None = None,
    ) -> AuthorizationStore:
        """Load records from an already-parsed config dictionary."""
        return self._populate(config, store, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        store: AuthorizationStore | None = None,
        config_path: str | None = None,
    ) -> AuthorizationStore:
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._populate(raw, store, config_path=config_path)

    def parse_records(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> list[AuthorizationRecord]:
        """Validate *config* and return its records without storing them."""
        self._validate_structure(config, config_path)

        version = str(config.get("version", "1.0"))
        if version not in _SUPPORTED_VERSIONS:
            raise AuthorizationConfigError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        records: list[AuthorizationRecord] = []
        for index, entry in enumerate(config["authorizations"]):  # type: ignore[union-attr]
            try:
                records.append(self._build_record(entry))
            except (ValueError, KeyError, TypeError) as exc:
                raise AuthorizationConfigError(
                    f"Error in authorization at index {index}: {exc}",
                    config_path,
                ) from exc
        return records

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _populate(
        self,
        raw: object,
        store: AuthorizationStore | None,
        config_path: str | None,
    ) -> AuthorizationStore:
        records = self.parse_records(raw, config_path)  # type: ignore[arg-type]
        target = store if store is not None else AuthorizationStore()
        for record in records:
            target.add(record)
        logger.info(
            "Loaded %d authorization records from %s",
            len(records),
            config_path or "<dict>",
        )
        return target

    def _build_record(self, entry: object) -> AuthorizationRecord:
        if not isinstance(entry, dict):
            raise TypeError(f"Authorization entry must be a mapping; got {type(entry).__name__}.")

        kind = AuthorizationKind(str(entry.get("kind", "grant")).lower())
        resource_type = ResourceType(str(entry["resource_type"]).lower())
        resource_id = str(entry.get("resource_id", "") or "")
        if not resource_id:
            raise ValueError("resource_id must not be empty.")

        user = entry.get("user")
        group = entry.get("group")
        if (user is None) == (group is None):
            raise ValueError("Exactly one of 'user' or 'group' must be set.")
        principal = Principal.user(str(user)) if user is not None else Principal.group(str(group))

        raw_permissions = entry.get("permissions", [])
        if isinstance(raw_permissions, str):
            raw_permissions = [raw_permissions]
        permissions = frozenset(Permission(str(p).upper()) for p in raw_permissions)
        if not permissions:
            raise ValueError("permissions must name at least one permission.")
        invalid = sorted(p.value for p in permissions if not self._model.is_valid(resource_type, p))
        if invalid:
            raise ValueError(
                f"Permissions {invalid} are not valid for {resource_type.name}."
            )

        return AuthorizationRecord(kind, resource_type, resource_id, principal, permissions)

    def _validate_structure(
        self,
        raw: object,
        config_path: str | None,
    ) -> None:
        if not isinstance(raw, dict):
            raise AuthorizationConfigError(
                "Authorization config must be a YAML mapping (dict).", config_path
            )

        if "authorizations" not in raw:
            raise AuthorizationConfigError(
                "Authorization config must contain an 'authorizations' list.", config_path
            )

        if not isinstance(raw["authorizations"], list):
            raise AuthorizationConfigError(
                "Authorization config 'authorizations' must be a list.", config_path
            )

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise AuthorizationConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )
