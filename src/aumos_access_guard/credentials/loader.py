"""YAML credential documents and a static credential provider.

CredentialLoader reads a YAML credential document, validates it with
Pydantic and returns an immutable :class:`Credential`.  The loader is the
only place where rule keys are validated; the matcher itself never rejects
a tree.

Schema
------
::

    version: "1.0"
    roles:
      - USER
    rules:
      - action: [CREATE, DELETE, FIND]
        resource: COMMENT
        role: ADMIN
      - action: [FIND, GET]
        resource: SPACE
        role: USER

Example
-------
::

    provider = StaticCredentialProvider.from_file("/path/to/credentials.yaml")
    secure = make_secure(SecureConfig(get_credentials=provider))
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from aumos_access_guard.types import ATTRIBUTE_KEYS, Credential

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class CredentialConfigError(ValueError):
    """Raised when a credential document is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the document that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class CredentialDocument(BaseModel):
    """Validated shape of a YAML credential document."""

    model_config = {"extra": "forbid"}

    version: str = Field(default="1.0")
    roles: list[str] = Field(default_factory=list)
    rules: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, value: object) -> str:
        version = str(value)
        if version not in _SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported credential document version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}."
            )
        return version

    @field_validator("rules")
    @classmethod
    def validate_rule_keys(cls, rules: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for index, rule in enumerate(rules):
            unknown = set(rule) - ATTRIBUTE_KEYS
            if unknown:
                raise ValueError(
                    f"Rule at index {index} has unknown keys {sorted(unknown)}. "
                    f"Known keys: {sorted(ATTRIBUTE_KEYS)}."
                )
        return rules

    def to_credential(self) -> Credential:
        return Credential(roles=frozenset(self.roles), rules=tuple(self.rules))


class CredentialLoader:
    """Loads credential documents from YAML files, strings or dicts."""

    def load(self, config_path: str | Path) -> Credential:
        """Load a Credential from a YAML file on disk.

        Parameters
        ----------
        config_path:
            Path to the YAML credential document.

        Returns
        -------
        Credential

        Raises
        ------
        CredentialConfigError
            If the file cannot be parsed or fails validation.
        FileNotFoundError
            If the file does not exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Credential document not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise CredentialConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> Credential:
        """Load a Credential from an already-parsed dictionary."""
        return self._build(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> Credential:
        """Load a Credential from YAML text.

        Raises
        ------
        CredentialConfigError
            If parsing fails or the document is invalid.
        """
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise CredentialConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build(raw, config_path=config_path)

    def _build(self, raw: object, config_path: str | None = None) -> Credential:
        if not isinstance(raw, dict):
            raise CredentialConfigError(
                "Credential document must be a YAML mapping (dict).", config_path
            )
        try:
            document = CredentialDocument.model_validate(raw)
        except ValidationError as exc:
            raise CredentialConfigError(str(exc), config_path) from exc

        logger.info(
            "Loaded %d rules and %d roles from %s",
            len(document.rules),
            len(document.roles),
            config_path or "<dict>",
        )
        return document.to_credential()


class StaticCredentialProvider:
    """Async credential provider returning the same Credential on every call.

    Parameters
    ----------
    credential:
        The credential to hand out.
    """

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    @classmethod
    def from_file(cls, config_path: str | Path) -> StaticCredentialProvider:
        return cls(CredentialLoader().load(config_path))

    @property
    def credential(self) -> Credential:
        return self._credential

    async def __call__(self) -> Credential:
        return self._credential
