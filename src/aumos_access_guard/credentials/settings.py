"""Pipeline settings with Pydantic v2 validation.

Example
-------
>>> settings = GuardSettings.model_validate({"on_default_fail": "denied"})
>>> settings.admin_role
'ADMIN'
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from aumos_access_guard.credentials.loader import CredentialConfigError
from aumos_access_guard.secure.pipeline import SecureConfig
from aumos_access_guard.types import CredentialProvider, Role

_TRACE_LOGGER = "aumos_access_guard.trace"


class GuardSettingsError(CredentialConfigError):
    """Raised when a settings file is malformed or invalid."""


class GuardSettings(BaseModel):
    """Defaults of a decision pipeline, loadable from YAML.

    Unknown keys are allowed to support future additions.
    """

    model_config = {"extra": "allow"}

    on_default_success: Any = Field(default=True)
    on_default_fail: Any = Field(default=False)
    admin_role: str = Field(default=Role.ADMIN.value)
    trace: bool = Field(default=False)

    @classmethod
    def load(cls, config_path: str | Path) -> GuardSettings:
        """Load settings from a YAML file; a missing file yields defaults.

        Raises
        ------
        GuardSettingsError
            If the file cannot be parsed or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()
        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise GuardSettingsError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise GuardSettingsError(str(exc), str(config_path)) from exc

    def to_config(
        self,
        get_credentials: CredentialProvider,
        data: object = None,
    ) -> SecureConfig:
        """Build a :class:`SecureConfig` from these settings."""
        return SecureConfig(
            get_credentials=get_credentials,
            data=data,
            on_default_success=self.on_default_success,
            on_default_fail=self.on_default_fail,
            admin_role=self.admin_role,
            trace=logging.getLogger(_TRACE_LOGGER) if self.trace else None,
        )
