"""Credential documents, providers and pipeline settings.

Example
-------
::

    from aumos_access_guard.credentials import StaticCredentialProvider

    provider = StaticCredentialProvider.from_file("credentials.yaml")
    credential = await provider()
"""
from __future__ import annotations

from aumos_access_guard.credentials.loader import (
    CredentialConfigError,
    CredentialDocument,
    CredentialLoader,
    StaticCredentialProvider,
)
from aumos_access_guard.credentials.settings import GuardSettings, GuardSettingsError

__all__ = [
    "CredentialConfigError",
    "CredentialDocument",
    "CredentialLoader",
    "GuardSettings",
    "GuardSettingsError",
    "StaticCredentialProvider",
]
