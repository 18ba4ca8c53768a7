"""Decision pipeline and composition layer.

Example
-------
::

    from aumos_access_guard.secure import SecureConfig, make_secure

    secure = make_secure(SecureConfig(get_credentials, on_default_fail="ko"))
    result = await secure({"action": "CREATE", "resource": "COMMENT"})
"""
from __future__ import annotations

from aumos_access_guard.secure.decorator import (
    Check,
    ProtectedOperation,
    SecureDecorator,
    make_secure_decorator,
)
from aumos_access_guard.secure.pipeline import (
    AccessDeniedError,
    Outcome,
    OutcomeKind,
    Secure,
    SecureConfig,
    make_secure,
)

__all__ = [
    # Pipeline
    "AccessDeniedError",
    "Outcome",
    "OutcomeKind",
    "Secure",
    "SecureConfig",
    "make_secure",
    # Composition
    "Check",
    "ProtectedOperation",
    "SecureDecorator",
    "make_secure_decorator",
]
