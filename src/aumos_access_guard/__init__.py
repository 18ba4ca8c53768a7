"""aumos-access-guard — Asynchronous rule/guard authorization engine.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import asyncio
>>> import aumos_access_guard as guard
>>> guard.__version__
'0.1.0'
>>> rules = [{"action": ["CREATE", "FIND"], "resource": "COMMENT", "role": "ADMIN"}]
>>> asyncio.run(guard.check_guard(rules, {"action": "CREATE", "resource": "COMMENT"}))
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------
from aumos_access_guard.types import (
    ATTRIBUTE_KEYS,
    UNSET,
    Action,
    AttributeKey,
    Credential,
    CredentialProvider,
    PredicateFn,
    Resource,
    Role,
)

# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------
from aumos_access_guard.matching.guard import check_guard
from aumos_access_guard.matching.comparator import MatchContext, compare, compare_keyed
from aumos_access_guard.matching.nodes import parse_value

# ---------------------------------------------------------------------------
# Decision pipeline and composition
# ---------------------------------------------------------------------------
from aumos_access_guard.secure.pipeline import (
    AccessDeniedError,
    Outcome,
    OutcomeKind,
    Secure,
    SecureConfig,
    make_secure,
)
from aumos_access_guard.secure.decorator import (
    Check,
    ProtectedOperation,
    SecureDecorator,
    make_secure_decorator,
)

# ---------------------------------------------------------------------------
# Credentials and settings
# ---------------------------------------------------------------------------
from aumos_access_guard.credentials.loader import (
    CredentialConfigError,
    CredentialLoader,
    StaticCredentialProvider,
)
from aumos_access_guard.credentials.settings import GuardSettings, GuardSettingsError

__all__ = [
    "__version__",
    # Vocabulary
    "ATTRIBUTE_KEYS",
    "Action",
    "AttributeKey",
    "Credential",
    "CredentialProvider",
    "PredicateFn",
    "Resource",
    "Role",
    "UNSET",
    # Matching
    "MatchContext",
    "check_guard",
    "compare",
    "compare_keyed",
    "parse_value",
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
    # Credentials
    "CredentialConfigError",
    "CredentialLoader",
    "GuardSettings",
    "GuardSettingsError",
    "StaticCredentialProvider",
]
