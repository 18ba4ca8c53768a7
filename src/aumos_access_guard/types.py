"""Vocabulary and value objects shared by the matcher and the pipeline.

The matcher treats every attribute token as an opaque comparable value.
The enumerations below are the vocabulary the engine ships with; they are
``str`` enums so that tokens read from YAML or JSON compare equal to the
enum members.

Example
-------
>>> Action.CREATE == "CREATE"
True
>>> Credential.from_mapping({"roles": ["USER"]}).rules
()
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum


class AttributeKey(str, Enum):
    """Closed set of keys a single rule or single guard may carry."""

    ACTION = "action"
    RESOURCE = "resource"
    ROLE = "role"
    PREDICATE = "predicate"


ATTRIBUTE_KEYS: frozenset[str] = frozenset(key.value for key in AttributeKey)


class Action(str, Enum):
    CREATE = "CREATE"
    FIND = "FIND"
    GET = "GET"
    DELETE = "DELETE"
    UPDATE = "UPDATE"


class Resource(str, Enum):
    SPACE = "SPACE"
    COMMENT = "COMMENT"


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"
    GUESS = "GUESS"


class _Unset:
    """Marker type for "no per-call override supplied"."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


# ---------------------------------------------------------------------------
# Credential
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Credential:
    """Roles and granted rules of one user, fetched once per decision.

    Attributes
    ----------
    roles:
        Role tokens held by the user.
    rules:
        Granted single rules, each a mapping from attribute keys to values.
    """

    roles: frozenset[object] = field(default_factory=frozenset)
    rules: tuple[Mapping[str, object], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | Credential | None) -> Credential:
        """Build a Credential from a provider result.

        Missing or ``None`` fields default to empty.  A single role or a
        single rule tree (a mapping or a whole-tree predicate) is wrapped
        into a one-element collection.  A Credential instance is returned
        unchanged.
        """
        if isinstance(raw, Credential):
            return raw
        if raw is None:
            return cls()
        roles = raw.get("roles") or ()
        rules = raw.get("rules") or ()
        if isinstance(roles, (str, Enum)):
            roles = (roles,)
        if not isinstance(rules, (list, tuple)):
            rules = (rules,)
        return cls(
            roles=frozenset(roles),  # type: ignore[arg-type]
            rules=tuple(rules),
        )

    def has_role(self, role: object) -> bool:
        """Return True if the credential holds ``role``."""
        # Enum members hash by name, so a str enum whose value differs from
        # its name is not found by set lookup with the plain string.
        return any(held == role for held in self.roles)


CredentialProvider = Callable[[], Awaitable["Mapping[str, object] | Credential"]]
"""Zero-argument async callable returning a Credential or a plain mapping."""

PredicateFn = Callable[[object, object, object, tuple], object]
"""Predicate leaf: ``(value, data, extra_data, params) -> bool | Awaitable[bool]``."""
