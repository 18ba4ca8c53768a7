"""Structural matching of guard trees against granted rules.

Example
-------
::

    from aumos_access_guard.matching import check_guard

    allowed = await check_guard(
        [{"action": ["CREATE", "FIND"], "resource": "COMMENT"}],
        {"action": "CREATE", "resource": "COMMENT"},
    )
    assert allowed is True
"""
from __future__ import annotations

from aumos_access_guard.matching.comparator import (
    MatchContext,
    compare,
    compare_keyed,
    invoke_predicate,
)
from aumos_access_guard.matching.guard import check_guard, normalize_rules
from aumos_access_guard.matching.nodes import (
    AllOf,
    AnyOf,
    Keyed,
    Node,
    Predicate,
    Scalar,
    is_keyed_mapping,
    parse_value,
)

__all__ = [
    # Matcher
    "check_guard",
    "normalize_rules",
    # Comparator
    "MatchContext",
    "compare",
    "compare_keyed",
    "invoke_predicate",
    # Nodes
    "AllOf",
    "AnyOf",
    "Keyed",
    "Node",
    "Predicate",
    "Scalar",
    "is_keyed_mapping",
    "parse_value",
]
