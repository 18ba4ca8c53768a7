"""Tagged node representation of rule and guard trees.

Rule and guard trees arrive as plain Python data: lists, mappings,
callables and scalar tokens.  :func:`parse_value` classifies such a tree
once into immutable nodes so that the comparator can dispatch with
``match`` statements instead of repeated ``isinstance`` probing.

Every node keeps the ``raw`` value it was built from; predicates are always
called with raw values, never with nodes.

Classification
--------------
- ``list`` / ``tuple``                      -> :class:`AnyOf` (OR)
- mapping with only attribute keys          -> :class:`Keyed`
- any other mapping                         -> :class:`AllOf` (AND)
- callable                                  -> :class:`Predicate`
- anything else                             -> :class:`Scalar`
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from aumos_access_guard.types import ATTRIBUTE_KEYS


@dataclass(frozen=True)
class Scalar:
    """A single attribute token compared with ``==``."""

    raw: object


@dataclass(frozen=True)
class AnyOf:
    """Ordered alternatives; matches when any item matches."""

    items: tuple[Node, ...]
    raw: object


@dataclass(frozen=True)
class AllOf:
    """Named sub-values; matches only when every entry matches."""

    entries: Mapping[object, Node]
    raw: object


@dataclass(frozen=True)
class Keyed:
    """A single rule or single guard: every key is an attribute key."""

    entries: Mapping[object, Node]
    raw: object


@dataclass(frozen=True)
class Predicate:
    """Caller-supplied decision function; a terminal node."""

    raw: object


Node = Scalar | AnyOf | AllOf | Keyed | Predicate


def key_name(key: object) -> object:
    """Return the plain name of a mapping key (enum members by value)."""
    return key.value if isinstance(key, Enum) else key


def is_keyed_mapping(value: object) -> bool:
    """Return True if ``value`` is a mapping whose keys are all attribute keys.

    An empty mapping counts as keyed.
    """
    return isinstance(value, Mapping) and all(
        key_name(key) in ATTRIBUTE_KEYS for key in value
    )


def parse_value(raw: object) -> Node:
    """Classify a raw rule/guard value into a tagged node, recursively."""
    if isinstance(raw, (list, tuple)):
        return AnyOf(items=tuple(parse_value(item) for item in raw), raw=raw)
    if isinstance(raw, Mapping):
        entries = {key_name(key): parse_value(value) for key, value in raw.items()}
        if is_keyed_mapping(raw):
            return Keyed(entries=entries, raw=raw)
        return AllOf(entries=entries, raw=raw)
    if callable(raw):
        return Predicate(raw=raw)
    return Scalar(raw=raw)
