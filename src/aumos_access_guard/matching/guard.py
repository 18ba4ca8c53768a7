"""Structural matcher: decide whether granted rules satisfy a guard tree.

Guard shapes
------------
- list                      -> OR: any element guard must pass
- mapping of attribute keys -> at least one granted rule satisfies every key
- mapping of named guards   -> AND: every named sub-guard must pass
- callable                  -> called with the normalised rule list

Granted rules may be single rules, nested lists or named maps of rules
(each a union of grants), or a whole-tree predicate that is called with
the single guard it is asked to satisfy.

Default policy is deny: empty lists, empty mappings, empty rule sets and
unclassifiable shapes all evaluate to ``False``.

Example
-------
>>> import asyncio
>>> rules = [{"action": ["CREATE", "FIND"], "resource": "COMMENT"}]
>>> asyncio.run(check_guard(rules, {"action": "CREATE", "resource": "COMMENT"}))
True
>>> asyncio.run(check_guard(rules, {"x": {}, "y": {}}))
False
"""
from __future__ import annotations

import logging

from aumos_access_guard.matching.comparator import (
    MatchContext,
    compare_keyed,
    invoke_predicate,
)
from aumos_access_guard.matching.nodes import (
    AllOf,
    AnyOf,
    Keyed,
    Node,
    Predicate,
    parse_value,
)


def normalize_rules(rules: object) -> list[object]:
    """Return the granted rules as a list.

    A single rule (including ``{}``) becomes a one-element list and ``None``
    becomes an empty list.  Any other shape, including a whole-tree
    predicate, is wrapped as well.
    """
    if rules is None:
        return []
    if isinstance(rules, (list, tuple)):
        return list(rules)
    return [rules]


async def check_guard(
    rules: object,
    guard: object,
    data: object = None,
    extra_data: object = None,
    params: tuple[object, ...] = (),
    *,
    trace: logging.Logger | None = None,
) -> bool:
    """Evaluate ``guard`` against the granted ``rules``.

    Parameters
    ----------
    rules:
        A single rule, a list or named map of rule trees, or a whole-tree
        predicate.
    guard:
        The guard tree describing the attempted access.
    data, extra_data, params:
        Context passed unchanged to every predicate in either tree.
    trace:
        Optional logger receiving DEBUG output for every dispatch step.

    Returns
    -------
    bool
        ``True`` only when the guard is positively satisfied.
    """
    rule_list = normalize_rules(rules)
    ctx = MatchContext(
        data=data,
        extra_data=extra_data,
        params=tuple(params),
        trace=trace,
    )
    rule_nodes = [parse_value(rule) for rule in rule_list]
    return await _check(rule_list, rule_nodes, parse_value(guard), ctx)


async def _check(
    rule_list: list[object],
    rule_nodes: list[Node],
    guard: Node,
    ctx: MatchContext,
) -> bool:
    match guard:
        case AnyOf(items=items):
            ctx.log("guard any-of %d alternatives", len(items))
            for item in items:
                if await _check(rule_list, rule_nodes, item, ctx):
                    return True
            return False

        case Predicate(raw=fn):
            return await invoke_predicate(fn, rule_list, ctx)

        case Keyed(entries=entries) if entries:
            ctx.log("single guard %r against %d rules", guard.raw, len(rule_nodes))
            for rule in rule_nodes:
                if await _grants(rule, guard, ctx):
                    return True
            return False

        case Keyed(entries=entries) | AllOf(entries=entries):
            ctx.log("named guards %s", list(entries))
            if not entries:
                return False
            for sub_guard in entries.values():
                if not await _check(rule_list, rule_nodes, sub_guard, ctx):
                    return False
            return True

    ctx.log("unclassifiable guard %r", guard.raw)
    return False


async def _grants(rule: Node, guard: Keyed, ctx: MatchContext) -> bool:
    """Return True if one granted rule tree satisfies a single guard.

    Nested rule lists and named rule maps are unions of grants (OR).  A
    whole-tree rule predicate is called with the raw guard.
    """
    match rule:
        case Keyed():
            return await compare_keyed(guard, rule, ctx)

        case AnyOf(items=items):
            for item in items:
                if await _grants(item, guard, ctx):
                    return True
            return False

        case AllOf(entries=entries):
            for item in entries.values():
                if await _grants(item, guard, ctx):
                    return True
            return False

        case Predicate(raw=fn):
            return await invoke_predicate(fn, guard.raw, ctx)

    ctx.log("rule %r cannot grant a single guard", rule.raw)
    return False
