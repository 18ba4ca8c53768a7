"""Recursive value comparison between guard nodes and rule nodes.

The same :func:`compare` function is reentered for both sides of the
comparison; the side currently being classified is the *candidate*, the
other side is the *reference*.  A scalar candidate facing a non-scalar
reference swaps roles once, so lists on either side yield elementwise OR
and predicates on either side receive the opposing raw value.

The policy is asymmetric only in :func:`compare_keyed`: a guard key that
the rule does not carry matches only when the guard value is a predicate.

Example
-------
>>> import asyncio
>>> from aumos_access_guard.matching.nodes import parse_value
>>> asyncio.run(compare(parse_value("FIND"), parse_value(["GET", "FIND"]), MatchContext()))
True
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field

from aumos_access_guard.matching.nodes import (
    AllOf,
    AnyOf,
    Keyed,
    Node,
    Predicate,
    Scalar,
)


@dataclass(frozen=True)
class MatchContext:
    """Caller context threaded unchanged through every recursive call.

    Attributes
    ----------
    data:
        Default context configured on the decision pipeline.
    extra_data:
        Per-call context.
    params:
        Positional arguments of the protected operation.
    trace:
        Optional logger.  When set, every comparison step is logged at
        DEBUG through it; when ``None`` the matcher logs nothing.
    """

    data: object = None
    extra_data: object = None
    params: tuple[object, ...] = field(default_factory=tuple)
    trace: logging.Logger | None = None

    def log(self, message: str, *args: object) -> None:
        if self.trace is not None:
            self.trace.debug(message, *args)


async def invoke_predicate(fn: object, value: object, ctx: MatchContext) -> bool:
    """Call a predicate leaf with ``value`` and the threaded context.

    The predicate is called as ``fn(value, data, extra_data, params)``.  An
    awaitable result is awaited; the outcome is coerced with ``bool``.
    Exceptions raised by the predicate propagate unchanged.
    """
    result = fn(value, ctx.data, ctx.extra_data, ctx.params)  # type: ignore[operator]
    if inspect.isawaitable(result):
        result = await result
    ctx.log("predicate %r(%r) -> %r", fn, value, result)
    return bool(result)


async def compare(candidate: Node, reference: Node, ctx: MatchContext) -> bool:
    """Compare one node of the guard tree against one node of the rule tree.

    Parameters
    ----------
    candidate:
        The node being classified at this depth.
    reference:
        The opposing node.
    ctx:
        Threaded context, visible only to predicates.

    Returns
    -------
    bool
        ``True`` when ``candidate`` is satisfied by ``reference``.
    """
    match candidate:
        case AnyOf(items=items):
            ctx.log("any-of %d items vs %r", len(items), reference.raw)
            for item in items:
                if await compare(item, reference, ctx):
                    return True
            return False

        case Keyed() if isinstance(reference, (Keyed, AllOf)):
            return await compare_keyed(candidate, reference, ctx)

        case Keyed(entries=entries) | AllOf(entries=entries):
            ctx.log("all-of %d entries vs %r", len(entries), reference.raw)
            if not entries:
                return False
            for node in entries.values():
                if not await compare(node, reference, ctx):
                    return False
            return True

        case Predicate(raw=fn):
            return await invoke_predicate(fn, reference.raw, ctx)

        case Scalar(raw=value):
            if isinstance(reference, Scalar):
                matched = value == reference.raw
                ctx.log("scalar %r == %r -> %s", value, reference.raw, matched)
                return matched
            return await compare(reference, candidate, ctx)

    return False


async def compare_keyed(
    guard: Keyed | AllOf,
    rule: Keyed | AllOf,
    ctx: MatchContext,
) -> bool:
    """Compare a single guard against a single rule, key by key.

    Every guard key must match (AND).  A key present in both is compared
    with :func:`compare`, guard value first.  A key missing from the rule
    matches only if the guard value is a predicate, which is then called
    with the whole raw rule.  An empty guard never matches.
    """
    if not guard.entries:
        return False

    for key, guard_node in guard.entries.items():
        if key in rule.entries:
            matched = await compare(guard_node, rule.entries[key], ctx)
        elif isinstance(guard_node, Predicate):
            matched = await invoke_predicate(guard_node.raw, rule.raw, ctx)
        else:
            ctx.log("key %r missing from rule %r", key, rule.raw)
            matched = False
        if not matched:
            return False
    return True
