#!/usr/bin/env python3
"""Example: Quickstart — aumos-access-guard

Minimal working example: grant rules to a user, then check guards
against them with and without configured outcomes.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-access-guard
"""
from __future__ import annotations

import asyncio

import aumos_access_guard as guard
from aumos_access_guard import Action, Resource, Role

RULES = [
    {
        "action": [Action.CREATE, Action.DELETE, Action.FIND],
        "resource": Resource.COMMENT,
        "role": Role.ADMIN,
    },
    {
        "action": [Action.FIND, Action.GET],
        "resource": Resource.SPACE,
        "role": Role.USER,
    },
]


async def get_credentials() -> dict[str, object]:
    return {"roles": [Role.USER], "rules": RULES}


async def main() -> None:
    print(f"aumos-access-guard version: {guard.__version__}")

    # Step 1: Plain structural matching
    allowed = await guard.check_guard(
        RULES, {"action": Action.CREATE, "resource": Resource.COMMENT}
    )
    print(f"check_guard(CREATE COMMENT) -> {allowed}")

    # Step 2: A decision pipeline with configured outcomes
    secure = guard.make_secure(
        guard.SecureConfig(get_credentials, on_default_success="ok", on_default_fail="ko")
    )
    guards = [
        {"action": Action.GET, "resource": Resource.SPACE},
        {"action": Action.DELETE, "resource": Resource.SPACE},
        {"admin": {"role": Role.ADMIN}, "comment": {"resource": Resource.COMMENT}},
    ]
    print("\nDecisions:")
    for item in guards:
        print(f"  [{await secure(item)}] {item}")

    # Step 3: Raise instead of returning on denial
    try:
        await secure({"role": Role.GUESS}, on_fail=guard.AccessDeniedError)
    except guard.AccessDeniedError as exc:
        print(f"\nRaised: {exc}")


if __name__ == "__main__":
    asyncio.run(main())
