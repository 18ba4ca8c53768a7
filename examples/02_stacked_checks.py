#!/usr/bin/env python3
"""Example: Stacked checks — aumos-access-guard

Protect an operation with two independent checks, first with decorators
and then with the ProtectedOperation builder.

Usage:
    python examples/02_stacked_checks.py
"""
from __future__ import annotations

import asyncio

from aumos_access_guard import (
    Action,
    Check,
    ProtectedOperation,
    Resource,
    SecureConfig,
    make_secure,
    make_secure_decorator,
)


async def get_credentials() -> dict[str, object]:
    return {"rules": [{"action": Action.UPDATE, "resource": Resource.COMMENT}]}


async def is_owner(_: object, user: object, __: object, params: tuple) -> bool:
    # params are the positional arguments of the protected call
    return params[0] == user


config = SecureConfig(get_credentials, data="alice")
secured = make_secure_decorator(config)


@secured({"action": Action.UPDATE, "resource": Resource.COMMENT}, on_fail="not allowed")
@secured(is_owner, on_fail="not the owner")
def edit_comment(author: str, text: str) -> str:
    return f"{author} edited: {text}"


async def main() -> None:
    print(await edit_comment("alice", "hello"))
    print(await edit_comment("bob", "hello"))

    edit = (
        ProtectedOperation(make_secure(config), lambda author, text: f"{author}: {text}")
        .require(Check({"action": Action.UPDATE, "resource": Resource.COMMENT}))
        .require(Check(is_owner, on_fail="not the owner"))
        .build()
    )
    print(await edit("alice", "built"))
    print(await edit("bob", "built"))


if __name__ == "__main__":
    asyncio.run(main())
