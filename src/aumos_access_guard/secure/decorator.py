"""Composition layer: stack independent checks around a protected operation.

Each applied check becomes one layer.  At call time the outermost layer
runs first:

- decision result ``is True``  -> the next inner layer (or the operation)
  runs with the original arguments
- decision result is callable  -> it is called with the original arguments
  instead of proceeding inward
- anything else                -> returned immediately; inner layers never run

Every layer decides on its own.  A deny-style check (inverted outcomes)
only stops propagation past itself, so it must be the innermost layer,
closest to the operation.

Example
-------
::

    secure_check = make_secure_decorator(SecureConfig(get_credentials))

    @secure_check({"action": Action.CREATE, "resource": Resource.COMMENT})
    async def create_comment(text: str) -> str:
        ...

    # Equivalent explicit form
    create = (
        ProtectedOperation(make_secure(config), create_comment_impl)
        .require(Check({"action": Action.CREATE, "resource": Resource.COMMENT}))
        .build()
    )
"""
from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from aumos_access_guard.secure.pipeline import Secure, SecureConfig, make_secure, resolve
from aumos_access_guard.types import UNSET


@dataclass(frozen=True)
class Check:
    """One authorization check applied to an operation.

    Attributes
    ----------
    guard:
        Guard tree for this check.  ``None`` denies.
    extra_data:
        Per-check context passed to predicates and callable outcomes.
    on_success, on_fail:
        Per-check outcome overrides; unset falls back to the pipeline
        defaults.
    """

    guard: object = None
    extra_data: object = None
    on_success: object = UNSET
    on_fail: object = UNSET


def _layer(
    secure: Secure,
    check: Check,
    inner: Callable[..., object],
) -> Callable[..., Awaitable[object]]:
    """Wrap ``inner`` with the decision pipeline for ``check``."""

    @functools.wraps(inner)
    async def guarded(*args: object, **kwargs: object) -> object:
        result = await secure(
            check.guard,
            extra_data=check.extra_data,
            on_success=check.on_success,
            on_fail=check.on_fail,
            params=args,
            keywords=kwargs,
        )
        if result is True:
            return await resolve(inner(*args, **kwargs))
        if callable(result):
            return await resolve(result(*args, **kwargs))
        return result

    return guarded


class ProtectedOperation:
    """Builder composing an ordered list of checks around one operation.

    Checks are applied outside-in in the order they are required: the first
    required check is the outermost layer.

    Parameters
    ----------
    secure:
        Decision pipeline shared by every layer.
    operation:
        The protected callable, sync or async.
    """

    def __init__(self, secure: Secure, operation: Callable[..., object]) -> None:
        self._secure = secure
        self._operation = operation
        self._checks: list[Check] = []

    def require(self, check: Check) -> ProtectedOperation:
        """Append ``check`` as the next (more inner) layer and return self."""
        self._checks.append(check)
        return self

    @property
    def checks(self) -> tuple[Check, ...]:
        return tuple(self._checks)

    def build(self) -> Callable[..., Awaitable[object]]:
        """Return a single async callable running every layer.

        With no checks the operation is only adapted to an async callable.
        """
        body: Callable[..., object] = self._operation
        if not self._checks:
            operation = self._operation

            @functools.wraps(operation)
            async def unguarded(*args: object, **kwargs: object) -> object:
                return await resolve(operation(*args, **kwargs))

            return unguarded

        for check in reversed(self._checks):
            body = _layer(self._secure, check, body)
        return body  # type: ignore[return-value]


class SecureDecorator:
    """Decorator factory bound to one decision pipeline.

    Parameters
    ----------
    config:
        Pipeline configuration shared by every decorated operation.
    """

    def __init__(self, config: SecureConfig) -> None:
        self._secure = make_secure(config)

    @property
    def secure(self) -> Secure:
        return self._secure

    def __call__(
        self,
        guard: object = None,
        *,
        extra_data: object = None,
        on_success: object = UNSET,
        on_fail: object = UNSET,
    ) -> Callable[[Callable[..., object]], Callable[..., Awaitable[object]]]:
        check = Check(
            guard=guard,
            extra_data=extra_data,
            on_success=on_success,
            on_fail=on_fail,
        )

        def decorate(operation: Callable[..., object]) -> Callable[..., Awaitable[object]]:
            return _layer(self._secure, check, operation)

        return decorate


def make_secure_decorator(config: SecureConfig) -> SecureDecorator:
    """Build a decorator factory from ``config``."""
    return SecureDecorator(config)
