"""Decision pipeline: credentials -> admin bypass -> matcher -> outcome.

:func:`make_secure` binds a :class:`SecureConfig` and returns an async
``secure`` callable.  Each call fetches credentials exactly once, skips the
matcher for administrators, and maps the boolean decision to the configured
success or fail outcome.

Outcomes
--------
- exception instance or class -> raised to the caller
- callable                    -> called with ``(data, extra_data)``; if that
  returns another callable it is called with the protected operation's
  original arguments
- anything else               -> returned unchanged

Example
-------
>>> import asyncio
>>> async def get_credentials():
...     return {"rules": [{"action": "CREATE", "resource": "COMMENT"}]}
>>> secure = make_secure(SecureConfig(get_credentials, on_default_fail="ko"))
>>> asyncio.run(secure({"action": "CREATE", "resource": "COMMENT"}))
True
>>> asyncio.run(secure({"action": "DELETE", "resource": "COMMENT"}))
'ko'
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from aumos_access_guard.matching.guard import check_guard
from aumos_access_guard.types import UNSET, Credential, CredentialProvider, Role

logger = logging.getLogger(__name__)


class AccessDeniedError(Exception):
    """Ready-made fail outcome for callers that want denials raised.

    The pipeline raises it only when it is configured as a fail value.

    Attributes
    ----------
    guard:
        Description of the guard that denied access, if supplied.
    """

    def __init__(self, message: str = "Access denied", guard: object = None) -> None:
        self.guard = guard
        super().__init__(message)


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


class OutcomeKind(str, Enum):
    LITERAL = "literal"
    ERROR = "error"
    CALLABLE = "callable"


@dataclass(frozen=True)
class Outcome:
    """A configured success/fail value tagged by how it must be delivered."""

    kind: OutcomeKind
    value: object

    @classmethod
    def of(cls, raw: object) -> Outcome:
        if isinstance(raw, BaseException) or (
            isinstance(raw, type) and issubclass(raw, BaseException)
        ):
            return cls(OutcomeKind.ERROR, raw)
        if callable(raw):
            return cls(OutcomeKind.CALLABLE, raw)
        return cls(OutcomeKind.LITERAL, raw)

    async def deliver(
        self,
        data: object,
        extra_data: object,
        params: tuple[object, ...],
        keywords: Mapping[str, object],
    ) -> object:
        """Turn the outcome into the value returned to the caller.

        Raises
        ------
        BaseException
            The configured exception, for ERROR outcomes.
        """
        match self.kind:
            case OutcomeKind.ERROR:
                raise self.value  # type: ignore[misc]
            case OutcomeKind.CALLABLE:
                first = await resolve(self.value(data, extra_data))  # type: ignore[operator]
                if callable(first):
                    return await resolve(first(*params, **keywords))
                return first
            case _:
                return self.value


async def resolve(value: object) -> object:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


# ---------------------------------------------------------------------------
# SecureConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SecureConfig:
    """Configuration of one decision pipeline.

    Attributes
    ----------
    get_credentials:
        Async provider returning ``{"roles": [...], "rules": [...]}`` or a
        :class:`~aumos_access_guard.types.Credential`.
    data:
        Default context passed to every predicate and callable outcome.
    on_default_success:
        Outcome when access is granted.  Default ``True``.
    on_default_fail:
        Outcome when access is denied.  Default ``False``.
    admin_role:
        Role marker that bypasses guard evaluation.
    trace:
        Optional logger handed to the matcher for step-by-step DEBUG output.
    """

    get_credentials: CredentialProvider
    data: object = None
    on_default_success: object = True
    on_default_fail: object = False
    admin_role: object = Role.ADMIN
    trace: logging.Logger | None = field(default=None, compare=False)


class Secure:
    """Callable decision pipeline bound to a :class:`SecureConfig`."""

    def __init__(self, config: SecureConfig) -> None:
        self._config = config

    @property
    def config(self) -> SecureConfig:
        return self._config

    async def decide(
        self,
        guard: object = None,
        extra_data: object = None,
        params: tuple[object, ...] = (),
    ) -> bool:
        """Return the raw boolean decision for ``guard``.

        Fetches credentials once.  A credential holding the admin role is
        allowed without evaluating the guard.  Provider and predicate
        exceptions propagate unchanged.
        """
        config = self._config
        credential = Credential.from_mapping(await config.get_credentials())

        if credential.has_role(config.admin_role):
            logger.debug("Access ALLOW (admin bypass): guard=%r", guard)
            return True

        allowed = await check_guard(
            list(credential.rules),
            guard if guard is not None else {},
            config.data,
            extra_data,
            params,
            trace=config.trace,
        )
        logger.debug(
            "Access %s: guard=%r rules=%d",
            "ALLOW" if allowed else "DENY",
            guard,
            len(credential.rules),
        )
        return allowed

    async def __call__(
        self,
        guard: object = None,
        *,
        extra_data: object = None,
        on_success: object = UNSET,
        on_fail: object = UNSET,
        params: tuple[object, ...] = (),
        keywords: Mapping[str, object] | None = None,
    ) -> object:
        """Decide on ``guard`` and deliver the matching outcome.

        Parameters
        ----------
        guard:
            Guard tree.  ``None`` means the empty guard, which denies.
        extra_data:
            Per-call context passed to predicates and callable outcomes.
        on_success, on_fail:
            Per-call overrides of the configured outcomes.  Any value,
            including ``None``, overrides; leave unset to use the defaults.
        params, keywords:
            Original arguments of the protected operation.  ``params`` is
            visible to predicates; both are used for curried outcomes.

        Returns
        -------
        object
            The delivered outcome.
        """
        config = self._config
        allowed = await self.decide(guard, extra_data, params)

        if allowed:
            raw = config.on_default_success if on_success is UNSET else on_success
        else:
            raw = config.on_default_fail if on_fail is UNSET else on_fail

        return await Outcome.of(raw).deliver(
            config.data, extra_data, tuple(params), keywords or {}
        )


def make_secure(config: SecureConfig) -> Secure:
    """Build a decision pipeline from ``config``."""
    return Secure(config)
