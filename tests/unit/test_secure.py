"""Tests for the decision pipeline (make_secure / Secure)."""
from __future__ import annotations

import logging

import pytest

from aumos_access_guard.secure.pipeline import (
    AccessDeniedError,
    Outcome,
    OutcomeKind,
    SecureConfig,
    make_secure,
    resolve,
)
from aumos_access_guard.types import Action, Credential, Resource, Role

_RULES: list[dict[str, object]] = [
    {
        "action": [Action.CREATE, Action.DELETE, Action.UPDATE, Action.FIND, Action.GET],
        "resource": Resource.COMMENT,
        "role": Role.ADMIN,
    },
    {
        "action": [Action.FIND, Action.GET],
        "resource": Resource.SPACE,
        "role": Role.USER,
    },
]

_ALLOWED = {"action": Action.CREATE, "resource": Resource.COMMENT}
_DENIED = {"action": Action.CREATE, "resource": Resource.SPACE}


async def get_credentials() -> dict[str, object]:
    return {"rules": _RULES}


async def get_empty_credentials() -> dict[str, object]:
    return {}


async def get_admin_credentials() -> dict[str, object]:
    return {"roles": [Role.ADMIN]}


# ---------------------------------------------------------------------------
# Basic decisions
# ---------------------------------------------------------------------------


class TestBasicDecisions:
    @pytest.mark.asyncio
    async def test_simple_rules_and_guards(self) -> None:
        secure = make_secure(SecureConfig(get_credentials))
        assert await secure(_ALLOWED) is True
        assert await secure(_DENIED) is False

    @pytest.mark.asyncio
    async def test_default_policy_is_deny(self) -> None:
        assert await make_secure(SecureConfig(get_empty_credentials))() is False
        assert await make_secure(SecureConfig(get_credentials))() is False

    @pytest.mark.asyncio
    async def test_admin_has_full_access(self) -> None:
        secure = make_secure(SecureConfig(get_admin_credentials))
        assert await secure() is True
        assert await secure({"role": Role.USER}) is True

    @pytest.mark.asyncio
    async def test_admin_gets_configured_success_outcome(self) -> None:
        secure = make_secure(SecureConfig(get_admin_credentials, on_default_success="ok"))
        assert await secure({"role": Role.GUESS}) == "ok"

    @pytest.mark.asyncio
    async def test_admin_bypass_skips_predicates(self) -> None:
        calls: list[object] = []

        async def record(*args: object) -> bool:
            calls.append(args)
            return False

        secure = make_secure(SecureConfig(get_admin_credentials))
        assert await secure(record) is True
        assert calls == []

    @pytest.mark.asyncio
    async def test_custom_admin_role(self) -> None:
        async def provider() -> dict[str, object]:
            return {"roles": ["ROOT"]}

        assert await make_secure(SecureConfig(provider))() is False
        assert await make_secure(SecureConfig(provider, admin_role="ROOT"))() is True

    @pytest.mark.asyncio
    async def test_provider_may_return_credential(self) -> None:
        async def provider() -> Credential:
            return Credential(rules=tuple(_RULES))

        assert await make_secure(SecureConfig(provider))(_ALLOWED) is True

    @pytest.mark.asyncio
    async def test_decide_returns_raw_boolean(self) -> None:
        secure = make_secure(SecureConfig(get_credentials, on_default_fail="ko"))
        assert await secure.decide(_DENIED) is False


# ---------------------------------------------------------------------------
# Credential fetching
# ---------------------------------------------------------------------------


class TestCredentialFetching:
    @pytest.mark.asyncio
    async def test_exactly_one_fetch_per_call(self) -> None:
        calls: list[int] = []

        async def provider() -> dict[str, object]:
            calls.append(1)
            return {"rules": _RULES}

        secure = make_secure(SecureConfig(provider))
        await secure(_ALLOWED)
        await secure(_DENIED)
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self) -> None:
        async def provider() -> dict[str, object]:
            raise ConnectionError("credential store unavailable")

        secure = make_secure(SecureConfig(provider, on_default_fail="ko"))
        with pytest.raises(ConnectionError, match="unavailable"):
            await secure(_ALLOWED)

    @pytest.mark.asyncio
    async def test_single_rule_and_role_are_accepted(self) -> None:
        async def provider() -> dict[str, object]:
            return {"roles": Role.USER, "rules": {"action": Action.GET, "resource": Resource.SPACE}}

        secure = make_secure(SecureConfig(provider))
        assert await secure({"action": Action.GET, "resource": Resource.SPACE}) is True
        assert await secure({"action": Action.GET, "resource": Resource.COMMENT}) is False

    @pytest.mark.asyncio
    async def test_whole_tree_rule_predicate(self) -> None:
        async def grant_reads(guard: object, *_: object) -> bool:
            return guard.get("action") in (Action.FIND, Action.GET)  # type: ignore[union-attr]

        async def provider() -> dict[str, object]:
            return {"rules": grant_reads}

        secure = make_secure(SecureConfig(provider))
        assert await secure({"action": Action.FIND}) is True
        assert await secure({"action": Action.DELETE}) is False

    @pytest.mark.asyncio
    async def test_none_fields_default_to_empty(self) -> None:
        async def provider() -> dict[str, object]:
            return {"roles": None, "rules": None}

        assert await make_secure(SecureConfig(provider))(_ALLOWED) is False


# ---------------------------------------------------------------------------
# Configured outcomes
# ---------------------------------------------------------------------------


class TestDefaultOutcomes:
    @pytest.mark.asyncio
    async def test_string_outcomes(self) -> None:
        secure = make_secure(
            SecureConfig(get_credentials, on_default_fail="ko", on_default_success="ok")
        )
        assert await secure(_ALLOWED) == "ok"
        assert await secure(_DENIED) == "ko"

    @pytest.mark.asyncio
    async def test_callable_and_error_outcomes(self) -> None:
        secure = make_secure(
            SecureConfig(
                get_credentials,
                on_default_fail=ValueError("ko"),
                on_default_success=lambda *_: "ok",
            )
        )
        assert await secure(_ALLOWED) == "ok"
        with pytest.raises(ValueError, match="ko"):
            await secure(_DENIED)

    @pytest.mark.asyncio
    async def test_exception_class_outcome_is_raised(self) -> None:
        secure = make_secure(SecureConfig(get_credentials, on_default_fail=AccessDeniedError))
        with pytest.raises(AccessDeniedError):
            await secure(_DENIED)

    @pytest.mark.asyncio
    async def test_async_callable_outcome(self) -> None:
        async def on_success(data: object, extra_data: object) -> str:
            return f"ok:{data}:{extra_data}"

        secure = make_secure(
            SecureConfig(get_credentials, data="d", on_default_success=on_success)
        )
        assert await secure(_ALLOWED, extra_data="e") == "ok:d:e"


class TestInlineOutcomes:
    @pytest.mark.asyncio
    async def test_inline_overrides(self) -> None:
        secure = make_secure(
            SecureConfig(get_credentials, on_default_fail="ko", on_default_success="ok")
        )
        assert await secure(_ALLOWED, on_fail="KO", on_success="OK") == "OK"
        assert await secure(_DENIED, on_fail="KO", on_success="OK") == "KO"

    @pytest.mark.asyncio
    async def test_none_is_a_valid_override(self) -> None:
        secure = make_secure(SecureConfig(get_credentials, on_default_fail="ko"))
        assert await secure(_DENIED, on_fail=None) is None

    @pytest.mark.asyncio
    async def test_curried_outcome_receives_params(self) -> None:
        def on_fail(data: object, extra_data: object):
            return lambda *args, **kwargs: ("curried", args, kwargs)

        secure = make_secure(SecureConfig(get_credentials))
        result = await secure(
            _DENIED, on_fail=on_fail, params=(1, 2), keywords={"flag": True}
        )
        assert result == ("curried", (1, 2), {"flag": True})


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestContext:
    @pytest.mark.asyncio
    async def test_data_reaches_predicates(self) -> None:
        secure = make_secure(SecureConfig(get_credentials, data=Action.CREATE))

        async def check(_: object, action: object, *__: object) -> bool:
            return action == Action.CREATE

        assert await secure({"action": check}) is True

    @pytest.mark.asyncio
    async def test_extra_data_reaches_predicates(self) -> None:
        secure = make_secure(SecureConfig(get_credentials, data=Action.CREATE))

        async def check(_: object, action: object, resource: object, __: object) -> bool:
            return action == Action.CREATE and resource == Resource.COMMENT

        assert await secure({"action": check}, extra_data=Resource.COMMENT) is True

    @pytest.mark.asyncio
    async def test_params_reach_predicates(self) -> None:
        secure = make_secure(SecureConfig(get_empty_credentials))

        async def first_param_true(_: object, __: object, ___: object, params: tuple) -> bool:
            return params[0] is True

        assert await secure(first_param_true, params=(True,)) is True
        assert await secure(first_param_true, params=(False,)) is False

    @pytest.mark.asyncio
    async def test_decision_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        secure = make_secure(SecureConfig(get_credentials))
        with caplog.at_level(logging.DEBUG, logger="aumos_access_guard.secure.pipeline"):
            await secure(_DENIED)
        assert any("DENY" in record.getMessage() for record in caplog.records)


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


class TestOutcome:
    def test_classification(self) -> None:
        assert Outcome.of("ok").kind is OutcomeKind.LITERAL
        assert Outcome.of(None).kind is OutcomeKind.LITERAL
        assert Outcome.of(ValueError("x")).kind is OutcomeKind.ERROR
        assert Outcome.of(ValueError).kind is OutcomeKind.ERROR
        assert Outcome.of(lambda *_: None).kind is OutcomeKind.CALLABLE

    @pytest.mark.asyncio
    async def test_callable_returning_literal(self) -> None:
        outcome = Outcome.of(lambda data, extra: (data, extra))
        assert await outcome.deliver("d", "e", (), {}) == ("d", "e")

    @pytest.mark.asyncio
    async def test_resolve_awaits_only_awaitables(self) -> None:
        async def produce() -> str:
            return "awaited"

        assert await resolve(produce()) == "awaited"
        assert await resolve("plain") == "plain"

    def test_access_denied_error_carries_guard(self) -> None:
        error = AccessDeniedError(guard={"role": Role.ADMIN})
        assert error.guard == {"role": Role.ADMIN}
        assert str(error) == "Access denied"
