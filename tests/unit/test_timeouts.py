"""Tests for request timeout resolution and enforcement."""

import asyncio
from datetime import timedelta

import pytest

from dynapi import RequestTimeoutError, RequestTimeoutPolicy, TimeoutPolicyNotFoundError, get, request_timeout
from dynapi.api.endpoint import ResolvedTimeout, invoke, resolve_timeout
from dynapi.config.settings import TimeoutSettings
from dynapi.core.binder import bind_routes
from dynapi.core.extractor import extract_contract


@request_timeout(timedelta(seconds=30))
class ISlow:

    @get("/inherited")
    async def inherited(self):
        return "ok"

    @request_timeout(True)
    @get("/disabled")
    async def disabled(self):
        return "ok"

    @request_timeout("fast")
    @get("/named")
    async def named(self):
        return "ok"

    @request_timeout(RequestTimeoutPolicy(timeout=timedelta(milliseconds=500), status_code=503))
    @get("/policy")
    async def policy(self):
        return "ok"

    @request_timeout(RequestTimeoutPolicy())
    @get("/empty-policy")
    async def empty_policy(self):
        return "ok"

    @request_timeout("missing")
    @get("/missing")
    async def missing(self):
        return "ok"


class IUnbounded:

    @get("/plain")
    async def plain(self):
        return "ok"


@pytest.fixture
def entries():
    table = bind_routes(extract_contract(ISlow), ISlow())
    return {entry.operation: entry for entry in table}


@pytest.fixture
def timeouts():
    return TimeoutSettings(policies={"fast": 0.25}, status_code=504)


def test_group_duration_is_inherited(entries, timeouts):
    assert resolve_timeout(entries["inherited"], timeouts) == ResolvedTimeout(30.0, 504)


def test_disabled(entries, timeouts):
    assert resolve_timeout(entries["disabled"], timeouts) is None


def test_named_policy(entries, timeouts):
    assert resolve_timeout(entries["named"], timeouts) == ResolvedTimeout(0.25, 504)


def test_inline_policy_status_code(entries, timeouts):
    assert resolve_timeout(entries["policy"], timeouts) == ResolvedTimeout(0.5, 503)


def test_inline_policy_without_timeout(entries, timeouts):
    assert resolve_timeout(entries["empty_policy"], timeouts) is None


def test_unknown_named_policy(entries, timeouts):
    with pytest.raises(TimeoutPolicyNotFoundError, match="missing"):
        resolve_timeout(entries["missing"], timeouts)


def test_global_default_applies_without_declaration():
    entry = bind_routes(extract_contract(IUnbounded), IUnbounded()).entries[0]

    assert resolve_timeout(entry, TimeoutSettings()) is None
    assert resolve_timeout(entry, TimeoutSettings(default_seconds=3)) == ResolvedTimeout(3.0, 504)


class TestInvoke:

    async def test_completes_within_deadline(self, entries):
        handler = entries["inherited"].handler
        assert await invoke(handler, {}, ResolvedTimeout(1.0, 504)) == "ok"

    async def test_expired_deadline_raises(self):
        class ISleepy:
            @get("/sleep")
            async def sleep(self):
                await asyncio.sleep(5)

        handler = bind_routes(extract_contract(ISleepy), ISleepy()).entries[0].handler

        with pytest.raises(RequestTimeoutError) as exc_info:
            await invoke(handler, {}, ResolvedTimeout(0.05, 503))
        assert exc_info.value.status_code == 503

    async def test_failures_propagate(self):
        class IFailing:
            @get("/fail")
            async def fail(self):
                raise ValueError("boom")

        handler = bind_routes(extract_contract(IFailing), IFailing()).entries[0].handler

        with pytest.raises(ValueError, match="boom"):
            await invoke(handler, {}, ResolvedTimeout(1.0, 504))
