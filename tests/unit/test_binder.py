"""Tests for building routing tables from contract descriptors."""

import asyncio
import threading

import pytest

from dynapi import HandlerCreationError, UnsupportedVerbError, get, ignore, information, post, require_authorization, route
from dynapi.core.binder import bind_routes, parse_verb
from dynapi.core.extractor import extract_contract
from dynapi.models import HttpVerb


@require_authorization("user")
@information(summary="group")
class IWidgets:

    @get("/widgets/{id}")
    @get("/widgets/by-id/{id}")
    async def get_widget(self, id: str):
        raise NotImplementedError

    @require_authorization("admin", "USER")
    @information(summary="create")
    @post("/widgets")
    def create_widget(self, name: str):
        raise NotImplementedError

    @ignore
    @route("TRACE", "/widgets/trace")
    def trace(self):
        raise NotImplementedError


class Widgets(IWidgets):

    async def get_widget(self, id: str):
        return {"id": id}

    def create_widget(self, name: str):
        return {"name": name, "thread": threading.current_thread().name}

    def trace(self):
        return None


def test_parse_verb():
    assert parse_verb("get") is HttpVerb.GET
    assert parse_verb("PATCH") is HttpVerb.PATCH
    assert parse_verb("TRACE") is None
    assert parse_verb("") is None


def test_one_entry_per_route_and_excluded_operations_skipped():
    table = bind_routes(extract_contract(IWidgets), Widgets())

    assert [(e.verb, e.path) for e in table] == [
        (HttpVerb.GET, "/widgets/{id}"),
        (HttpVerb.GET, "/widgets/by-id/{id}"),
        (HttpVerb.POST, "/widgets"),
    ]
    assert table.for_operation("trace") == ()


def test_entries_carry_effective_policies_and_metadata():
    table = bind_routes(extract_contract(IWidgets), Widgets())

    get_entry = table.find(HttpVerb.GET, "/widgets/{id}")[0]
    post_entry = table.find(HttpVerb.POST, "/widgets")[0]

    assert get_entry.policies == ("user",)
    assert get_entry.metadata.summary == "group"
    assert post_entry.policies == ("user", "admin")
    assert post_entry.metadata.summary == "create"
    assert post_entry.requires_authorization


def test_routes_of_one_operation_share_the_handler():
    table = bind_routes(extract_contract(IWidgets), Widgets())
    first, second = table.for_operation("get_widget")
    assert first.handler is second.handler


def test_binding_is_idempotent():
    descriptor = extract_contract(IWidgets)
    instance = Widgets()

    first = bind_routes(descriptor, instance)
    second = bind_routes(descriptor, instance)

    assert [(e.verb, e.path, e.policies, e.metadata) for e in first] == \
        [(e.verb, e.path, e.policies, e.metadata) for e in second]


def test_unsupported_verb_names_contract_and_operation():
    class IBroken:

        @route("TRACE", "/trace")
        def trace(self):
            pass

    with pytest.raises(UnsupportedVerbError) as exc_info:
        bind_routes(extract_contract(IBroken), IBroken())

    message = str(exc_info.value)
    assert "IBroken" in message
    assert "trace" in message
    assert "'TRACE' is not supported" in message
    assert exc_info.value.operation == "trace"


def test_missing_implementation_fails_handler_creation():
    class Incomplete:
        pass

    with pytest.raises(HandlerCreationError) as exc_info:
        bind_routes(extract_contract(IWidgets), Incomplete())
    assert exc_info.value.operation == "get_widget"


def test_incompatible_signature_fails_handler_creation():
    class WrongSignature(Widgets):
        async def get_widget(self, key: str):
            return key

    with pytest.raises(HandlerCreationError, match="get_widget"):
        bind_routes(extract_contract(IWidgets), WrongSignature())


def test_path_binding_without_placeholder_fails():
    from typing import Annotated
    from dynapi import FromPath

    class IMismatch:

        @get("/things")
        def get_thing(self, id: Annotated[str, FromPath("id")]):
            return id

    with pytest.raises(HandlerCreationError, match="placeholder 'id'"):
        bind_routes(extract_contract(IMismatch), IMismatch())


class TestBoundHandler:

    async def test_coroutine_operation_is_awaited(self):
        table = bind_routes(extract_contract(IWidgets), Widgets())
        handler = table.find(HttpVerb.GET, "/widgets/{id}")[0].handler

        assert handler.is_coroutine
        assert await handler({"id": "42"}) == {"id": "42"}

    async def test_plain_operation_runs_in_thread_pool(self):
        table = bind_routes(extract_contract(IWidgets), Widgets())
        handler = table.find(HttpVerb.POST, "/widgets")[0].handler

        result = await handler({"name": "gear"})

        assert not handler.is_coroutine
        assert result["name"] == "gear"
        assert result["thread"] != threading.main_thread().name

    async def test_plain_operation_returning_awaitable_is_awaited(self):
        class ILazy:
            @get("/lazy")
            def lazy(self):
                pass

        class Lazy(ILazy):
            def lazy(self):
                async def compute():
                    await asyncio.sleep(0)
                    return "done"
                return compute()

        table = bind_routes(extract_contract(ILazy), Lazy())
        assert await table.entries[0].handler({}) == "done"


def test_optional_path_segment_fails_with_clear_message():
    class IOptional:

        @get("/things/{id?}")
        def get_thing(self, id: str = ""):
            return id

    with pytest.raises(HandlerCreationError, match=r"optional path segment '\{id\?\}'"):
        bind_routes(extract_contract(IOptional), IOptional())
