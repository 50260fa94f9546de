"""Tests for the logging infrastructure."""

from unittest.mock import Mock

from dynapi.infrastructure.logging import DynamicAPILogger, RequestContext, request_context


def test_request_context_is_scoped():
    assert request_context.get() is None

    with RequestContext(contract="IPeopleService", operation="get_people") as ctx:
        assert request_context.get() is ctx
        assert ctx.correlation_id

    assert request_context.get() is None


def test_request_context_is_added_to_entries():
    with RequestContext(correlation_id="abc", contract="IPeopleService", operation="get_person",
                        verb="GET", path="/people/person/{id}"):
        event = DynamicAPILogger.add_request_context(Mock(), "info", {"event": "Route bound"})

    assert event["correlation_id"] == "abc"
    assert event["contract"] == "IPeopleService"
    assert event["operation"] == "get_person"
    assert event["verb"] == "GET"
    assert event["route"] == "/people/person/{id}"


def test_explicit_fields_are_not_overwritten():
    with RequestContext(contract="IPeopleService"):
        event = DynamicAPILogger.add_request_context(Mock(), "info", {"contract": "explicit"})

    assert event["contract"] == "explicit"


def test_entries_outside_requests_are_unchanged():
    assert DynamicAPILogger.add_request_context(Mock(), "info", {"event": "x"}) == {"event": "x"}
