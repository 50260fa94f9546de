"""Tests for the contract declaration decorators."""

from datetime import timedelta

import pytest

from dynapi.declarations import (
    CONTRACT_ATTRIBUTE,
    OPERATION_ATTRIBUTE,
    get,
    ignore,
    information,
    post,
    request_timeout,
    require_authorization,
    route,
    tags,
)
from dynapi.models import RequestTimeoutPolicy, TimeoutKind


def test_route_decorators_keep_source_order():
    @get("/first")
    @post("/second")
    def operation():
        pass

    routes = getattr(operation, OPERATION_ATTRIBUTE).routes
    assert [(r.verb, r.path) for r in routes] == [("GET", "/first"), ("POST", "/second")]


def test_route_uppercases_verb_without_validating():
    @route("trace", "/x")
    def operation():
        pass

    assert getattr(operation, OPERATION_ATTRIBUTE).routes[0].verb == "TRACE"


def test_route_on_class_is_rejected():
    with pytest.raises(TypeError):
        @get("/people")
        class Contract:
            pass


def test_ignore_marks_operation():
    @ignore
    @get("/x")
    def operation():
        pass

    assert getattr(operation, OPERATION_ATTRIBUTE).ignored is True


def test_class_declarations_are_not_inherited():
    @require_authorization("user")
    class Base:
        pass

    @tags("child")
    class Child(Base):
        pass

    assert vars(Child)[CONTRACT_ATTRIBUTE].policies == ()
    assert vars(Base)[CONTRACT_ATTRIBUTE].policies == ("user",)


def test_outermost_declaration_wins():
    @information(summary="outer")
    @information(summary="inner")
    def operation():
        pass

    assert getattr(operation, OPERATION_ATTRIBUTE).information.summary == "outer"


class TestRequestTimeout:

    def _timeout(self, value):
        @request_timeout(value)
        def operation():
            pass

        return getattr(operation, OPERATION_ATTRIBUTE).timeout

    def test_true_disables(self):
        assert self._timeout(True).kind is TimeoutKind.DISABLED

    def test_false_is_rejected(self):
        with pytest.raises(ValueError):
            request_timeout(False)

    def test_name(self):
        timeout = self._timeout("fast")
        assert timeout.kind is TimeoutKind.POLICY_NAME
        assert timeout.policy_name == "fast"

    def test_duration(self):
        timeout = self._timeout(timedelta(seconds=2))
        assert timeout.kind is TimeoutKind.DURATION
        assert timeout.duration == timedelta(seconds=2)

    def test_inline_policy(self):
        policy = RequestTimeoutPolicy(timeout=timedelta(seconds=1), status_code=503)
        timeout = self._timeout(policy)
        assert timeout.kind is TimeoutKind.POLICY
        assert timeout.policy is policy

    def test_unsupported_value(self):
        with pytest.raises(TypeError):
            request_timeout(5)
