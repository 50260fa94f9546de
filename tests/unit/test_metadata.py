"""Tests for merging contract-level and operation-level metadata."""

from datetime import timedelta

import pytest

from dynapi.core.metadata import merge_metadata
from dynapi.models import (
    EndpointMetadata,
    HttpLogging,
    HttpLoggingFields,
    Information,
    RequestTimeout,
)


def _info(**kwargs) -> EndpointMetadata:
    return EndpointMetadata(information=Information(**kwargs))


class TestInformation:

    def test_operation_values_override_group_values(self):
        effective = merge_metadata(
            _info(description="group", summary="group summary", group_name="people"),
            _info(description="operation"),
        )
        assert effective.description == "operation"
        assert effective.summary == "group summary"
        assert effective.group_name == "people"

    def test_empty_operation_text_does_not_override(self):
        effective = merge_metadata(_info(description="API to access companies"), _info(description=""))
        assert effective.description == "API to access companies"

    def test_nothing_declared(self):
        effective = merge_metadata(None, None)
        assert effective.description is None
        assert effective.order is None
        assert effective.tags == ()
        assert effective.logging is None
        assert effective.timeout is None


class TestOrder:

    def test_group_order_applies_from_zero(self):
        assert merge_metadata(_info(order=0), None).order == 0
        assert merge_metadata(_info(order=3), None).order == 3

    def test_negative_group_order_is_ignored(self):
        assert merge_metadata(_info(order=-1), None).order is None

    def test_operation_order_minus_one_counts(self):
        assert merge_metadata(_info(order=5), _info(order=-1)).order == -1

    def test_operation_order_below_minus_one_is_ignored(self):
        assert merge_metadata(_info(order=5), _info(order=-2)).order == 5

    def test_undeclared_operation_order_keeps_group_order(self):
        assert merge_metadata(_info(order=2), _info(summary="x")).order == 2


class TestCollections:

    def test_tags_are_concatenated_group_first(self):
        effective = merge_metadata(
            EndpointMetadata(tags=("a", "b")),
            EndpointMetadata(tags=("b", "c")),
        )
        assert effective.tags == ("a", "b", "b", "c")

    def test_items_are_concatenated_group_first(self):
        marker = object()
        effective = merge_metadata(EndpointMetadata(items=("group",)), EndpointMetadata(items=(marker,)))
        assert effective.items == ("group", marker)


class TestWholeRecordReplacement:

    def test_operation_logging_replaces_group_logging(self):
        group = HttpLogging(HttpLoggingFields.ALL, request_body_limit=10, response_body_limit=20)
        operation = HttpLogging(HttpLoggingFields.REQUEST_PATH)

        effective = merge_metadata(EndpointMetadata(logging=group), EndpointMetadata(logging=operation))

        assert effective.logging is operation
        assert effective.logging.request_body_limit is None

    def test_group_logging_is_inherited(self):
        group = HttpLogging(HttpLoggingFields.DURATION)
        assert merge_metadata(EndpointMetadata(logging=group), EndpointMetadata()).logging is group

    @pytest.mark.parametrize(
        "operation_timeout",
        [
            RequestTimeout.disabled(),
            RequestTimeout.named("fast"),
            RequestTimeout.after(timedelta(seconds=1)),
        ],
    )
    def test_operation_timeout_replaces_group_timeout(self, operation_timeout):
        group = EndpointMetadata(timeout=RequestTimeout.after(timedelta(seconds=30)))
        effective = merge_metadata(group, EndpointMetadata(timeout=operation_timeout))
        assert effective.timeout is operation_timeout


def test_timeout_variants_are_exclusive():
    with pytest.raises(ValueError):
        RequestTimeout(RequestTimeout.disabled().kind, policy_name="fast")
