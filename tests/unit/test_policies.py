"""Tests for the effective policy set of an operation."""

import pytest

from dynapi.core.policies import resolve_policies


def test_no_policies_means_no_authorization():
    assert resolve_policies([], []) == ()
    assert resolve_policies(None, None) == ()


def test_group_policies_apply_to_operation_without_own_policies():
    assert resolve_policies(["user"], []) == ("user",)


def test_operation_policies_are_added_to_group_policies():
    assert resolve_policies(["user"], ["admin"]) == ("user", "admin")


def test_duplicates_are_removed_case_insensitively_keeping_group_spelling():
    assert resolve_policies(["User"], ["user", "admin"]) == ("User", "admin")


def test_duplicates_within_one_level_are_removed():
    assert resolve_policies(["admin", "ADMIN"], None) == ("admin",)


@pytest.mark.parametrize(
    "group, operation",
    [
        (["a", "b"], ["c"]),
        (["a"], ["A", "b"]),
        ([], ["x", "y", "X"]),
    ],
)
def test_resolution_is_deterministic(group, operation):
    assert resolve_policies(group, operation) == resolve_policies(group, operation)
