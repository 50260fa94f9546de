"""
Policy Resolver

Combines the policies declared on a contract with those declared on one
of its operations. The effective set is the union of both, deduplicated
case-insensitively; the first spelling seen wins, so contract spellings
are kept over operation spellings.
"""

from typing import Iterable, Optional, Tuple


def resolve_policies(
    group: Optional[Iterable[str]],
    operation: Optional[Iterable[str]],
) -> Tuple[str, ...]:
    """Effective policy set of an operation.

    Args:
        group: Policies declared on the contract (may be empty or None)
        operation: Policies declared on the operation (may be empty or None)

    Returns:
        Tuple of policy names, contract policies first. Empty when no
        authorization is required.

    Example:
        >>> resolve_policies(["User"], ["user", "admin"])
        ('User', 'admin')
    """
    resolved = []
    seen = set()
    for policies in (group or (), operation or ()):
        for name in policies:
            key = name.casefold()
            if key in seen:
                continue
            seen.add(key)
            resolved.append(name)
    return tuple(resolved)
