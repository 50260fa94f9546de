"""
Metadata Merge Resolver

Combines contract-level (group) and operation-level metadata into the
effective metadata of one operation.

Merge rules:
- Scalars (description, group name, summary, order, logging record,
  timeout record) come from the operation when it declares them, otherwise
  from the group. Values are never blended.
- Logging and timeout are whole records: an operation record replaces the
  group record entirely.
- Tags and metadata items are concatenated, group values first, without
  deduplication.

Order is special: a group order takes effect only when it is >= 0, while an
operation order counts as declared from -1 upwards.
"""

from typing import Optional

from dynapi.models.contract import EndpointMetadata, Information
from dynapi.models.routing import EffectiveMetadata

GROUP_ORDER_THRESHOLD = 0
OPERATION_ORDER_THRESHOLD = -1


def _text(information: Optional[Information], attribute: str) -> Optional[str]:
    value = getattr(information, attribute, None) if information else None
    return value or None


def _group_order(information: Optional[Information]) -> Optional[int]:
    order = information.order if information else None
    if order is not None and order >= GROUP_ORDER_THRESHOLD:
        return order
    return None


def _operation_order(information: Optional[Information]) -> Optional[int]:
    order = information.order if information else None
    if order is not None and order >= OPERATION_ORDER_THRESHOLD:
        return order
    return None


def _override(operation_value, group_value):
    return operation_value if operation_value is not None else group_value


def merge_metadata(group: Optional[EndpointMetadata], operation: Optional[EndpointMetadata]) -> EffectiveMetadata:
    """Effective metadata of an operation.

    Args:
        group: Metadata declared on the contract
        operation: Metadata declared on the operation

    Returns:
        EffectiveMetadata
    """
    group = group or EndpointMetadata()
    operation = operation or EndpointMetadata()
    group_info = group.information
    operation_info = operation.information

    return EffectiveMetadata(
        description=_override(_text(operation_info, "description"), _text(group_info, "description")),
        group_name=_override(_text(operation_info, "group_name"), _text(group_info, "group_name")),
        summary=_override(_text(operation_info, "summary"), _text(group_info, "summary")),
        order=_override(_operation_order(operation_info), _group_order(group_info)),
        logging=_override(operation.logging, group.logging),
        timeout=_override(operation.timeout, group.timeout),
        tags=tuple(group.tags) + tuple(operation.tags),
        items=tuple(group.items) + tuple(operation.items),
    )
