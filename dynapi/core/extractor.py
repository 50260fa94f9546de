"""
Contract Descriptor Extractor

Purpose: Build a ContractDescriptor from the declarations recorded on a
contract type.

Rules:
- Operations are discovered along the MRO of the contract (``object``
  excluded); the first declaration of a name wins. Only functions that
  carry a declaration record are operations.
- An ignored operation is extracted but marked excluded; its parameters
  are not resolved.
- A parameter without an explicit marker binds to a path placeholder of
  the same name, to the query string when its annotation is a scalar
  (or a list, set or tuple of scalars), and to the body otherwise.

Malformed declarations are not rejected here; the route binder fails
registration for them.
"""

import collections.abc
import datetime
import decimal
import enum
import inspect
import logging
import re
import types
import typing
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from dynapi.declarations import (
    CONTRACT_ATTRIBUTE,
    OPERATION_ATTRIBUTE,
    BindingMarker,
    ContractDeclaration,
    OperationDeclaration,
)
from dynapi.models.contract import (
    BindingSource,
    ContractDescriptor,
    EndpointMetadata,
    OperationDescriptor,
    ParameterBinding,
    RouteDeclaration,
)

logger = logging.getLogger(__name__)

# {id}, {id:int}, {id?}
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?:[:?][^}]*)?\}")
_OPTIONAL_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\?\}")


def path_placeholders(path: str) -> List[str]:
    """Placeholder names of a path template, in order of appearance"""
    return _PLACEHOLDER.findall(path)


def optional_placeholders(path: str) -> List[str]:
    """Placeholders using the optional-segment syntax (``{id?}``)"""
    return _OPTIONAL_PLACEHOLDER.findall(path)


def extract_contract(contract_type: type) -> ContractDescriptor:
    """Extract the descriptor of ``contract_type``.

    Args:
        contract_type: Class carrying contract declarations

    Returns:
        ContractDescriptor with operations in declaration order
    """
    group = vars(contract_type).get(CONTRACT_ATTRIBUTE) or ContractDeclaration()

    operations = []
    seen: Set[str] = set()
    for klass in contract_type.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen:
                continue
            declaration = getattr(member, OPERATION_ATTRIBUTE, None)
            if not isinstance(declaration, OperationDeclaration):
                continue
            seen.add(name)
            operations.append(_describe_operation(name, member, declaration))

    descriptor = ContractDescriptor(
        contract_type=contract_type,
        metadata=_metadata_of(group),
        policies=tuple(group.policies),
        operations=tuple(operations),
    )
    logger.debug(
        f"Extracted contract {descriptor.name}: {len(operations)} operation(s), "
        f"{len(operations) - len(descriptor.routed_operations)} excluded"
    )
    return descriptor


def _metadata_of(declaration: ContractDeclaration) -> EndpointMetadata:
    return EndpointMetadata(
        information=declaration.information,
        logging=declaration.logging,
        timeout=declaration.timeout,
        tags=tuple(declaration.tags),
        items=tuple(declaration.items),
    )


def _describe_operation(name: str, func: Any, declaration: OperationDeclaration) -> OperationDescriptor:
    routes = tuple(declaration.routes)
    if declaration.ignored:
        return OperationDescriptor(
            name=name,
            routes=routes,
            metadata=_metadata_of(declaration),
            policies=tuple(declaration.policies),
            excluded=True,
        )

    return OperationDescriptor(
        name=name,
        routes=routes,
        bindings=resolve_bindings(func, routes),
        metadata=_metadata_of(declaration),
        policies=tuple(declaration.policies),
    )


def resolve_bindings(func: Any, routes: Iterable[RouteDeclaration]) -> Tuple[ParameterBinding, ...]:
    """Determine where every parameter of ``func`` is read from"""
    placeholders: Set[str] = set()
    for declared in routes:
        placeholders.update(path_placeholders(declared.path))

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return ()

    hints = _type_hints(func)
    bindings = []
    for index, parameter in enumerate(signature.parameters.values()):
        if index == 0 and parameter.name in ("self", "cls"):
            continue
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = parameter.annotation
        if isinstance(annotation, str):
            annotation = hints.get(parameter.name, annotation)
        annotation, marker = _split_annotation(annotation)
        if marker is not None:
            source = marker.source
            wire_name = marker.name or parameter.name
        elif parameter.name in placeholders:
            source = BindingSource.PATH
            wire_name = parameter.name
        elif _is_query_annotation(annotation):
            source = BindingSource.QUERY
            wire_name = parameter.name
        else:
            source = BindingSource.BODY
            wire_name = parameter.name

        bindings.append(ParameterBinding(
            parameter=parameter.name,
            source=source,
            name=wire_name,
            annotation=annotation,
            default=parameter.default,
        ))
    return tuple(bindings)


def _type_hints(func: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(func, include_extras=True)
    except Exception as e:
        # Unresolvable forward references fall back to the raw annotations
        logger.debug(f"Could not resolve type hints of {getattr(func, '__qualname__', func)}: {e}")
        return {}


def _split_annotation(annotation: Any) -> Tuple[Any, Optional[BindingMarker]]:
    """Strip ``Annotated`` and return (base type, binding marker or None)"""
    if typing.get_origin(annotation) is typing.Annotated:
        base, *extras = typing.get_args(annotation)
        markers = [extra for extra in extras if isinstance(extra, BindingMarker)]
        return base, (markers[-1] if markers else None)
    return annotation, None


_SCALAR_TYPES = (
    str, int, float, bool, bytes,
    decimal.Decimal, uuid.UUID, enum.Enum,
    datetime.date, datetime.time, datetime.timedelta,
)
_SEQUENCE_ORIGINS = (list, set, frozenset, tuple, collections.abc.Sequence, collections.abc.Set)
_UNION_ORIGINS = tuple(
    origin for origin in (typing.Union, getattr(types, "UnionType", None)) if origin is not None
)


def _is_scalar(annotation: Any) -> bool:
    if annotation in (inspect.Parameter.empty, Any):
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Literal:
        return True
    if origin in _UNION_ORIGINS:
        return all(_is_scalar(arg) for arg in typing.get_args(annotation) if arg is not type(None))
    if origin is not None:
        return False
    return inspect.isclass(annotation) and issubclass(annotation, _SCALAR_TYPES)


def _is_query_annotation(annotation: Any) -> bool:
    """Whether an unmarked parameter can be read from the query string"""
    if _is_scalar(annotation):
        return True
    origin = typing.get_origin(annotation)
    if origin in _UNION_ORIGINS:
        return all(_is_query_annotation(arg) for arg in typing.get_args(annotation) if arg is not type(None))
    if annotation in _SEQUENCE_ORIGINS:
        return True
    if origin in _SEQUENCE_ORIGINS:
        return all(_is_scalar(arg) for arg in typing.get_args(annotation) if arg is not Ellipsis)
    return False
