"""
Route Binder

Purpose: Turn a ContractDescriptor and an instance implementing the contract
into a RoutingTable.

For every routed operation and every one of its verb/path pairs the binder
validates the verb, binds a handler to the instance, merges metadata and
policies against the contract group and records a RouteEntry. Any failure
raises a RegistrationError subclass naming the contract and operation; no
table is returned in that case.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from dynapi.core.extractor import optional_placeholders, path_placeholders
from dynapi.core.metadata import merge_metadata
from dynapi.core.policies import resolve_policies
from dynapi.exceptions import HandlerCreationError, UnsupportedVerbError
from dynapi.infrastructure.logging import get_logger
from dynapi.models.contract import (
    BindingSource,
    ContractDescriptor,
    HttpVerb,
    OperationDescriptor,
    ParameterBinding,
)
from dynapi.models.routing import RouteEntry, RoutingTable

logger = get_logger(__name__)

SUPPORTED_VERBS: Dict[str, HttpVerb] = {verb.value: verb for verb in HttpVerb}


def parse_verb(verb: str) -> Optional[HttpVerb]:
    """Map a declared verb to ``HttpVerb``; None when unsupported"""
    return SUPPORTED_VERBS.get((verb or "").upper())


@dataclass(frozen=True)
class BoundHandler:
    """An operation bound to a contract instance.

    Calling the handler is a single awaitable step: coroutine functions are
    awaited, plain functions run in the thread pool.
    """
    operation: str
    target: Callable[..., Any]
    bindings: Tuple[ParameterBinding, ...]
    is_coroutine: bool

    async def __call__(self, arguments: Mapping[str, Any]) -> Any:
        kwargs = {
            binding.parameter: arguments[binding.parameter]
            for binding in self.bindings
            if binding.parameter in arguments
        }
        if self.is_coroutine:
            return await self.target(**kwargs)

        result = await asyncio.to_thread(self.target, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


def create_handler(descriptor: ContractDescriptor, operation: OperationDescriptor, instance: Any) -> BoundHandler:
    """Bind ``operation`` to ``instance``.

    Raises:
        HandlerCreationError: The instance lacks the operation, the attribute
            is not callable or abstract, or its signature cannot accept the
            bound parameters
    """
    contract = descriptor.name
    try:
        target = getattr(instance, operation.name)
    except AttributeError as e:
        raise HandlerCreationError(
            contract, operation.name,
            f"'{type(instance).__name__}' does not implement '{operation.name}'",
        ) from e

    if not callable(target):
        raise HandlerCreationError(contract, operation.name, f"'{operation.name}' is not callable")
    if getattr(target, "__isabstractmethod__", False):
        raise HandlerCreationError(contract, operation.name, f"'{operation.name}' is abstract")

    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        signature = None

    if signature is not None:
        try:
            signature.bind_partial(**{binding.parameter: None for binding in operation.bindings})
        except TypeError as e:
            raise HandlerCreationError(
                contract, operation.name,
                f"implementation signature {signature} cannot accept the bound parameters: {e}",
            ) from e

    return BoundHandler(
        operation=operation.name,
        target=target,
        bindings=operation.bindings,
        is_coroutine=inspect.iscoroutinefunction(target),
    )


def _check_path_bindings(descriptor: ContractDescriptor, operation: OperationDescriptor, path: str) -> None:
    optional = optional_placeholders(path)
    if optional:
        raise HandlerCreationError(
            descriptor.name, operation.name,
            f"optional path segment '{{{optional[0]}?}}' in '{path}' is not supported; "
            f"declare one route with and one without the segment",
        )
    placeholders = set(path_placeholders(path))
    for binding in operation.bindings:
        if binding.source is BindingSource.PATH and binding.name not in placeholders:
            raise HandlerCreationError(
                descriptor.name, operation.name,
                f"parameter '{binding.parameter}' is bound to path placeholder '{binding.name}' "
                f"which does not appear in '{path}'",
            )


def bind_routes(descriptor: ContractDescriptor, instance: Any) -> RoutingTable:
    """Build the routing table of a contract.

    Args:
        descriptor: Extracted contract descriptor
        instance: Resolved instance implementing the contract

    Returns:
        RoutingTable with one entry per verb/path pair of every routed operation

    Raises:
        UnsupportedVerbError: A declared verb is not GET, POST, PUT, DELETE or PATCH
        HandlerCreationError: A handler cannot be bound to the instance
    """
    entries = []
    for operation in descriptor.routed_operations:
        handler = None
        effective_metadata = None
        effective_policies = None

        for declared in operation.routes:
            verb = parse_verb(declared.verb)
            if verb is None:
                raise UnsupportedVerbError(descriptor.name, operation.name, declared.verb)

            if handler is None:
                handler = create_handler(descriptor, operation, instance)
                effective_metadata = merge_metadata(descriptor.metadata, operation.metadata)
                effective_policies = resolve_policies(descriptor.policies, operation.policies)

            _check_path_bindings(descriptor, operation, declared.path)

            entries.append(RouteEntry(
                verb=verb,
                path=declared.path,
                handler=handler,
                metadata=effective_metadata,
                policies=effective_policies,
                contract=descriptor.name,
                operation=operation.name,
            ))
            logger.debug(
                "Route bound",
                contract=descriptor.name,
                operation=operation.name,
                verb=verb.value,
                path=declared.path,
                policies=list(effective_policies),
            )

    return RoutingTable(contract=descriptor.name, entries=tuple(entries))
