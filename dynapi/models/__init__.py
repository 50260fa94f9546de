"""Data models for contracts, routing tables and API payloads"""

from .contract import (
    BindingSource,
    ContractDescriptor,
    EndpointMetadata,
    HttpLogging,
    HttpLoggingFields,
    HttpVerb,
    Information,
    OperationDescriptor,
    ParameterBinding,
    RequestTimeout,
    RequestTimeoutPolicy,
    RouteDeclaration,
    TimeoutKind,
    qualified_name,
)
from .routing import EffectiveMetadata, RouteEntry, RoutingTable
from .api import ProblemResponse
from .interfaces import AuthorizationResult, IAuthorizationService, IServiceProvider

__all__ = [
    "BindingSource",
    "ContractDescriptor",
    "EndpointMetadata",
    "HttpLogging",
    "HttpLoggingFields",
    "HttpVerb",
    "Information",
    "OperationDescriptor",
    "ParameterBinding",
    "RequestTimeout",
    "RequestTimeoutPolicy",
    "RouteDeclaration",
    "TimeoutKind",
    "qualified_name",
    "EffectiveMetadata",
    "RouteEntry",
    "RoutingTable",
    "ProblemResponse",
    "AuthorizationResult",
    "IAuthorizationService",
    "IServiceProvider",
]
