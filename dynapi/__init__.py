"""
dynapi - dynamic HTTP APIs from declared service contracts.

A contract is a class whose methods carry routing and metadata
declarations. ``add_dynamic_controller`` resolves an implementation of the
contract, builds its routing table and exposes every route on a FastAPI
application.
"""

from dynapi.declarations import (
    FromBody,
    FromPath,
    FromQuery,
    delete,
    get,
    http_logging,
    ignore,
    information,
    metadata,
    patch,
    post,
    put,
    request_timeout,
    require_authorization,
    route,
    tags,
)
from dynapi.exceptions import (
    AuthorizationUnavailableError,
    ConfigurationError,
    DynamicAPIError,
    DynamicAPIException,
    HandlerCreationError,
    RegistrationError,
    RequestTimeoutError,
    ServiceUnresolvableError,
    TimeoutPolicyNotFoundError,
    UnsupportedVerbError,
)
from dynapi.models import (
    AuthorizationResult,
    HttpLoggingFields,
    IAuthorizationService,
    IServiceProvider,
    ProblemResponse,
    RequestTimeoutPolicy,
)
from dynapi.container import ServiceContainer
from dynapi.api import add_dynamic_controller, routing_tables, use_exception_handler

__version__ = "1.0.0"

__all__ = [
    "FromBody",
    "FromPath",
    "FromQuery",
    "delete",
    "get",
    "http_logging",
    "ignore",
    "information",
    "metadata",
    "patch",
    "post",
    "put",
    "request_timeout",
    "require_authorization",
    "route",
    "tags",
    "AuthorizationUnavailableError",
    "ConfigurationError",
    "DynamicAPIError",
    "DynamicAPIException",
    "HandlerCreationError",
    "RegistrationError",
    "RequestTimeoutError",
    "ServiceUnresolvableError",
    "TimeoutPolicyNotFoundError",
    "UnsupportedVerbError",
    "AuthorizationResult",
    "HttpLoggingFields",
    "IAuthorizationService",
    "IServiceProvider",
    "ProblemResponse",
    "RequestTimeoutPolicy",
    "ServiceContainer",
    "add_dynamic_controller",
    "routing_tables",
    "use_exception_handler",
]
