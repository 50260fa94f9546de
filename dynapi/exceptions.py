"""
Exception classes for the dynapi routing engine.

Two families live here:

- Registration-time errors (``RegistrationError`` and subclasses) abort
  application startup. They carry the contract type and operation that
  could not be bound so the failure can be diagnosed from the traceback.
- ``DynamicAPIException`` is raised by contract implementations while
  serving a request. It carries the HTTP status code that the caller
  should receive and is translated into a problem response.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional, Union


class DynamicAPIError(Exception):
    """Base exception for dynapi system errors"""

    def __init__(self, message: str, error_code: str = None, context: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "DYNAPI_ERROR"
        self.context = context or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(DynamicAPIError):
    """Configuration-related errors"""

    def __init__(self, message: str, error_code: str = None, context: Dict[str, Any] = None):
        super().__init__(message, error_code or "CONFIG_ERROR", context)


class RegistrationError(DynamicAPIError):
    """Raised when a contract cannot be turned into routes.

    Attributes:
        contract: Qualified name of the contract type
        operation: Name of the operation being bound, if any
    """

    def __init__(
        self,
        message: str,
        contract: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: str = None,
        context: Dict[str, Any] = None,
    ):
        context = dict(context or {})
        if contract:
            context.setdefault("contract", contract)
        if operation:
            context.setdefault("operation", operation)
        super().__init__(message, error_code or "REGISTRATION_ERROR", context)
        self.contract = contract
        self.operation = operation


class UnsupportedVerbError(RegistrationError):
    """A declared HTTP verb is outside GET, POST, PUT, DELETE and PATCH"""

    def __init__(self, contract: str, operation: str, verb: str):
        super().__init__(
            f"{contract}.{operation} --> Handling '{verb}' is not supported. "
            f"Use the 'ignore' decorator to skip this operation when creating the controller.",
            contract=contract,
            operation=operation,
            error_code="UNSUPPORTED_VERB",
            context={"verb": verb},
        )
        self.verb = verb


class ServiceUnresolvableError(RegistrationError):
    """The service provider could not produce an instance of the contract"""

    def __init__(self, contract: str, reason: Optional[str] = None):
        message = (
            f"Service for type '{contract}' not found. "
            f"Make sure that the service is registered with the service container."
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, contract=contract, error_code="SERVICE_UNRESOLVABLE")


class HandlerCreationError(RegistrationError):
    """A handler could not be bound to the resolved contract instance"""

    def __init__(self, contract: str, operation: str, reason: Optional[str] = None):
        message = f"Error creating handler for {contract}.{operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            contract=contract,
            operation=operation,
            error_code="HANDLER_CREATION_FAILED",
        )


class TimeoutPolicyNotFoundError(RegistrationError):
    """A route references a named timeout policy that is not configured"""

    def __init__(self, contract: str, operation: str, policy_name: str):
        super().__init__(
            f"{contract}.{operation} references timeout policy '{policy_name}' "
            f"which is not defined in the timeout settings",
            contract=contract,
            operation=operation,
            error_code="TIMEOUT_POLICY_NOT_FOUND",
            context={"policy_name": policy_name},
        )
        self.policy_name = policy_name


class AuthorizationUnavailableError(RegistrationError):
    """A route requires policies but no authorization service was supplied"""

    def __init__(self, contract: str, operation: str, policies):
        super().__init__(
            f"{contract}.{operation} requires authorization ({', '.join(policies)}) "
            f"but no authorization service was configured",
            contract=contract,
            operation=operation,
            error_code="AUTHORIZATION_UNAVAILABLE",
            context={"policies": list(policies)},
        )


class DynamicAPIException(Exception):
    """Raised by a contract implementation to answer with a specific status code.

    Example:
        >>> raise DynamicAPIException(HTTPStatus.NOT_FOUND, "Person not found!")
    """

    def __init__(
        self,
        status_code: Union[int, HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR,
        message: Optional[str] = None,
    ):
        self.status_code = int(status_code)
        if not message:
            try:
                message = HTTPStatus(self.status_code).phrase
            except ValueError:
                message = "Unhandled exception was thrown"
        super().__init__(message)
        self.message = message


class RequestTimeoutError(DynamicAPIException):
    """Raised when a handler exceeds the effective request timeout"""

    def __init__(self, seconds: float, status_code: int = HTTPStatus.GATEWAY_TIMEOUT):
        super().__init__(status_code, "Request timed out")
        self.seconds = seconds
