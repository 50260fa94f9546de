# File: dynapi/models/interfaces.py
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel
from starlette.requests import Request


class AuthorizationResult(BaseModel):
    """Outcome of evaluating one policy against a request.

    Attributes:
        succeeded: Whether the request satisfies the policy
        failure_reason: Explanation returned to the caller when denied
    """
    succeeded: bool
    failure_reason: Optional[str] = None

    @classmethod
    def success(cls) -> "AuthorizationResult":
        return cls(succeeded=True)

    @classmethod
    def fail(cls, reason: Optional[str] = None) -> "AuthorizationResult":
        return cls(succeeded=False, failure_reason=reason)


class IAuthorizationService(ABC):
    """Evaluates named authorization policies.

    The routing engine never interprets policy names itself. Every route
    with a non-empty effective policy set asks this service to evaluate
    each policy before the handler runs; all policies must succeed.
    """

    @abstractmethod
    async def authorize(self, request: Request, policy: str) -> AuthorizationResult:
        """Evaluate ``policy`` against the identity carried by ``request``.

        Args:
            request: Incoming request (headers, state set by authentication middleware)
            policy: Policy name as declared on the contract

        Returns:
            AuthorizationResult describing allow or deny
        """
        pass


class IServiceProvider(ABC):
    """Resolves a ready-to-use instance implementing a contract type"""

    @abstractmethod
    def resolve(self, contract_type: type) -> Any:
        """Return an instance implementing ``contract_type``.

        Raises:
            LookupError: When no implementation is registered
        """
        pass
