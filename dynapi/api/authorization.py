"""Authorization Dependencies

Purpose: FastAPI dependency enforcing the effective policy set of a route

The guard runs before the route handler. It asks the authorization service
to evaluate every policy of the set and rejects the request with 403 on the
first denial, so the handler never executes for an unauthorized caller.
"""

import inspect
import logging
from typing import Callable, Sequence

from fastapi import HTTPException, Request

from dynapi.models.interfaces import IAuthorizationService

logger = logging.getLogger(__name__)


def require_policies(policies: Sequence[str], authorization: IAuthorizationService) -> Callable:
    """Build a dependency requiring every policy in ``policies``

    Args:
        policies: Effective policy set of the route
        authorization: Service evaluating policies

    Returns:
        Async dependency callable for ``fastapi.Depends``
    """
    policies = tuple(policies)

    async def authorize(request: Request) -> None:
        for policy in policies:
            result = authorization.authorize(request, policy)
            if inspect.isawaitable(result):
                result = await result

            if not result.succeeded:
                reason = result.failure_reason or f"Policy '{policy}' required"
                logger.info(f"Authorization denied for {request.method} {request.url.path}: {reason}")
                raise HTTPException(status_code=403, detail=reason)

    return authorize
