"""Header based authorization for the sample server"""

from typing import Iterable

from starlette.requests import Request

from dynapi import AuthorizationResult, IAuthorizationService

GRANTS_HEADER = "X-Grants"


class GrantAuthorizationService(IAuthorizationService):
    """Grants every caller the default policies plus those listed in ``X-Grants``.

    Example:
        X-Grants: admin, auditor
    """

    def __init__(self, default_grants: Iterable[str] = ("user",)):
        self.default_grants = frozenset(g.casefold() for g in default_grants)

    def grants(self, request: Request) -> frozenset:
        header = request.headers.get(GRANTS_HEADER, "")
        extra = {g.strip().casefold() for g in header.split(",") if g.strip()}
        return self.default_grants | extra

    async def authorize(self, request: Request, policy: str) -> AuthorizationResult:
        if policy.casefold() in self.grants(request):
            return AuthorizationResult.success()
        return AuthorizationResult.fail(f"Policy '{policy}' required")
