"""Dynamic Controller Registration

Purpose: Expose a service contract as FastAPI routes

``add_dynamic_controller`` is the registration entry point. It resolves an
instance of the contract from the service provider, extracts the contract
descriptor, binds the routing table and attaches every route to the
application. Registration happens once per contract during startup; any
failure raises a RegistrationError and no route of the contract is attached.

Usage:
    app = FastAPI()
    use_exception_handler(app)
    add_dynamic_controller(app, IPeopleService, container, authorization)
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI

from dynapi.api.authorization import require_policies
from dynapi.api.endpoint import build_endpoint, resolve_timeout
from dynapi.core.binder import bind_routes
from dynapi.core.extractor import extract_contract
from dynapi.exceptions import (
    AuthorizationUnavailableError,
    HandlerCreationError,
    ServiceUnresolvableError,
)
from dynapi.infrastructure.logging import get_logger
from dynapi.models.contract import qualified_name
from dynapi.models.interfaces import IAuthorizationService, IServiceProvider
from dynapi.models.routing import EffectiveMetadata, RoutingTable

logger = get_logger(__name__)

ROUTING_TABLES_STATE = "dynapi_routing_tables"


def resolve_service(services: IServiceProvider, contract_type: type) -> Any:
    """Resolve the instance backing ``contract_type``.

    Raises:
        ServiceUnresolvableError: Resolution failed or produced no instance
    """
    contract = qualified_name(contract_type)
    try:
        instance = services.resolve(contract_type)
    except Exception as e:
        raise ServiceUnresolvableError(contract, str(e)) from e

    if instance is None:
        raise ServiceUnresolvableError(contract)
    return instance


def _openapi_extra(metadata: EffectiveMetadata) -> Optional[Dict[str, Any]]:
    extra = {}
    if metadata.group_name:
        extra["x-group-name"] = metadata.group_name
    if metadata.order is not None and metadata.order >= 0:
        extra["x-order"] = metadata.order
    return extra or None


def add_dynamic_controller(
    app: FastAPI,
    contract_type: type,
    services: IServiceProvider,
    authorization: Optional[IAuthorizationService] = None,
    settings=None,
    prefix: str = "",
) -> RoutingTable:
    """Create routes for every operation of ``contract_type``.

    Args:
        app: FastAPI application receiving the routes
        contract_type: Contract class carrying the declarations
        services: Provider resolving the instance that implements the contract
        authorization: Service evaluating route policies; required when any
            route has a non-empty effective policy set
        settings: ``DynamicAPISettings``; the global settings when omitted
        prefix: Path prefix for all routes of the contract

    Returns:
        The routing table of the contract

    Raises:
        RegistrationError: Registration failed; no route has been attached
    """
    if settings is None:
        from dynapi.config.settings import get_settings
        settings = get_settings()

    contract = qualified_name(contract_type)
    instance = resolve_service(services, contract_type)
    descriptor = extract_contract(contract_type)
    table = bind_routes(descriptor, instance)

    router = APIRouter(prefix=prefix)
    for entry in table:
        dependencies: List[Any] = []
        if entry.policies:
            if authorization is None:
                raise AuthorizationUnavailableError(entry.contract, entry.operation, entry.policies)
            dependencies.append(Depends(require_policies(entry.policies, authorization)))

        endpoint = build_endpoint(entry, settings, resolve_timeout(entry, settings.timeouts))
        metadata = entry.metadata
        try:
            router.add_api_route(
                entry.path,
                endpoint,
                methods=[entry.verb.value],
                name=f"{contract_type.__name__}.{entry.operation}",
                summary=metadata.summary,
                description=metadata.description,
                tags=list(metadata.tags) or None,
                dependencies=dependencies,
                response_model=None,
                openapi_extra=_openapi_extra(metadata),
            )
        except Exception as e:
            raise HandlerCreationError(entry.contract, entry.operation, str(e)) from e

    app.include_router(router)

    tables = getattr(app.state, ROUTING_TABLES_STATE, None)
    if tables is None:
        tables = {}
        setattr(app.state, ROUTING_TABLES_STATE, tables)
    tables[contract] = table

    logger.info(
        "Dynamic controller registered",
        contract=contract,
        routes=len(table),
        excluded=[op.name for op in descriptor.operations if op.excluded],
    )
    return table


def routing_tables(app: FastAPI) -> Dict[str, RoutingTable]:
    """Routing tables registered on ``app``, keyed by contract name"""
    return dict(getattr(app.state, ROUTING_TABLES_STATE, None) or {})
