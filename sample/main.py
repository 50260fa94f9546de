"""
Sample server.

Run with:
    python -m sample.main
"""

import logging
from typing import Optional

from fastapi import FastAPI

from dynapi import ServiceContainer, add_dynamic_controller, use_exception_handler
from dynapi.api.middleware import RequestIdMiddleware
from dynapi.config.settings import DynamicAPISettings, get_settings
from dynapi.infrastructure.logging import configure_logging
from sample.authorization import GrantAuthorizationService
from sample.contracts import ICompanyService, IPeopleService
from sample.services import CompanyService, PeopleService

logger = logging.getLogger(__name__)


def create_container() -> ServiceContainer:
    container = ServiceContainer()
    container.register(IPeopleService, PeopleService)
    container.register(ICompanyService, CompanyService)
    return container


def create_app(
    settings: Optional[DynamicAPISettings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Create the sample application"""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="dynapi sample",
        description="People and company APIs generated from service contracts",
        version="1.0.0",
        docs_url="/docs" if settings.is_development() else None,
    )
    app.add_middleware(RequestIdMiddleware)
    use_exception_handler(app, settings)

    container = container or create_container()
    authorization = GrantAuthorizationService()
    for contract in (IPeopleService, ICompanyService):
        add_dynamic_controller(app, contract, container, authorization, settings=settings)

    logger.info("Sample application created")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sample.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )
