"""
Exception Translator

Maps failures to problem responses ``{"status": ..., "detail": ...}``:

- a failure carrying a status code and message (``DynamicAPIException``,
  Starlette/FastAPI ``HTTPException``) keeps that status and message;
- any other failure becomes status 500 with the failure message, or the
  configured unhandled-exception text when the message is empty.

``translate_exception`` runs at the boundary of every handler invocation;
``use_exception_handler`` installs the same translation on the application
for failures raised outside handlers (authorization, validation).
"""

import logging
from typing import Any, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dynapi.exceptions import DynamicAPIException
from dynapi.models.api import ProblemResponse

logger = logging.getLogger(__name__)

UNHANDLED_EXCEPTION_DETAIL = "Unhandled exception was thrown"
PROBLEM_MEDIA_TYPE = "application/problem+json"


def translate_exception(exc: Optional[BaseException], unhandled_detail: str = UNHANDLED_EXCEPTION_DETAIL) -> ProblemResponse:
    """Translate a failure into a ProblemResponse.

    Args:
        exc: Failure raised while handling a request
        unhandled_detail: Detail used when an unclassified failure has no message

    Returns:
        ProblemResponse with the failure's own status, or 500 when it has
        none or carries a status outside 100-599
    """
    if isinstance(exc, DynamicAPIException):
        status, message = exc.status_code, exc.message
    elif isinstance(exc, StarletteHTTPException):
        status, message = exc.status_code, _detail_text(exc.detail)
    else:
        status, message = None, (str(exc) if exc is not None else "")

    if _is_http_status(status):
        return ProblemResponse(status=status, detail=message)
    # statuses outside 100-599 are answered as unclassified failures
    return ProblemResponse(status=500, detail=message or unhandled_detail)


def _is_http_status(status: Optional[int]) -> bool:
    return status is not None and 100 <= status <= 599


def _detail_text(detail: Any) -> str:
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("detail") or detail)
    return str(detail)


def problem_response(
    problem: ProblemResponse,
    media_type: str = PROBLEM_MEDIA_TYPE,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Render a ProblemResponse as an HTTP response"""
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(),
        media_type=media_type,
        headers=dict(headers) if headers else None,
    )


def use_exception_handler(app: FastAPI, settings=None) -> FastAPI:
    """Install problem-response exception handlers on ``app``.

    Args:
        app: FastAPI application
        settings: ``DynamicAPISettings``; the global settings when omitted

    Returns:
        The same application
    """
    if settings is None:
        from dynapi.config.settings import get_settings
        settings = get_settings()

    unhandled_detail = settings.errors.unhandled_detail
    media_type = settings.errors.problem_media_type

    async def domain_exception_handler(request: Request, exc: DynamicAPIException):
        logger.warning(f"{request.method} {request.url.path} failed with {exc.status_code}: {exc.message}")
        return problem_response(translate_exception(exc), media_type)

    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return problem_response(translate_exception(exc), media_type, getattr(exc, "headers", None))

    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Request validation errors (422) rendered as a problem"""
        errors = exc.errors()
        logger.info(f"Validation error on {request.method} {request.url.path}: {errors}")
        detail = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in errors
        ) or "Validation error"
        return problem_response(ProblemResponse(status=422, detail=detail), media_type)

    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error on {request.method} {request.url.path}: {exc}",
                     exc_info=settings.errors.log_tracebacks)
        return problem_response(translate_exception(exc, unhandled_detail), media_type)

    app.add_exception_handler(DynamicAPIException, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    return app
