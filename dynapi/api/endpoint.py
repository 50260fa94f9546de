"""
Endpoint factory.

Builds the FastAPI endpoint callable of one RouteEntry. The endpoint:

- exposes one keyword parameter per binding (path placeholder, query key or
  body) so FastAPI extracts and validates the arguments from the request;
- invokes the bound handler as a single awaitable step, under the route's
  effective request timeout when one applies;
- translates any failure raised by the invocation into a problem response;
- writes HTTP log entries when the route carries a logging record.
"""

import asyncio
import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Body, Path, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import Response

from dynapi.api.http_logging import HttpLoggingRecorder
from dynapi.api.problem import problem_response, translate_exception
from dynapi.core.binder import BoundHandler
from dynapi.exceptions import (
    DynamicAPIException,
    HandlerCreationError,
    RequestTimeoutError,
    TimeoutPolicyNotFoundError,
)
from dynapi.infrastructure.logging import RequestContext, get_logger
from dynapi.models.contract import BindingSource, HttpLoggingFields, TimeoutKind
from dynapi.models.routing import RouteEntry

logger = get_logger(__name__)

REQUEST_PARAMETER = "dynapi_request"


@dataclass(frozen=True)
class ResolvedTimeout:
    """Deadline applied to each invocation of a route"""
    seconds: float
    status_code: int


def resolve_timeout(entry: RouteEntry, timeouts) -> Optional[ResolvedTimeout]:
    """Resolve the effective timeout variant of a route against the timeout settings.

    Args:
        entry: Route whose effective metadata carries the timeout record
        timeouts: ``TimeoutSettings``

    Returns:
        ResolvedTimeout, or None when the route runs without a deadline

    Raises:
        TimeoutPolicyNotFoundError: The route names an undefined timeout policy
    """
    timeout = entry.metadata.timeout
    status_code = timeouts.status_code

    if timeout is None:
        if timeouts.default_seconds:
            return ResolvedTimeout(timeouts.default_seconds, status_code)
        return None

    if timeout.kind is TimeoutKind.DISABLED:
        return None

    if timeout.kind is TimeoutKind.POLICY:
        policy = timeout.policy
        if policy.timeout is None:
            return None
        return ResolvedTimeout(policy.timeout.total_seconds(), policy.status_code or status_code)

    if timeout.kind is TimeoutKind.POLICY_NAME:
        seconds = timeouts.policies.get(timeout.policy_name)
        if seconds is None:
            raise TimeoutPolicyNotFoundError(entry.contract, entry.operation, timeout.policy_name)
        return ResolvedTimeout(float(seconds), status_code)

    return ResolvedTimeout(timeout.duration.total_seconds(), status_code)


async def invoke(handler: BoundHandler, arguments: Dict[str, Any], timeout: Optional[ResolvedTimeout] = None) -> Any:
    """Invoke ``handler``, enforcing ``timeout`` when given.

    Raises:
        RequestTimeoutError: The deadline passed before the handler completed
    """
    if timeout is None:
        return await handler(arguments)

    task = asyncio.ensure_future(handler(arguments))
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout.seconds)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if not done:
        task.cancel()
        raise RequestTimeoutError(timeout.seconds, timeout.status_code)
    return task.result()


def _endpoint_parameters(entry: RouteEntry) -> Tuple[List[inspect.Parameter], Dict[str, str]]:
    """Endpoint signature parameters and the mapping endpoint name -> handler parameter"""
    parameters = [
        inspect.Parameter(REQUEST_PARAMETER, inspect.Parameter.KEYWORD_ONLY, annotation=Request)
    ]
    names: Dict[str, str] = {}

    for binding in entry.handler.bindings:
        annotation = Any if binding.annotation is inspect.Parameter.empty else binding.annotation
        default = ... if binding.required else binding.default

        if binding.source is BindingSource.PATH:
            # FastAPI matches path parameters by name
            endpoint_name = binding.name
            field = Path(...)
        elif binding.source is BindingSource.QUERY:
            endpoint_name = binding.parameter
            alias = binding.name if binding.name != binding.parameter else None
            field = Query(default, alias=alias)
        else:
            endpoint_name = binding.parameter
            field = Body(default)

        if endpoint_name in names or endpoint_name == REQUEST_PARAMETER or not endpoint_name.isidentifier():
            raise HandlerCreationError(
                entry.contract, entry.operation,
                f"parameter '{binding.parameter}' cannot be exposed as '{endpoint_name}'",
            )
        names[endpoint_name] = binding.parameter
        parameters.append(inspect.Parameter(
            endpoint_name, inspect.Parameter.KEYWORD_ONLY, default=field, annotation=annotation,
        ))

    return parameters, names


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if result is None:
        return Response(status_code=200)
    return JSONResponse(content=jsonable_encoder(result))


def build_endpoint(entry: RouteEntry, settings, timeout: Optional[ResolvedTimeout] = None) -> Callable:
    """Build the FastAPI endpoint of a route.

    Args:
        entry: Route to expose
        settings: ``DynamicAPISettings``
        timeout: Deadline from ``resolve_timeout``

    Returns:
        Async endpoint callable with a signature FastAPI can introspect
    """
    handler = entry.handler
    parameters, argument_names = _endpoint_parameters(entry)

    recorder = None
    record = entry.metadata.logging
    if record is not None and record.fields != HttpLoggingFields.NONE:
        recorder = HttpLoggingRecorder(
            record,
            settings.http_logging.request_body_limit,
            settings.http_logging.response_body_limit,
        )

    unhandled_detail = settings.errors.unhandled_detail
    media_type = settings.errors.problem_media_type
    log_tracebacks = settings.errors.log_tracebacks

    async def endpoint(**kwargs):
        request: Request = kwargs.pop(REQUEST_PARAMETER)
        arguments = {argument_names[name]: value for name, value in kwargs.items()}

        context = RequestContext(
            contract=entry.contract,
            operation=entry.operation,
            verb=entry.verb.value,
            path=entry.path,
        )
        correlation_id = getattr(request.state, "request_id", None)
        if correlation_id:
            context.correlation_id = correlation_id

        with context:
            started = time.perf_counter()
            try:
                if recorder is not None:
                    await recorder.log_request(request)
                response = _to_response(await invoke(handler, arguments, timeout))
            except Exception as exc:
                problem = translate_exception(exc, unhandled_detail)
                if isinstance(exc, (DynamicAPIException, StarletteHTTPException)):
                    logger.warning("Operation failed", status=problem.status, detail=problem.detail)
                else:
                    logger.error(
                        "Unhandled exception in operation",
                        error_type=type(exc).__name__,
                        exc_info=exc if log_tracebacks else None,
                    )
                headers = exc.headers if isinstance(exc, StarletteHTTPException) else None
                response = problem_response(problem, media_type, headers)

            if recorder is not None:
                recorder.log_response(response, (time.perf_counter() - started) * 1000)
            return response

    endpoint.__signature__ = inspect.Signature(parameters)
    endpoint.__name__ = entry.operation
    endpoint.__qualname__ = entry.operation
    endpoint.__doc__ = entry.metadata.description
    return endpoint
