"""
Contract declaration surface.

Decorators with which a service contract is written. Each decorator records
plain declaration data on the decorated class or function when the class is
defined; the extractor later reads those records.

Usage:
    @require_authorization("user")
    @information(description="API to access people")
    class IPeopleService(ABC):

        @get("/people/person/{id}")
        @abstractmethod
        async def get_person(self, id: str) -> Person: ...

        @require_authorization("admin")
        @delete("/people/person/{id}")
        @abstractmethod
        async def delete_person(self, id: Annotated[str, FromPath("id")]) -> None: ...

Decorators that accept a class declare group-level metadata for every
operation of the contract; on a function they declare operation-level
metadata. Declaring the same kind twice on one target keeps the outermost
declaration. Route decorators stack: each one adds a verb/path pair.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, List, Optional, Tuple, Union

from dynapi.models.contract import (
    BindingSource,
    HttpLogging,
    HttpLoggingFields,
    Information,
    RequestTimeout,
    RequestTimeoutPolicy,
    RouteDeclaration,
)

OPERATION_ATTRIBUTE = "__dynapi_operation__"
CONTRACT_ATTRIBUTE = "__dynapi_contract__"


@dataclass
class ContractDeclaration:
    """Declarations recorded on a contract class"""
    information: Optional[Information] = None
    logging: Optional[HttpLogging] = None
    timeout: Optional[RequestTimeout] = None
    tags: Tuple[str, ...] = ()
    items: Tuple[Any, ...] = ()
    policies: Tuple[str, ...] = ()


@dataclass
class OperationDeclaration(ContractDeclaration):
    """Declarations recorded on an operation function"""
    routes: List[RouteDeclaration] = field(default_factory=list)
    ignored: bool = False


@dataclass(frozen=True)
class BindingMarker:
    """Explicit binding of a parameter, used inside ``typing.Annotated``"""
    source: BindingSource
    name: Optional[str] = None


def FromPath(name: Optional[str] = None) -> BindingMarker:
    """Bind the parameter to the path placeholder ``name`` (defaults to the parameter name)"""
    return BindingMarker(BindingSource.PATH, name)


def FromQuery(name: Optional[str] = None) -> BindingMarker:
    """Bind the parameter to the query key ``name`` (defaults to the parameter name)"""
    return BindingMarker(BindingSource.QUERY, name)


def FromBody() -> BindingMarker:
    """Bind the parameter to the request body"""
    return BindingMarker(BindingSource.BODY)


def declaration_of(target: Any) -> ContractDeclaration:
    """Return the declaration record of ``target``, creating it if needed.

    Class records are looked up in the class' own namespace so that a
    contract never inherits the group declarations of its bases.
    """
    if isinstance(target, type):
        record = vars(target).get(CONTRACT_ATTRIBUTE)
        if record is None:
            record = ContractDeclaration()
            setattr(target, CONTRACT_ATTRIBUTE, record)
        return record

    if not callable(target):
        raise TypeError(f"Contract declarations apply to classes and functions, not {type(target).__name__}")

    record = getattr(target, OPERATION_ATTRIBUTE, None)
    if record is None:
        record = OperationDeclaration()
        setattr(target, OPERATION_ATTRIBUTE, record)
    return record


def _operation_of(target: Any) -> OperationDeclaration:
    if isinstance(target, type):
        raise TypeError(f"'{target.__name__}': route declarations apply to operations, not to contracts")
    return declaration_of(target)


# =============================================================================
# ROUTES
# =============================================================================

def route(verb: str, path: str):
    """Expose the operation under ``verb`` and ``path``.

    The verb is not validated here; unsupported verbs fail when the
    contract is registered.
    """
    def decorator(func):
        # decorators apply bottom-up, prepend to keep source order
        _operation_of(func).routes.insert(0, RouteDeclaration(verb=verb.upper(), path=path))
        return func
    return decorator


def get(path: str):
    return route("GET", path)


def post(path: str):
    return route("POST", path)


def put(path: str):
    return route("PUT", path)


def delete(path: str):
    return route("DELETE", path)


def patch(path: str):
    return route("PATCH", path)


def ignore(func):
    """Skip the operation when creating routes for the contract"""
    _operation_of(func).ignored = True
    return func


# =============================================================================
# AUTHORIZATION AND METADATA
# =============================================================================

def require_authorization(*policies: str):
    """Require every listed policy to authorize a call.

    On a contract the policies apply to all operations; operation policies
    are added to them.
    """
    def decorator(target):
        declaration_of(target).policies = tuple(policies)
        return target
    return decorator


def information(
    group_name: Optional[str] = None,
    description: Optional[str] = None,
    summary: Optional[str] = None,
    order: Optional[int] = None,
):
    """Set documentation metadata; operation values override contract values"""
    def decorator(target):
        declaration_of(target).information = Information(
            group_name=group_name,
            description=description,
            summary=summary,
            order=order,
        )
        return target
    return decorator


def http_logging(
    fields: HttpLoggingFields,
    request_body_limit: Optional[int] = None,
    response_body_limit: Optional[int] = None,
):
    """Enable HTTP logging of the listed fields.

    A limit of -1 or None uses the default configured for HTTP logging.
    """
    def decorator(target):
        declaration_of(target).logging = HttpLogging(
            fields=fields,
            request_body_limit=request_body_limit,
            response_body_limit=response_body_limit,
        )
        return target
    return decorator


def request_timeout(value: Union[bool, str, timedelta, RequestTimeoutPolicy, RequestTimeout]):
    """Configure the request timeout.

    Args:
        value: ``True`` disables the timeout, a string names a configured
            timeout policy, a ``timedelta`` times out after that duration,
            a ``RequestTimeoutPolicy`` is used inline.
    """
    if isinstance(value, RequestTimeout):
        timeout = value
    elif isinstance(value, bool):
        if not value:
            raise ValueError("request_timeout(False) declares nothing; use request_timeout(True) to disable")
        timeout = RequestTimeout.disabled()
    elif isinstance(value, RequestTimeoutPolicy):
        timeout = RequestTimeout.for_policy(value)
    elif isinstance(value, str):
        timeout = RequestTimeout.named(value)
    elif isinstance(value, timedelta):
        timeout = RequestTimeout.after(value)
    else:
        raise TypeError(f"Unsupported request timeout value: {value!r}")

    def decorator(target):
        declaration_of(target).timeout = timeout
        return target
    return decorator


def tags(*values: str):
    """Set tags; contract tags and operation tags are combined"""
    def decorator(target):
        declaration_of(target).tags = tuple(values)
        return target
    return decorator


def metadata(*items: Any):
    """Attach opaque metadata items; contract and operation items are combined"""
    def decorator(target):
        declaration_of(target).items = tuple(items)
        return target
    return decorator
