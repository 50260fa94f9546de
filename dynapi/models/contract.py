"""
Contract descriptor models.

Plain immutable records describing a service contract as declared by its
author: the group-level metadata of the contract, and for every operation
its routes, parameter bindings, metadata and policies. These records are
produced by the extractor and consumed by the route binder.
"""

import enum
import inspect
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional, Tuple


class HttpVerb(str, enum.Enum):
    """HTTP verbs that can be bound to an operation"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class BindingSource(str, enum.Enum):
    """Where the value of an operation parameter comes from"""
    PATH = "path"
    QUERY = "query"
    BODY = "body"


class HttpLoggingFields(enum.Flag):
    """Parts of a request/response exchange written by HTTP logging"""
    NONE = 0
    REQUEST_PATH = 0x1
    REQUEST_QUERY = 0x2
    REQUEST_METHOD = 0x4
    REQUEST_PROTOCOL = 0x8
    REQUEST_SCHEME = 0x10
    REQUEST_HEADERS = 0x40
    REQUEST_BODY = 0x800
    RESPONSE_STATUS_CODE = 0x20
    RESPONSE_HEADERS = 0x80
    RESPONSE_BODY = 0x1000
    DURATION = 0x4000

    REQUEST_PROPERTIES = REQUEST_PATH | REQUEST_QUERY | REQUEST_METHOD | REQUEST_PROTOCOL | REQUEST_SCHEME
    REQUEST_PROPERTIES_AND_HEADERS = REQUEST_PROPERTIES | REQUEST_HEADERS
    RESPONSE_PROPERTIES_AND_HEADERS = RESPONSE_STATUS_CODE | RESPONSE_HEADERS
    REQUEST = REQUEST_PROPERTIES_AND_HEADERS | REQUEST_BODY
    RESPONSE = RESPONSE_PROPERTIES_AND_HEADERS | RESPONSE_BODY
    ALL = REQUEST | RESPONSE | DURATION


class TimeoutKind(str, enum.Enum):
    """The mutually exclusive request timeout variants"""
    DISABLED = "disabled"
    POLICY = "policy"
    POLICY_NAME = "policy_name"
    DURATION = "duration"


@dataclass(frozen=True)
class RouteDeclaration:
    """One verb/path pair under which an operation is exposed"""
    verb: str
    path: str


@dataclass(frozen=True)
class ParameterBinding:
    """Binds one operation parameter to a part of the incoming request.

    Attributes:
        parameter: Python parameter name on the operation
        source: Request part supplying the value
        name: Wire name (path placeholder, query key); the parameter name unless aliased
        annotation: Parameter type, ``inspect.Parameter.empty`` when undeclared
        default: Default value, ``inspect.Parameter.empty`` when required
    """
    parameter: str
    source: BindingSource
    name: str
    annotation: Any = inspect.Parameter.empty
    default: Any = inspect.Parameter.empty

    @property
    def required(self) -> bool:
        return self.default is inspect.Parameter.empty


@dataclass(frozen=True)
class Information:
    """Documentation metadata of a contract or an operation.

    ``order`` is ``None`` when not declared; see ``merge_metadata`` for how
    declared values take effect at group and operation level.
    """
    group_name: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    order: Optional[int] = None


@dataclass(frozen=True)
class HttpLogging:
    """HTTP logging record.

    A body limit of ``None`` or -1 falls back to the configured default.
    """
    fields: HttpLoggingFields = HttpLoggingFields.NONE
    request_body_limit: Optional[int] = None
    response_body_limit: Optional[int] = None


@dataclass(frozen=True)
class RequestTimeoutPolicy:
    """Inline timeout policy; ``status_code`` overrides the configured timeout status"""
    timeout: Optional[timedelta] = None
    status_code: Optional[int] = None


@dataclass(frozen=True)
class RequestTimeout:
    """Request timeout record holding exactly one of the four variants"""
    kind: TimeoutKind
    policy: Optional[RequestTimeoutPolicy] = None
    policy_name: Optional[str] = None
    duration: Optional[timedelta] = None

    def __post_init__(self):
        expected = {
            TimeoutKind.DISABLED: (),
            TimeoutKind.POLICY: ("policy",),
            TimeoutKind.POLICY_NAME: ("policy_name",),
            TimeoutKind.DURATION: ("duration",),
        }[self.kind]
        for attr in ("policy", "policy_name", "duration"):
            is_set = getattr(self, attr) not in (None, "")
            if is_set != (attr in expected):
                raise ValueError(f"{self.kind.value} request timeout cannot be combined with '{attr}'"
                                 if is_set else f"{self.kind.value} request timeout requires '{attr}'")

    @classmethod
    def disabled(cls) -> "RequestTimeout":
        return cls(TimeoutKind.DISABLED)

    @classmethod
    def for_policy(cls, policy: RequestTimeoutPolicy) -> "RequestTimeout":
        return cls(TimeoutKind.POLICY, policy=policy)

    @classmethod
    def named(cls, policy_name: str) -> "RequestTimeout":
        return cls(TimeoutKind.POLICY_NAME, policy_name=policy_name)

    @classmethod
    def after(cls, duration: timedelta) -> "RequestTimeout":
        return cls(TimeoutKind.DURATION, duration=duration)


@dataclass(frozen=True)
class EndpointMetadata:
    """Metadata declared at one level (contract group or single operation)"""
    information: Optional[Information] = None
    logging: Optional[HttpLogging] = None
    timeout: Optional[RequestTimeout] = None
    tags: Tuple[str, ...] = ()
    items: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class OperationDescriptor:
    """One operation of a contract as extracted from its declarations"""
    name: str
    routes: Tuple[RouteDeclaration, ...] = ()
    bindings: Tuple[ParameterBinding, ...] = ()
    metadata: EndpointMetadata = EndpointMetadata()
    policies: Tuple[str, ...] = ()
    excluded: bool = False


@dataclass(frozen=True)
class ContractDescriptor:
    """A contract type with its group-level declarations and operations"""
    contract_type: type
    metadata: EndpointMetadata = EndpointMetadata()
    policies: Tuple[str, ...] = ()
    operations: Tuple[OperationDescriptor, ...] = ()

    @property
    def name(self) -> str:
        return qualified_name(self.contract_type)

    @property
    def routed_operations(self) -> Tuple[OperationDescriptor, ...]:
        return tuple(op for op in self.operations if not op.excluded)


def qualified_name(contract_type: type) -> str:
    """Module-qualified type name used in diagnostics"""
    module = getattr(contract_type, "__module__", None)
    name = getattr(contract_type, "__qualname__", None) or getattr(contract_type, "__name__", repr(contract_type))
    if module and module != "builtins":
        return f"{module}.{name}"
    return name
