"""
Request-scoped logging context.

A ``RequestContext`` is activated around every dispatched route so that
log entries written by the endpoint, the translator and the contract
implementation carry the same correlation id and route identity.
"""

from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import uuid


@dataclass
class RequestContext:
    """
    Request-scoped data injected into log entries.

    Attributes:
        correlation_id: Unique identifier for request tracing
        contract: Contract type dispatching the request
        operation: Operation name within the contract
        verb: HTTP verb of the matched route
        path: Path template of the matched route
        start_time: Request start timestamp
        attributes: Additional request-scoped metadata
    """
    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    contract: Optional[str] = None
    operation: Optional[str] = None
    verb: Optional[str] = None
    path: Optional[str] = None
    start_time: datetime = field(default_factory=datetime.utcnow)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __enter__(self):
        """Enter the context manager - set this context as active."""
        self._token = request_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the context manager - restore the previous context."""
        request_context.reset(self._token)
        return False


request_context: ContextVar[Optional[RequestContext]] = ContextVar('request_context', default=None)
