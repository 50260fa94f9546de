"""
dynapi Logging Infrastructure

- context: request-scoped context carried in a ContextVar
- config: structlog configuration with JSON formatting and processors
"""

from .context import RequestContext, request_context
from .config import get_logger, configure_logging, DynamicAPILogger

__all__ = [
    'RequestContext',
    'request_context',
    'get_logger',
    'configure_logging',
    'DynamicAPILogger',
]
