"""
dynapi Logging Configuration

Provides logging configuration using structlog with JSON formatting,
request context injection and OpenTelemetry trace context.
"""

import logging
from typing import Dict, Any, Optional
import structlog
from opentelemetry import trace


class DynamicAPILogger:
    """
    Logger configuration for structured logging.

    Configures structlog with processors for request context injection,
    trace context and JSON (or console) rendering, so every component
    writes entries with the same structure.
    """

    def __init__(self, level: str = "INFO", structured: bool = True, include_trace_id: bool = True):
        """Initialize the logger configuration."""
        self.level = level
        self.structured = structured
        self.include_trace_id = include_trace_id
        self.configure_structlog()

    def configure_structlog(self) -> None:
        """
        Configure structlog with the processor chain.

        Sets up a processor chain that handles:
        - Log level filtering
        - Logger name and level addition
        - Timestamp formatting
        - Exception information
        - Request context injection
        - OpenTelemetry trace context
        - JSON or console output
        """
        logging.basicConfig(
            format="%(message)s",
            level=getattr(logging, str(self.level).upper(), logging.INFO),
        )

        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            self.add_request_context,
        ]
        if self.include_trace_id:
            processors.append(self.add_trace_context)

        if self.structured:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def add_request_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add request context without overwriting explicit fields.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with request context
        """
        from dynapi.infrastructure.logging.context import request_context

        ctx = request_context.get()
        if ctx:
            event_dict.setdefault('correlation_id', ctx.correlation_id)
            if ctx.contract:
                event_dict.setdefault('contract', ctx.contract)
            if ctx.operation:
                event_dict.setdefault('operation', ctx.operation)
            if ctx.verb:
                event_dict.setdefault('verb', ctx.verb)
            if ctx.path:
                event_dict.setdefault('route', ctx.path)

        return event_dict

    @staticmethod
    def add_trace_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add OpenTelemetry trace context to log entries.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with trace context
        """
        span = trace.get_current_span()
        if span and span.is_recording():
            span_context = span.get_span_context()
            if 'trace_id' not in event_dict:
                event_dict['trace_id'] = format(span_context.trace_id, '032x')
            if 'span_id' not in event_dict:
                event_dict['span_id'] = format(span_context.span_id, '016x')

        return event_dict


# Singleton configuration instance
_logger_config: Optional[DynamicAPILogger] = None


def configure_logging(settings=None) -> DynamicAPILogger:
    """
    Configure logging from settings, replacing any earlier configuration.

    Args:
        settings: ``DynamicAPISettings``; the global settings when omitted

    Returns:
        The active logger configuration
    """
    global _logger_config
    if settings is None:
        from dynapi.config.settings import get_settings
        settings = get_settings()

    level = settings.logging.level
    _logger_config = DynamicAPILogger(
        level=getattr(level, "value", level),
        structured=settings.logging.structured_logging,
        include_trace_id=settings.logging.include_trace_id,
    )
    return _logger_config


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Uses the singleton configuration so structlog is configured only once.

    Args:
        name: Logger name, typically module name

    Returns:
        Configured structlog BoundLogger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Route bound", verb="GET", path="/people")
    """
    global _logger_config
    if _logger_config is None:
        _logger_config = DynamicAPILogger()

    return structlog.get_logger(name)
