"""FastAPI integration: controller registration, endpoints, problem responses"""

from .controller import add_dynamic_controller, resolve_service, routing_tables
from .problem import problem_response, translate_exception, use_exception_handler
from .authorization import require_policies

__all__ = [
    "add_dynamic_controller",
    "resolve_service",
    "routing_tables",
    "problem_response",
    "translate_exception",
    "use_exception_handler",
    "require_policies",
]
