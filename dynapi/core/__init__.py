"""
Core registration engine: extraction, metadata and policy merging, route binding.

Data flow:
    extract_contract -> (merge_metadata, resolve_policies) -> bind_routes -> RoutingTable
"""

from .extractor import extract_contract, path_placeholders, resolve_bindings
from .policies import resolve_policies
from .metadata import merge_metadata
from .binder import BoundHandler, bind_routes, create_handler, parse_verb, SUPPORTED_VERBS

__all__ = [
    "extract_contract",
    "path_placeholders",
    "resolve_bindings",
    "resolve_policies",
    "merge_metadata",
    "BoundHandler",
    "bind_routes",
    "create_handler",
    "parse_verb",
    "SUPPORTED_VERBS",
]
