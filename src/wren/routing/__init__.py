"""Routing: pattern compilation, the append-only route table, chain
composition, and the registration API.

Routes are compiled when they are registered and looked up by a linear,
first-match scan in registration order.
"""

from wren.routing.builder import (
    Condition,
    Group,
    RouteBuilder,
    methods,
    parse_declaration,
    path_prefix,
    with_middleware,
)
from wren.routing.chain import build_chain
from wren.routing.pattern import PathMatcher, compile_pattern
from wren.routing.route import Route, RouteDeclaration, RouteMatch
from wren.routing.table import RouteTable

__all__ = [
    "Condition",
    "Group",
    "PathMatcher",
    "Route",
    "RouteBuilder",
    "RouteDeclaration",
    "RouteMatch",
    "RouteTable",
    "build_chain",
    "compile_pattern",
    "methods",
    "parse_declaration",
    "path_prefix",
    "with_middleware",
]
