"""Routing module - Pattern compilation, routes and route selection."""

from roadrouter_core.routing.compiler import PatternCompiler, Segment, compile_pattern
from roadrouter_core.routing.resolver import ControllerRegistry, ControllerResolver, ImportResolver
from roadrouter_core.routing.route import CallableTarget, ControllerTarget, Route, RouteMatch
from roadrouter_core.routing.router import Router

__all__ = [
    "PatternCompiler",
    "Segment",
    "compile_pattern",
    "ControllerRegistry",
    "ControllerResolver",
    "ImportResolver",
    "CallableTarget",
    "ControllerTarget",
    "Route",
    "RouteMatch",
    "Router",
]
