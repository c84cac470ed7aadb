"""RoadRouter - In-process HTTP request router.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

RoadRouter matches requests to registered routes and runs them through
a per-route middleware chain:
- Pattern compilation with typed captures (/users/{id}<\\d+>)
- First-match-wins route selection
- Middleware aliases with onion-style execution
- Lazy "Class@method" controller targets
- Uniform error responses; dispatch never raises

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                              RoadRouter                                      │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │                         Request Pipeline                               │  │
│  │  Request ──▶ Router.match ──▶ DispatchChain ──▶ Target ──▶ Response   │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │    Routing      │  │   Middleware    │  │        Dispatch             │ │
│  │                 │  │                 │  │                             │ │
│  │ - Compiler      │  │ - Logging       │  │ - Chain (onion model)       │ │
│  │ - Route         │  │ - CORS          │  │ - Response normalization    │ │
│  │ - Router        │  │ - Headers       │  │ - Error mapping             │ │
│  │ - Resolvers     │  │                 │  │ - WSGI adapter              │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Request Flow:
1. Router scans routes in registration order, first match wins
2. Route aliases are turned into fresh middleware instances
3. Target is resolved (inline callable or controller method)
4. Middleware runs outermost first; any layer may short-circuit
5. Target result is wrapped into a Response if needed
6. Errors anywhere become structured error responses

Usage:
    from roadrouter_core import Router, RequestHandler, Request

    router = Router()
    router.register_middleware("log", LoggingMiddleware)

    router.get("/users/{id}<\\d+>", lambda id: {"id": id})
    router.attach_middleware("log")

    handler = RequestHandler(router)
    response = handler.handle(Request("GET", "/users/42"))
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# HTTP
from roadrouter_core.http.request import Request
from roadrouter_core.http.response import Response

# Routing
from roadrouter_core.routing.compiler import PatternCompiler, Segment, compile_pattern
from roadrouter_core.routing.resolver import ControllerRegistry, ImportResolver
from roadrouter_core.routing.route import Route, RouteMatch
from roadrouter_core.routing.router import Router

# Middleware
from roadrouter_core.middleware.base import Middleware
from roadrouter_core.middleware.cors import CORSMiddleware
from roadrouter_core.middleware.headers import HeadersMiddleware
from roadrouter_core.middleware.logging import LoggingMiddleware

# Dispatch
from roadrouter_core.dispatch.chain import DispatchChain
from roadrouter_core.dispatch.handler import DispatchState, RequestHandler
from roadrouter_core.wsgi import WSGIApplication

# Errors
from roadrouter_core.errors import (
    CompileError,
    DuplicateAliasError,
    HTTPError,
    InvalidMethodError,
    InvalidMiddlewareTypeError,
    NoRouteToAttachError,
    RouteNotFoundError,
    RouterError,
    TargetResolutionError,
    UnknownAliasError,
)

# Utils
from roadrouter_core.utils.config import RouterConfig, load_config
from roadrouter_core.utils.logging import configure_logging

__all__ = [
    # Version
    "__version__",
    # HTTP
    "Request",
    "Response",
    # Routing
    "PatternCompiler",
    "Segment",
    "compile_pattern",
    "ControllerRegistry",
    "ImportResolver",
    "Route",
    "RouteMatch",
    "Router",
    # Middleware
    "Middleware",
    "CORSMiddleware",
    "HeadersMiddleware",
    "LoggingMiddleware",
    # Dispatch
    "DispatchChain",
    "DispatchState",
    "RequestHandler",
    "WSGIApplication",
    # Errors
    "CompileError",
    "DuplicateAliasError",
    "HTTPError",
    "InvalidMethodError",
    "InvalidMiddlewareTypeError",
    "NoRouteToAttachError",
    "RouteNotFoundError",
    "RouterError",
    "TargetResolutionError",
    "UnknownAliasError",
    # Utils
    "RouterConfig",
    "load_config",
    "configure_logging",
]
