"""Middleware Base - Base classes for middleware.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from roadrouter_core.http.request import Request

logger = logging.getLogger(__name__)

Continuation = Callable[..., Any]


class Middleware(ABC):
    """Abstract middleware base class.

    A middleware wraps every deeper layer of the chain. It receives the
    request and a continuation; calling the continuation runs the deeper
    layers and returns their response.

    Pipeline:
    ┌────────────────────────────────────────────────────────────┐
    │                  Middleware Pipeline                        │
    │                                                             │
    │  Request ──▶ MW1 ──▶ MW2 ──▶ ... ──▶ Target                │
    │                                          │                  │
    │  Response ◀── MW1 ◀── MW2 ◀── ... ◀──────┘                 │
    └────────────────────────────────────────────────────────────┘

    Not calling the continuation short-circuits the chain: deeper
    layers never run and the middleware's own response is returned.

    Middleware is registered by type and built with no arguments for
    every request it takes part in.
    """

    @abstractmethod
    def handle(self, request: Request, next: Continuation) -> Any:
        """Process request.

        Args:
            request: Request object
            next: Continuation running the deeper layers

        Returns:
            Response object
        """
        pass


class PassthroughMiddleware(Middleware):
    """Middleware that does nothing (for testing)."""

    def handle(self, request: Request, next: Continuation) -> Any:
        return next(request)


def is_middleware_type(candidate: Any) -> bool:
    """Check that ``candidate`` is a class exposing ``handle(request, next)``."""
    if not isinstance(candidate, type) or inspect.isabstract(candidate):
        return False

    handle = getattr(candidate, "handle", None)
    if not callable(handle):
        return False

    try:
        signature = inspect.signature(handle)
    except (TypeError, ValueError):
        return False

    # Unbound function: self, request, next
    params = list(signature.parameters.values())
    if params and params[0].name == "self":
        params = params[1:]

    positional = [
        p for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind == p.VAR_POSITIONAL for p in params):
        return True
    required = [p for p in positional if p.default is p.empty]
    return len(positional) >= 2 and len(required) <= 2


__all__ = [
    "Continuation",
    "Middleware",
    "PassthroughMiddleware",
    "is_middleware_type",
]
