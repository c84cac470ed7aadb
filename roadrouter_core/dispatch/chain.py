"""Dispatch Chain - Onion-style middleware execution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

One chain is built per request and thrown away afterwards; its stack
and current request are never shared between dispatches.

    stack: [ MW1.handle, MW2.handle, target ]
              │            │          │
    run() ──▶ MW1(req, next) ──▶ MW2(req, next) ──▶ target()
                                                    │
    response ◀── MW1 ◀───────── MW2 ◀──────────────┘
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, Mapping, Optional, Set

from roadrouter_core.errors import ChainExhaustedError
from roadrouter_core.http.request import Request
from roadrouter_core.http.response import DEFAULT_CONTENT_TYPE, Response, is_response

logger = logging.getLogger(__name__)


def normalize_response(value: Any, content_type: str = DEFAULT_CONTENT_TYPE) -> Any:
    """Wrap anything that is not already a response in a 200 response."""
    if is_response(value):
        return value
    return Response(content_type=content_type).set_body(value)


def accepts_request(func: Callable) -> bool:
    """Check if a target declares a ``request`` parameter."""
    declared = declared_parameters(func)
    return declared is not None and "request" in declared


def declared_parameters(func: Callable) -> Optional[Set[str]]:
    """Keyword-bindable parameter names of ``func``.

    Returns None when ``func`` takes ``**kwargs``, an empty set when its
    signature cannot be read.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return set()

    names = set()
    for param in signature.parameters.values():
        if param.kind == param.VAR_KEYWORD:
            return None
        if param.kind in (param.POSITIONAL_OR_KEYWORD, param.KEYWORD_ONLY):
            names.add(param.name)
    return names


def bind_arguments(
    func: Callable,
    params: Mapping[str, str],
    request: Request,
) -> Dict[str, Any]:
    """Keyword arguments for a target: only the names it declares.

    A target declaring nothing is called with no arguments; captured
    variables stay reachable through ``request.params``.
    """
    declared = declared_parameters(func)
    if declared is None:
        return dict(params)

    kwargs = {name: value for name, value in params.items() if name in declared}
    if "request" in declared and "request" not in kwargs:
        kwargs["request"] = request
    return kwargs


class DispatchChain:
    """Per-request execution stack.

    Layers run outermost first. Each middleware gets the request and
    ``call_next``; calling it pops and runs the next layer, so a layer
    that never calls it short-circuits everything deeper.
    """

    def __init__(
        self,
        request: Request,
        middleware: Iterable[Callable[..., Any]],
        target: Callable[..., Any],
        params: Optional[Dict[str, str]] = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ):
        self.request = request
        self.target = target
        self.params = dict(params or {})
        self.content_type = content_type
        self.stack: Deque[Callable[..., Any]] = deque(middleware)
        self.stack.append(self._invoke_target)

    def run(self) -> Any:
        """Run the whole chain and return the outermost response."""
        return self.call_next(self.request)

    def call_next(self, request: Optional[Request] = None) -> Any:
        """Continuation handed to each middleware.

        Args:
            request: Replacement request for the deeper layers

        Returns:
            Response of the deeper layers
        """
        if request is not None:
            self.request = request

        if not self.stack:
            raise ChainExhaustedError()

        layer = self.stack.popleft()
        if self.stack:
            return layer(self.request, self.call_next)
        return normalize_response(layer(), self.content_type)

    def _invoke_target(self) -> Any:
        """Terminal layer; takes no arguments.

        Targets declaring no parameters are called bare. Otherwise only
        the captured variables (and ``request``) they name are bound.
        """
        return self.target(**bind_arguments(self.target, self.params, self.request))

    @property
    def remaining(self) -> int:
        """Layers not yet run."""
        return len(self.stack)


__all__ = [
    "DispatchChain",
    "accepts_request",
    "bind_arguments",
    "declared_parameters",
    "normalize_response",
]
