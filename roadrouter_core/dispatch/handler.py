"""Request Handler - Match, execute and respond.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

State Machine:
┌──────────────────────────────────────────────────────────────┐
│                      Request Handler                          │
│                                                               │
│  ┌──────────┐   match    ┌───────────┐   response            │
│  │ MATCHING │ ─────────▶ │ EXECUTING │ ──────────┐           │
│  └────┬─────┘            └─────┬─────┘           ▼           │
│       │ no match / error       │ error     ┌───────────┐     │
│       └────────────────────────┴─────────▶ │ RESPONDED │     │
│                                            └───────────┘     │
└──────────────────────────────────────────────────────────────┘

Each stage produces an Outcome (response or error). Outcomes are turned
into responses in one place, ``respond``, so ``handle`` never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from roadrouter_core.dispatch.chain import DispatchChain, normalize_response
from roadrouter_core.errors import (
    RouteNotFoundError,
    RouterError,
    TargetResolutionError,
    error_code,
    error_message,
)
from roadrouter_core.http.request import Request
from roadrouter_core.http.response import Response, is_valid_status
from roadrouter_core.routing.route import Route, RouteMatch
from roadrouter_core.routing.router import Router
from roadrouter_core.utils.config import RouterConfig

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    """Dispatch stages."""

    MATCHING = "matching"
    EXECUTING = "executing"
    RESPONDED = "responded"


@dataclass
class Outcome:
    """Result of a dispatch stage: a response or the error that stopped it."""

    state: DispatchState
    response: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, state: DispatchState, response: Any) -> "Outcome":
        return cls(state=state, response=response)

    @classmethod
    def failure(cls, state: DispatchState, error: Exception) -> "Outcome":
        return cls(state=state, error=error)


def error_response(error: Exception, expose_errors: bool = True) -> Response:
    """Convert an error into a structured error response.

    The error's ``code`` becomes the status when it is a recognized
    status code; anything else is a 500. The body's ``code`` is always
    the status actually sent, so an error carrying 999 yields
    ``{"status": "ERROR", "code": 500, ...}``.
    """
    if isinstance(error, RouteNotFoundError):
        return Response.error(404, RouteNotFoundError.default_message)

    code = error_code(error)
    status = code if is_valid_status(code) else 500
    message = error_message(error)

    if status == 500 and not expose_errors and not isinstance(error, RouterError):
        message = "Internal Server Error"

    return Response.error(status, message)


class RequestHandler:
    """Dispatches requests through a router.

    Usage:
        handler = RequestHandler(router)
        response = handler.handle(Request("GET", "/users/42"))

    The first call to ``handle`` freezes the router. Handlers hold no
    per-request state, so one handler can serve concurrent requests.
    """

    def __init__(self, router: Router, config: Optional[RouterConfig] = None):
        self.router = router
        self.config = config or router.config

    def handle(self, request: Request) -> Response:
        """Dispatch a request and always return a response."""
        self.router.freeze()
        return self.respond(self.dispatch(request), request)

    def dispatch(self, request: Request) -> Outcome:
        """Run matching and execution, capturing any failure."""
        logger.debug(f"{request.method} {request.path}: {DispatchState.MATCHING.value}")
        try:
            match = self.router.match(request)
        except Exception as e:
            return Outcome.failure(DispatchState.MATCHING, e)

        if match is None:
            return Outcome.failure(DispatchState.MATCHING, RouteNotFoundError())

        logger.debug(
            f"{request.method} {request.path}: {DispatchState.EXECUTING.value} {match.route!r}"
        )
        try:
            chain = self.build_chain(match, request)
            return Outcome.success(DispatchState.EXECUTING, chain.run())
        except Exception as e:
            return Outcome.failure(DispatchState.EXECUTING, e)

    def build_chain(self, match: RouteMatch, request: Request) -> DispatchChain:
        """Instantiate middleware and resolve the target for a match."""
        route = match.route
        return DispatchChain(
            request=request.with_params(match.params),
            middleware=self.instantiate_middleware(route),
            target=self.resolve_target(route),
            params=match.params,
            content_type=self.config.default_content_type,
        )

    def instantiate_middleware(self, route: Route) -> List[Callable[..., Any]]:
        """Build one middleware instance per alias, outermost first."""
        layers = []
        for alias in route.middleware_aliases:
            middleware_type = self.router.get_middleware(alias)
            layers.append(middleware_type().handle)
        return layers

    def resolve_target(self, route: Route) -> Callable[..., Any]:
        """Resolve the route target to an invocable."""
        try:
            return route.get_target(self.router.resolver)
        except TargetResolutionError:
            raise
        except Exception as e:
            raise TargetResolutionError(str(e)) from e

    def respond(self, outcome: Outcome, request: Optional[Request] = None) -> Response:
        """Turn an outcome into the final response."""
        where = f"{request.method} {request.path}" if request is not None else "request"

        if outcome.ok:
            response = normalize_response(outcome.response, self.config.default_content_type)
        else:
            response = error_response(outcome.error, self.config.expose_errors)
            self._log_failure(where, outcome, response)

        outcome.state = DispatchState.RESPONDED
        logger.debug(f"{where}: {DispatchState.RESPONDED.value} {response.status}")
        return response

    def _log_failure(self, where: str, outcome: Outcome, response: Response) -> None:
        error = outcome.error
        if isinstance(error, RouteNotFoundError):
            logger.info(f"{where}: route not found")
        elif response.status == 500 and not isinstance(error, RouterError):
            logger.error(
                f"{where}: unhandled error while {outcome.state.value}",
                exc_info=error,
            )
        else:
            logger.warning(
                f"{where}: {type(error).__name__} while {outcome.state.value} "
                f"-> {response.status}: {error_message(error)}"
            )


__all__ = [
    "DispatchState",
    "Outcome",
    "RequestHandler",
    "error_response",
]
