"""Router - Route registry and selection.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from roadrouter_core.errors import (
    DuplicateAliasError,
    InvalidMiddlewareTypeError,
    NoRouteToAttachError,
    RegistrationClosedError,
    UnknownAliasError,
)
from roadrouter_core.http.request import Request
from roadrouter_core.middleware.base import is_middleware_type
from roadrouter_core.routing.resolver import ControllerResolver
from roadrouter_core.routing.route import Route, RouteMatch, Target
from roadrouter_core.utils.config import RouterConfig

logger = logging.getLogger(__name__)

RouteTarget = Union[Callable, str, Target]


class Router:
    """Request Router.

    Features:
    - Pattern-based routing (/users/{id}<\\d+>)
    - Method filtering
    - Middleware aliases per route
    - Lazy "Class@method" controller targets

    Routes are tried in registration order and the first match wins. An
    earlier route with an overlapping pattern shadows every later one;
    there is no priority mechanism, so register specific patterns
    before general ones.

    Usage:
        router = Router(resolver=ControllerRegistry([UserController]))
        router.register_middleware("auth", AuthMiddleware)

        router.get("/users/{id}<\\d+>", "UserController@show")
        router.attach_middleware("auth")

        route = router.match_route(Request("GET", "/users/42"))
    """

    def __init__(
        self,
        config: Optional[RouterConfig] = None,
        resolver: Optional[ControllerResolver] = None,
    ):
        self.config = config or RouterConfig()
        self.resolver = resolver
        self._routes: List[Route] = []
        self._middleware: Dict[str, type] = {}
        self._frozen = False

    # =========================================================================
    # Route registration
    # =========================================================================

    def register(
        self,
        pattern: str,
        methods: Union[str, Iterable[str]],
        target: RouteTarget,
    ) -> Route:
        """Register a route.

        Args:
            pattern: Route pattern
            methods: HTTP method or methods
            target: Callable or "Class@method" reference

        Returns:
            The new route, for attaching middleware
        """
        self._ensure_open()

        route = Route(
            pattern=pattern,
            methods=methods,
            target=target,
            allowed_methods=self.config.allowed_methods,
            alias_validator=self.get_middleware,
        )
        self._routes.append(route)

        logger.debug(f"Registered {route!r}")
        return route

    def get(self, pattern: str, target: RouteTarget) -> Route:
        """Add GET route."""
        return self.register(pattern, ["GET"], target)

    def post(self, pattern: str, target: RouteTarget) -> Route:
        """Add POST route."""
        return self.register(pattern, ["POST"], target)

    def put(self, pattern: str, target: RouteTarget) -> Route:
        """Add PUT route."""
        return self.register(pattern, ["PUT"], target)

    def patch(self, pattern: str, target: RouteTarget) -> Route:
        """Add PATCH route."""
        return self.register(pattern, ["PATCH"], target)

    def delete(self, pattern: str, target: RouteTarget) -> Route:
        """Add DELETE route."""
        return self.register(pattern, ["DELETE"], target)

    def any(self, pattern: str, target: RouteTarget) -> Route:
        """Add route for every allowed method."""
        return self.register(pattern, list(self.config.allowed_methods), target)

    # =========================================================================
    # Middleware registry
    # =========================================================================

    def register_middleware(
        self,
        alias: Union[str, Mapping[str, type]],
        middleware: Optional[type] = None,
    ) -> "Router":
        """Bind one alias, or a mapping of aliases, to middleware types."""
        self._ensure_open()

        if isinstance(alias, Mapping):
            if middleware is not None:
                raise TypeError("Pass either a mapping or an alias and a type")
            bindings = list(alias.items())
        else:
            bindings = [(alias, middleware)]

        # Validate everything first so a bad mapping binds nothing
        seen = set()
        for name, mw_type in bindings:
            if name in self._middleware or name in seen:
                raise DuplicateAliasError(f'Middleware alias "{name}" is already registered')
            if not is_middleware_type(mw_type):
                raise InvalidMiddlewareTypeError(
                    f'"{name}" must be bound to a class with handle(request, next)'
                )
            seen.add(name)

        for name, mw_type in bindings:
            self._middleware[name] = mw_type
            logger.debug(f"Registered middleware {name} -> {mw_type.__name__}")

        return self

    def get_middleware(self, alias: str) -> type:
        """Convert an alias into its registered middleware type."""
        try:
            return self._middleware[alias]
        except KeyError:
            raise UnknownAliasError(f'Middleware alias "{alias}" is not registered') from None

    def has_middleware(self, alias: str) -> bool:
        return alias in self._middleware

    def attach_middleware(self, alias: str) -> "Router":
        """Append middleware to the most recently registered route."""
        if not self._routes:
            raise NoRouteToAttachError(f'No route to attach middleware "{alias}" to')
        self._routes[-1].add_middleware(alias)
        return self

    def middleware_aliases(self) -> List[str]:
        """Get registered middleware aliases."""
        return list(self._middleware)

    # =========================================================================
    # Matching
    # =========================================================================

    def match(self, request: Request) -> Optional[RouteMatch]:
        """Match a request, keeping the captured variables.

        Returns:
            RouteMatch of the first matching route, None otherwise
        """
        for route in self._routes:
            result = route.check_for_match(request)
            if result is not None:
                return result
        return None

    def match_route(self, request: Request) -> Optional[Route]:
        """Get the first route matching the request."""
        result = self.match(request)
        return result.route if result is not None else None

    # =========================================================================
    # Lifecycle and introspection
    # =========================================================================

    def freeze(self) -> None:
        """End the setup phase; the route table becomes read-only."""
        if self._frozen:
            return
        for route in self._routes:
            route.lock()
        self._frozen = True
        logger.debug(f"Router frozen with {len(self._routes)} route(s)")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_open(self) -> None:
        if self._frozen:
            raise RegistrationClosedError("Router cannot be changed after dispatch began")

    @property
    def routes(self) -> Tuple[Route, ...]:
        return tuple(self._routes)

    def all_routes(self) -> List[Route]:
        """Get all routes in registration order."""
        return self._routes.copy()

    def describe(self) -> List[Dict[str, Any]]:
        """Route table summary."""
        return [route.describe() for route in self._routes]

    def __len__(self) -> int:
        return len(self._routes)


__all__ = [
    "Router",
]
