"""Route - A single registered endpoint.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from roadrouter_core.errors import (
    InvalidMethodError,
    InvalidTargetError,
    RegistrationClosedError,
    TargetResolutionError,
)
from roadrouter_core.http.request import HTTP_METHODS, Request
from roadrouter_core.routing.compiler import Segment, compile_pattern, split_path
from roadrouter_core.routing.resolver import ControllerResolver

logger = logging.getLogger(__name__)


class Target(ABC):
    """Route target that resolves to an invocable at dispatch time."""

    @abstractmethod
    def resolve(self, resolver: Optional[ControllerResolver] = None) -> Callable:
        """Return the callable to invoke."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human readable name for listings and logs."""
        pass


@dataclass(frozen=True)
class CallableTarget(Target):
    """Inline callable target."""

    func: Callable

    def resolve(self, resolver: Optional[ControllerResolver] = None) -> Callable:
        return self.func

    def describe(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)


@dataclass(frozen=True)
class ControllerTarget(Target):
    """Controller method reference ("Class@method"), resolved lazily.

    Resolution happens on every dispatch, so a controller that is
    missing or broken only fails the requests actually routed to it.
    """

    reference: str

    @property
    def class_name(self) -> str:
        return self.reference.partition("@")[0]

    @property
    def method_name(self) -> str:
        return self.reference.partition("@")[2]

    def resolve(self, resolver: Optional[ControllerResolver] = None) -> Callable:
        """Locate class, instantiate it, return bound method."""
        class_name, sep, method_name = self.reference.partition("@")
        if not sep or not class_name or not method_name or "@" in method_name:
            raise TargetResolutionError(
                f'"{self.reference}" is not a valid "Class@method" reference'
            )
        if resolver is None:
            raise TargetResolutionError(
                f'No controller resolver configured for "{self.reference}"'
            )

        controller = resolver.resolve(class_name)
        if not isinstance(controller, type) or inspect.isabstract(controller):
            raise TargetResolutionError(f'Controller "{class_name}" is not instantiable')

        try:
            instance = controller()
        except Exception as e:
            raise TargetResolutionError(
                f'Controller "{class_name}" could not be instantiated: {e}'
            ) from e

        method = getattr(instance, method_name, None)
        if not callable(method):
            raise TargetResolutionError(
                f'Controller "{class_name}" has no method "{method_name}"'
            )
        return method

    def describe(self) -> str:
        return self.reference


def make_target(target: Union[Callable, str, Target]) -> Target:
    """Wrap a raw route target."""
    if isinstance(target, Target):
        return target
    if isinstance(target, str):
        return ControllerTarget(target)
    if callable(target):
        return CallableTarget(target)
    raise InvalidTargetError(
        f"Route target must be callable or a \"Class@method\" string, got {type(target).__name__}"
    )


def normalize_methods(
    methods: Union[str, Iterable[str]],
    allowed: Iterable[str] = HTTP_METHODS,
) -> Tuple[str, ...]:
    """Uppercase and validate HTTP methods."""
    if isinstance(methods, str):
        methods = [methods]

    allowed = {m.upper() for m in allowed}
    normalized: List[str] = []
    for method in methods:
        if not isinstance(method, str) or method.upper() not in allowed:
            raise InvalidMethodError(f"{method} is not a valid HTTP Request Method")
        if method.upper() not in normalized:
            normalized.append(method.upper())

    if not normalized:
        raise InvalidMethodError("A route needs at least one HTTP method")
    return tuple(normalized)


class RouteMatch(Mapping):
    """Captured path variables of a successful match.

    Always truthy, even when the route captures nothing; "no match" is
    represented by ``None``.
    """

    def __init__(self, route: "Route", params: Dict[str, str]):
        self.route = route
        self.params = params

    def __getitem__(self, key: str) -> str:
        return self.params[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<RouteMatch {self.route.pattern!r} {self.params!r}>"


@dataclass(eq=False)
class Route:
    """Route definition.

    Usage:
        route = Route("/users/{id}<\\d+>", ["GET", "PUT"], "UserController@show")
        route.check_for_match(Request("GET", "/users/42"))   # {"id": "42"}
    """

    pattern: str
    methods: Tuple[str, ...]
    target: Target
    middleware_aliases: List[str] = field(default_factory=list)
    allowed_methods: Iterable[str] = field(default=HTTP_METHODS, repr=False)
    alias_validator: Optional[Callable[[str], Any]] = field(default=None, repr=False)

    segments: Tuple[Segment, ...] = field(init=False, repr=False)
    _locked: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        self.methods = normalize_methods(self.methods, self.allowed_methods)
        self.target = make_target(self.target)
        self.segments = compile_pattern(self.pattern)

    def add_middleware(self, *aliases: str) -> "Route":
        """Append middleware aliases (outermost first)."""
        if self._locked:
            raise RegistrationClosedError(
                f"Cannot add middleware to {self.pattern!r} after dispatch began"
            )
        if self.alias_validator is not None:
            for alias in aliases:
                self.alias_validator(alias)
        self.middleware_aliases.extend(aliases)
        return self

    def lock(self) -> None:
        """Forbid further middleware changes."""
        self._locked = True

    @property
    def locked(self) -> bool:
        return self._locked

    def check_for_match(self, request: Request) -> Optional[RouteMatch]:
        """Match a request against this route.

        Returns:
            RouteMatch of captured variables if match, None otherwise
        """
        if request.method.upper() not in self.methods:
            return None

        parts = split_path(request.path)
        if len(parts) != len(self.segments):
            return None

        params: Dict[str, str] = {}
        for segment, part in zip(self.segments, parts):
            if not segment.matches(part):
                return None
            if segment.is_capture:
                params[segment.key] = part

        return RouteMatch(self, params)

    def get_target(self, resolver: Optional[ControllerResolver] = None) -> Callable:
        """Resolve the target to an invocable."""
        return self.target.resolve(resolver)

    @property
    def parameter_names(self) -> List[str]:
        return [s.key for s in self.segments if s.is_capture]

    def describe(self) -> Dict[str, Any]:
        """Summary used by route listings."""
        return {
            "methods": list(self.methods),
            "pattern": self.pattern,
            "target": self.target.describe(),
            "middleware": list(self.middleware_aliases),
        }

    def __repr__(self) -> str:
        return f"<Route [{'|'.join(self.methods)}] {self.pattern} -> {self.target.describe()}>"


__all__ = [
    "Target",
    "CallableTarget",
    "ControllerTarget",
    "make_target",
    "normalize_methods",
    "RouteMatch",
    "Route",
]
