"""Errors - Exception taxonomy for routing and dispatch.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Registration-time errors are programmer errors and propagate out of setup.
Dispatch-time errors are always converted into a response by the
RequestHandler; each carries the numeric ``code`` used for that mapping.
"""

from __future__ import annotations

from typing import Any, Optional


class RouterError(Exception):
    """Base class for all router errors."""

    code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        self.message = message if message is not None else self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


# Registration-time errors


class CompileError(RouterError):
    """Malformed route pattern or disallowed constraint characters."""
    pass


class InvalidMethodError(RouterError):
    """HTTP method outside the allowed vocabulary."""

    code = 405


class InvalidTargetError(RouterError):
    """Route target is neither callable nor a "Class@method" string."""
    pass


class DuplicateAliasError(RouterError):
    """Middleware alias registered more than once."""
    pass


class UnknownAliasError(RouterError):
    """Middleware alias was never registered."""
    pass


class NoRouteToAttachError(RouterError):
    """Middleware attached before any route was registered."""
    pass


class InvalidMiddlewareTypeError(RouterError):
    """Bound type does not expose ``handle(request, next)``."""
    pass


class RegistrationClosedError(RouterError):
    """Router was mutated after dispatch began."""
    pass


# Dispatch-time errors


class RouteNotFoundError(RouterError):
    """No registered route matches the request."""

    code = 404
    default_message = "Route not found"


class TargetResolutionError(RouterError):
    """Controller class or method could not be located or instantiated."""
    pass


class ChainExhaustedError(RouterError):
    """Continuation invoked after the chain was fully consumed."""

    default_message = "Middleware chain already consumed"


class InvalidStatusCodeError(RouterError):
    """Status code outside the recognized set."""
    pass


class HTTPError(RouterError):
    """Raised by handlers to fail with a specific status code.

    Usage:
        raise HTTPError("Not implemented yet", code=501)
    """

    def __init__(self, message: Optional[str] = None, code: int = 500):
        super().__init__(message, code)


def error_code(exc: BaseException, default: int = 500) -> int:
    """Get the numeric code associated with an exception."""
    code: Any = getattr(exc, "code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return default


def error_message(exc: BaseException) -> str:
    """Get the human readable message of an exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str):
        return message
    return str(exc)


__all__ = [
    "RouterError",
    "CompileError",
    "InvalidMethodError",
    "InvalidTargetError",
    "DuplicateAliasError",
    "UnknownAliasError",
    "NoRouteToAttachError",
    "InvalidMiddlewareTypeError",
    "RegistrationClosedError",
    "RouteNotFoundError",
    "TargetResolutionError",
    "ChainExhaustedError",
    "InvalidStatusCodeError",
    "HTTPError",
    "error_code",
    "error_message",
]
